"""Analytics broker config and fire-and-forget publisher."""

from broker.config import (
    BROKER_URL,
    EXCHANGE,
    NOTIFICATION_TOPIC,
)
from broker.publisher import (
    AnalyticsPublisher,
    PublishAttempt,
    PublishOutcome,
    PublishState,
)

__all__ = [
    "BROKER_URL",
    "EXCHANGE",
    "NOTIFICATION_TOPIC",
    "AnalyticsPublisher",
    "PublishAttempt",
    "PublishOutcome",
    "PublishState",
]
