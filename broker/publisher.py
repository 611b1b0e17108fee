"""
Fire-and-forget analytics publisher.

Each notification gets its own short-lived broker connection. An attempt
races three completion triggers (publish confirm, connect error, overall
deadline); whichever comes first decides the outcome, and the connection is
closed exactly once afterwards. Failures are logged, never raised.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable

import aio_pika
from aio_pika import DeliveryMode, ExchangeType

from broker.config import (
    BROKER_URL,
    CLOSE_TIMEOUT_MS,
    CONNECT_TIMEOUT_MS,
    EXCHANGE,
    NOTIFICATION_TOPIC,
    PUBLISH_DEADLINE_MS,
)
from common.models import AnalyticsNotificationEvent

logger = logging.getLogger(__name__)

ConnectFactory = Callable[..., Awaitable[aio_pika.abc.AbstractConnection]]


class PublishState(str, Enum):
    IDLE = "IDLE"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"
    PUBLISHING = "PUBLISHING"
    CONNECT_ERROR = "CONNECT_ERROR"
    DEADLINE_EXPIRED = "DEADLINE_EXPIRED"
    DONE = "DONE"


class PublishOutcome(str, Enum):
    PUBLISHED = "PUBLISHED"
    PUBLISH_ERROR = "PUBLISH_ERROR"
    CONNECT_ERROR = "CONNECT_ERROR"
    DEADLINE_EXPIRED = "DEADLINE_EXPIRED"
    CANCELLED = "CANCELLED"


class PublishAttempt:
    """One connect-publish-close cycle for a single event."""

    def __init__(
        self,
        event: AnalyticsNotificationEvent,
        *,
        url: str,
        exchange_name: str,
        topic: str,
        connect_timeout: float,
        deadline: float,
        close_timeout: float,
        connect: ConnectFactory,
    ) -> None:
        self.event = event
        self.state = PublishState.IDLE
        self.outcome: PublishOutcome | None = None
        self._url = url
        self._exchange_name = exchange_name
        self._topic = topic
        self._connect_timeout = connect_timeout
        self._deadline = deadline
        self._close_timeout = close_timeout
        self._connect = connect
        self._connection: aio_pika.abc.AbstractConnection | None = None
        self._completed = False

    async def run(self) -> PublishOutcome:
        outcome: PublishOutcome | None = None
        try:
            outcome = await asyncio.wait_for(self._connect_and_publish(), timeout=self._deadline)
        except asyncio.TimeoutError:
            self.state = PublishState.DEADLINE_EXPIRED
            outcome = PublishOutcome.DEADLINE_EXPIRED
            logger.warning(
                "Analytics notification %s not confirmed within %.0f ms; closing connection",
                self.event.notification_id,
                self._deadline * 1000,
            )
        finally:
            await self._complete(outcome or PublishOutcome.CANCELLED)
        return self.outcome

    async def _connect_and_publish(self) -> PublishOutcome:
        self.state = PublishState.CONNECTING
        try:
            self._connection = await self._connect(self._url, timeout=self._connect_timeout)
        except Exception as e:
            self.state = PublishState.CONNECT_ERROR
            logger.warning("Failed to connect to analytics broker: %s", e)
            return PublishOutcome.CONNECT_ERROR

        self.state = PublishState.CONNECTED
        try:
            channel = await self._connection.channel(publisher_confirms=True)
            exchange = await channel.declare_exchange(
                self._exchange_name, ExchangeType.TOPIC, durable=True
            )
            self.state = PublishState.PUBLISHING
            # Awaiting publish waits for the broker confirm (at-least-once).
            await exchange.publish(
                aio_pika.Message(
                    body=self.event.to_json_bytes(),
                    content_type="application/json",
                    delivery_mode=DeliveryMode.PERSISTENT,
                    message_id=self.event.notification_id,
                ),
                routing_key=self._topic,
                mandatory=False,
            )
        except Exception as e:
            logger.warning("Failed to publish analytics notification on %s: %s", self._topic, e)
            return PublishOutcome.PUBLISH_ERROR

        logger.debug(
            "Analytics notification %s published on %s", self.event.notification_id, self._topic
        )
        return PublishOutcome.PUBLISHED

    async def _complete(self, outcome: PublishOutcome) -> None:
        """Close the connection and record the outcome. Runs at most once."""
        if self._completed:
            return
        self._completed = True
        self.outcome = outcome
        self.state = PublishState.DONE

        connection, self._connection = self._connection, None
        if connection is None:
            return
        try:
            await asyncio.wait_for(connection.close(), timeout=self._close_timeout)
        except Exception as e:
            logger.warning("Failed to close analytics broker connection cleanly: %s", e)


class AnalyticsPublisher:
    """
    Publishes AnalyticsNotificationEvents without blocking the caller.

    publish() schedules a detached task and returns at once; publish_once()
    awaits a single attempt; drain() waits for in-flight attempts, each of
    which is bounded by its own deadline.
    """

    def __init__(
        self,
        url: str = BROKER_URL,
        exchange_name: str = EXCHANGE,
        topic: str = NOTIFICATION_TOPIC,
        connect_timeout_ms: int = CONNECT_TIMEOUT_MS,
        deadline_ms: int = PUBLISH_DEADLINE_MS,
        close_timeout_ms: int = CLOSE_TIMEOUT_MS,
        connect: ConnectFactory = aio_pika.connect,
    ) -> None:
        self.url = url
        self.exchange_name = exchange_name
        self.topic = topic
        self.connect_timeout = connect_timeout_ms / 1000.0
        self.deadline = deadline_ms / 1000.0
        self.close_timeout = close_timeout_ms / 1000.0
        self._connect = connect
        self._pending: set[asyncio.Task] = set()

    def publish(self, event: AnalyticsNotificationEvent) -> asyncio.Task:
        """Start a detached publish attempt. Must be called from a running loop."""
        task = asyncio.get_running_loop().create_task(
            self.publish_once(event),
            name=f"analytics-publish-{event.notification_id}",
        )
        # The loop only keeps weak references to tasks.
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def publish_once(self, event: AnalyticsNotificationEvent) -> PublishOutcome:
        attempt = PublishAttempt(
            event,
            url=self.url,
            exchange_name=self.exchange_name,
            topic=self.topic,
            connect_timeout=self.connect_timeout,
            deadline=self.deadline,
            close_timeout=self.close_timeout,
            connect=self._connect,
        )
        return await attempt.run()

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every in-flight publish attempt to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
