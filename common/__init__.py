"""
Shared common module for the order service and its broker publisher.

Framework-agnostic; no FastAPI dependency. Uses Pydantic v2 for schemas.
"""

from common.errors import (
    InvalidCancellation,
    InvalidPayload,
    InvalidQuery,
    OrderNotFound,
    OrderServiceError,
)
from common.ids import new_notification_id, new_order_id, now_iso
from common.logging import setup_logging
from common.models import (
    AnalyticsNotificationEvent,
    AnalyticsPriority,
    DependencyResult,
    Order,
    OrderCancelRequest,
    OrderCreateRequest,
    OrderItem,
    OrderListQuery,
    OrderStatus,
    PaymentAuthorizationRequest,
    ShipmentRequest,
)
from common.timeutils import is_valid_timestamp, iso_to_dt, utc_now

__all__ = [
    "new_order_id",
    "new_notification_id",
    "now_iso",
    "setup_logging",
    "OrderServiceError",
    "InvalidPayload",
    "InvalidQuery",
    "InvalidCancellation",
    "OrderNotFound",
    "OrderStatus",
    "AnalyticsPriority",
    "OrderItem",
    "OrderCreateRequest",
    "OrderListQuery",
    "OrderCancelRequest",
    "Order",
    "PaymentAuthorizationRequest",
    "ShipmentRequest",
    "DependencyResult",
    "AnalyticsNotificationEvent",
    "utc_now",
    "iso_to_dt",
    "is_valid_timestamp",
]
