"""
Pydantic v2 data models for orders, downstream requests, and analytics events.

Framework-agnostic; safe to use from FastAPI (request/response bodies) or
any service. Attributes are snake_case in Python and camelCase on the wire;
either spelling is accepted on input.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from common.timeutils import is_valid_timestamp


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderStatus(str, Enum):
    PENDING_PAYMENT = "PENDING_PAYMENT"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    CANCELLED = "CANCELLED"


class AnalyticsPriority(str, Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"


def order_total(items: Iterable[OrderItem]) -> float:
    """
    Plain sum of unit price x quantity; no rounding.

    Raises OverflowError when a quantity is too large to become a float.
    """
    return sum(float(item.unit_price) * int(item.quantity) for item in items)


# -----------------------------------------------------------------------------
# Request/response and domain models
# -----------------------------------------------------------------------------


class OrderItem(_WireModel):
    """Line item: SKU, integral quantity >= 1 and a finite unit price."""

    model_config = ConfigDict(frozen=True)

    sku: str
    quantity: int = Field(..., ge=1, description="Quantity must be at least 1")
    unit_price: float = Field(..., allow_inf_nan=False)

    @field_validator("sku", mode="before")
    @classmethod
    def _sku_not_blank(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("sku must be a non-blank string")
        return value

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity_is_integral(cls, value: Any) -> int:
        # bool is an int subclass; JSON true is not a quantity
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("quantity must be an integer")
        if isinstance(value, float) and not value.is_integer():
            raise ValueError("quantity must be an integer")
        return int(value)

    @field_validator("unit_price", mode="before")
    @classmethod
    def _unit_price_is_number(cls, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("unitPrice must be a number")
        return value


class OrderCreateRequest(_WireModel):
    """Request to create an order: customer, payment method and at least one item."""

    customer_id: str = Field(..., min_length=1)
    payment_method_id: str = Field(..., min_length=1)
    items: list[OrderItem] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _total_is_finite(self) -> OrderCreateRequest:
        try:
            total = order_total(self.items)
        except OverflowError:
            total = math.inf
        if not math.isfinite(total):
            raise ValueError("order total is not a finite number")
        return self


class OrderListQuery(_WireModel):
    """Optional, ANDed filters for listing orders."""

    customer_id: str | None = None
    status: OrderStatus | None = None
    from_: str | None = Field(None, alias="from")
    to: str | None = None

    @field_validator("from_", "to")
    @classmethod
    def _timestamp_profile(cls, value: str | None) -> str | None:
        if value is not None and not is_valid_timestamp(value):
            raise ValueError("not a valid date-time")
        return value


class OrderCancelRequest(_WireModel):
    """Optional cancellation body."""

    reason: str | None = Field(None, max_length=256)


class Order(_WireModel):
    """Order aggregate. Frozen: status changes produce a copy."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    customer_id: str
    status: OrderStatus
    items: tuple[OrderItem, ...] = Field(..., min_length=1)
    total_amount: float
    created_at: str
    cancelled_at: str | None = None

    @model_validator(mode="after")
    def _cancelled_at_matches_status(self) -> Order:
        cancelled = self.status is OrderStatus.CANCELLED
        if cancelled != (self.cancelled_at is not None):
            raise ValueError("cancelledAt must be set exactly when status is CANCELLED")
        return self


# -----------------------------------------------------------------------------
# Outbound requests (payment + shipping collaborators)
# -----------------------------------------------------------------------------


class PaymentAuthorizationRequest(_WireModel):
    """Body for POST {payment}/payments/authorize."""

    order_id: str
    amount: float
    currency: str = "USD"
    payment_method_id: str


class ShipmentRequest(_WireModel):
    """Body for POST {shipping}/shipments."""

    order_id: str
    destination_postal_code: str


class DependencyResult(BaseModel):
    """
    Outcome of one best-effort downstream call. body is None whenever the
    call failed; error then says why.
    """

    service: str
    body: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# -----------------------------------------------------------------------------
# Events (analytics broker)
# -----------------------------------------------------------------------------


class AnalyticsNotificationEvent(_WireModel):
    """Emitted per order lifecycle transition; never stored."""

    model_config = ConfigDict(extra="forbid")

    notification_id: str
    request_id: str
    title: str
    body: str
    priority: AnalyticsPriority = AnalyticsPriority.NORMAL

    @classmethod
    def order_created(cls, order: Order, notification_id: str) -> AnalyticsNotificationEvent:
        """Build the OrderCreated notification for an order."""
        return cls(
            notification_id=notification_id,
            request_id=order.id,
            title="OrderCreated",
            body=f"Order {order.id} created for customer {order.customer_id}",
            priority=AnalyticsPriority.HIGH,
        )

    @classmethod
    def order_cancelled(
        cls,
        order: Order,
        notification_id: str,
        reason: str | None = None,
    ) -> AnalyticsNotificationEvent:
        """Build the OrderCancelled notification for an order."""
        body = f"Order {order.id} cancelled for customer {order.customer_id}"
        if reason:
            body = f"{body}: {reason}"
        return cls(
            notification_id=notification_id,
            request_id=order.id,
            title="OrderCancelled",
            body=body,
            priority=AnalyticsPriority.NORMAL,
        )

    def to_json_bytes(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode()
