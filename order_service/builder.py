"""Pure constructors for Order values. No I/O besides reading the clock."""

from __future__ import annotations

from common.ids import now_iso
from common.models import Order, OrderCreateRequest, OrderItem, OrderStatus, order_total

PLACEHOLDER_SKU = "SKU-DEFAULT"
PLACEHOLDER_UNIT_PRICE = 100.0


def build_order(order_id: str, payload: OrderCreateRequest) -> Order:
    """New PENDING_PAYMENT order; total is the plain sum of price x quantity."""
    return Order(
        id=order_id,
        customer_id=payload.customer_id,
        status=OrderStatus.PENDING_PAYMENT,
        items=payload.items,
        total_amount=order_total(payload.items),
        created_at=now_iso(),
    )


def build_placeholder_order(order_id: str) -> Order:
    """Stand-in order returned for ids the store does not know."""
    item = OrderItem(sku=PLACEHOLDER_SKU, quantity=1, unit_price=PLACEHOLDER_UNIT_PRICE)
    return Order(
        id=order_id,
        customer_id=f"customer-{order_id}",
        status=OrderStatus.CONFIRMED,
        items=[item],
        total_amount=PLACEHOLDER_UNIT_PRICE,
        created_at=now_iso(),
    )


def cancel_order(order: Order) -> Order:
    """Cancelled copy of order. Any prior status is overwritten."""
    return order.model_copy(
        update={"status": OrderStatus.CANCELLED, "cancelled_at": now_iso()}
    )
