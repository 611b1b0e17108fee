"""
In-memory order table.

Volatile by design: contents are lost on restart. One lock serializes every
read and write so concurrent requests never see a torn table.
"""

from __future__ import annotations

import threading

from common.models import Order, OrderListQuery


class OrderStore:
    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}
        self._lock = threading.Lock()

    def insert(self, order: Order) -> None:
        """Store order under its id. Overwrites any existing entry."""
        with self._lock:
            self._orders[order.id] = order

    def get(self, order_id: str) -> Order | None:
        with self._lock:
            return self._orders.get(order_id)

    def list(self, query: OrderListQuery | None = None) -> list[Order]:
        """Orders in insertion order, filtered by query (all filters ANDed)."""
        with self._lock:
            orders = list(self._orders.values())
        if query is None:
            return orders
        return [o for o in orders if matches(o, query)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)


def matches(order: Order, query: OrderListQuery) -> bool:
    """
    from/to are compared as strings against created_at; canonical
    timestamps sort the same lexicographically and chronologically.
    Both bounds are inclusive.
    """
    if query.customer_id is not None and order.customer_id != query.customer_id:
        return False
    if query.status is not None and order.status != query.status:
        return False
    if query.from_ is not None and order.created_at < query.from_:
        return False
    if query.to is not None and order.created_at > query.to:
        return False
    return True
