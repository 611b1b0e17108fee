"""
OrderService: orchestrates create, get, list and cancel.

Create pipeline: validate -> build -> payment -> shipping -> store -> publish.
Downstream and analytics failures never change the caller-visible result;
the only errors a caller sees are input validation failures (and, with
placeholder orders disabled, unknown ids).
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from broker.publisher import AnalyticsPublisher
from common.errors import OrderNotFound
from common.ids import new_notification_id, new_order_id
from common.models import AnalyticsNotificationEvent, Order
from order_service.builder import build_order, build_placeholder_order, cancel_order
from order_service.notifier import DependencyNotifier
from order_service.store import OrderStore, matches
from order_service.validation import validate_cancel, validate_create, validate_list_query

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(
        self,
        store: OrderStore,
        notifier: DependencyNotifier,
        publisher: AnalyticsPublisher,
        synthesize_missing: bool = True,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self.publisher = publisher
        self.synthesize_missing = synthesize_missing

    async def create(self, raw: Any) -> Order:
        payload = validate_create(raw)
        order = build_order(new_order_id(), payload)

        payment, shipping = await self.notifier.notify(order, payload.payment_method_id)
        # Advisory only: a failed call is logged by the notifier and dropped here.
        for result in (payment, shipping):
            if not result.ok:
                logger.info("Order %s: %s unavailable (%s)", order.id, result.service, result.error)

        self.store.insert(order)
        self.publisher.publish(AnalyticsNotificationEvent.order_created(order, new_notification_id()))
        logger.info(
            "Order %s created for customer %s (total %s)", order.id, order.customer_id, order.total_amount
        )
        return order

    def get(self, order_id: str) -> Order:
        """Stored order, or a placeholder when the id is unknown."""
        existing = self.store.get(order_id)
        if existing is not None:
            return existing
        if not self.synthesize_missing:
            raise OrderNotFound()
        return build_placeholder_order(order_id)

    def list(self, params: Mapping[str, str]) -> list[Order]:
        query = validate_list_query(params)
        if self.synthesize_missing and len(self.store) == 0:
            placeholder = build_placeholder_order(new_order_id())
            return [placeholder] if matches(placeholder, query) else []
        return self.store.list(query)

    async def cancel(self, order_id: str, raw: Any = None) -> Order:
        """Cancel unconditionally; repeating the call is harmless."""
        request = validate_cancel(raw)
        cancelled = cancel_order(self.get(order_id))
        self.store.insert(cancelled)
        self.publisher.publish(
            AnalyticsNotificationEvent.order_cancelled(cancelled, new_notification_id(), request.reason)
        )
        logger.info("Order %s cancelled", order_id)
        return cancelled
