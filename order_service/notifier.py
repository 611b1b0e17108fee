"""
Best-effort calls to the payment and shipping services.

Every call is attempted once with a bounded timeout. Transport errors,
non-2xx responses and undecodable bodies come back as a failed
DependencyResult; nothing here raises to the caller.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from pydantic import BaseModel

from common.models import (
    DependencyResult,
    Order,
    PaymentAuthorizationRequest,
    ShipmentRequest,
)
from order_service.config import (
    DEPENDENCY_TIMEOUT_MS,
    DESTINATION_POSTAL_CODE,
    PAYMENT_URL,
    SHIPPING_URL,
)

logger = logging.getLogger(__name__)


class DependencyNotifier:
    def __init__(
        self,
        payment_url: str = PAYMENT_URL,
        shipping_url: str = SHIPPING_URL,
        timeout_ms: int = DEPENDENCY_TIMEOUT_MS,
        destination_postal_code: str = DESTINATION_POSTAL_CODE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.payment_url = payment_url.rstrip("/")
        self.shipping_url = shipping_url.rstrip("/")
        self.timeout = timeout_ms / 1000.0
        self.destination_postal_code = destination_postal_code
        self._transport = transport

    async def notify(
        self, order: Order, payment_method_id: str
    ) -> tuple[DependencyResult, DependencyResult]:
        """Authorize payment, then request a shipment. Sequential, never raises."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            payment = await self.authorize_payment(client, order, payment_method_id)
            shipping = await self.create_shipment(client, order)
        return payment, shipping

    async def authorize_payment(
        self, client: httpx.AsyncClient, order: Order, payment_method_id: str
    ) -> DependencyResult:
        body = PaymentAuthorizationRequest(
            order_id=order.id,
            amount=order.total_amount,
            payment_method_id=payment_method_id,
        )
        return await self._post_json(client, "payment", f"{self.payment_url}/payments/authorize", body)

    async def create_shipment(self, client: httpx.AsyncClient, order: Order) -> DependencyResult:
        # Orders carry no address; the postal code is a configured constant.
        body = ShipmentRequest(
            order_id=order.id,
            destination_postal_code=self.destination_postal_code,
        )
        return await self._post_json(client, "shipping", f"{self.shipping_url}/shipments", body)

    async def _post_json(
        self,
        client: httpx.AsyncClient,
        service: str,
        url: str,
        body: BaseModel,
    ) -> DependencyResult:
        try:
            content = json.dumps(body.model_dump(by_alias=True), allow_nan=False)
        except ValueError as e:
            logger.warning("%s request to %s not sent, body is not valid JSON: %s", service, url, e)
            return DependencyResult(service=service, error=f"unencodable request body: {e}")

        try:
            resp = await client.post(
                url, content=content, headers={"content-type": "application/json"}
            )
        except httpx.HTTPError as e:
            logger.warning("%s request to %s failed: %s", service, url, e)
            return DependencyResult(service=service, error=f"{type(e).__name__}: {e}")

        if not resp.is_success:
            logger.warning("%s request to %s returned %s", service, url, resp.status_code)
            return DependencyResult(service=service, error=f"HTTP {resp.status_code}")

        try:
            data: Any = resp.json()
        except ValueError as e:
            logger.warning("%s response from %s was not JSON: %s", service, url, e)
            return DependencyResult(service=service, error="invalid JSON body")

        return DependencyResult(service=service, body=data)
