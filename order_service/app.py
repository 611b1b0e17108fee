"""
OrderService HTTP API: create, fetch, list and cancel orders.

Run with `uvicorn order_service.app:app` or `python -m order_service`.
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from broker.publisher import AnalyticsPublisher
from common import setup_logging
from common.errors import InvalidCancellation, InvalidPayload, OrderServiceError
from common.models import Order
from order_service.config import (
    LOG_LEVEL,
    PAYMENT_URL,
    SERVICE_NAME,
    SHIPPING_URL,
    SYNTHESIZE_MISSING,
)
from order_service.notifier import DependencyNotifier
from order_service.service import OrderService
from order_service.store import OrderStore

# Logging via common (stdout, timestamps, service name)
setup_logging(SERVICE_NAME, LOG_LEVEL)
logger = logging.getLogger(__name__)


async def _read_json(request: Request, error: type[OrderServiceError]) -> Any:
    """Decoded body, or None when the body is empty. Malformed JSON raises error."""
    body = await request.body()
    if not body.strip():
        return None
    try:
        return json.loads(body)
    except ValueError as e:
        raise error() from e


def create_app(service: OrderService | None = None) -> FastAPI:
    if service is None:
        service = OrderService(
            OrderStore(),
            DependencyNotifier(),
            AnalyticsPublisher(),
            synthesize_missing=SYNTHESIZE_MISSING,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Dependencies: payment=%s, shipping=%s", PAYMENT_URL, SHIPPING_URL)
        yield
        # Let detached analytics publishes finish (each is deadline-bounded).
        await service.publisher.drain()

    app = FastAPI(title="Order Service", lifespan=lifespan)
    app.state.order_service = service

    @app.exception_handler(OrderServiceError)
    async def order_service_error(request: Request, exc: OrderServiceError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.post("/orders", status_code=201, response_model=Order, response_model_exclude_none=True)
    async def create_order(request: Request):
        raw = await _read_json(request, InvalidPayload)
        return await service.create(raw)

    @app.get("/orders", response_model=list[Order], response_model_exclude_none=True)
    async def list_orders(request: Request):
        return service.list(request.query_params)

    @app.get("/orders/{order_id}", response_model=Order, response_model_exclude_none=True)
    async def get_order(order_id: str):
        return service.get(order_id)

    @app.post("/orders/{order_id}/cancel", response_model=Order, response_model_exclude_none=True)
    async def cancel(order_id: str, request: Request):
        raw = await _read_json(request, InvalidCancellation)
        return await service.cancel(order_id, raw)

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": SERVICE_NAME}

    return app


app = create_app()
