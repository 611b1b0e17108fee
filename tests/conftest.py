import asyncio
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from broker.publisher import AnalyticsPublisher
from order_service.app import create_app
from order_service.notifier import DependencyNotifier
from order_service.service import OrderService
from order_service.store import OrderStore

PAYMENT_URL = "http://payment.test"
SHIPPING_URL = "http://shipping.test"

VALID_PAYLOAD = {
    "customerId": "cust-1",
    "paymentMethodId": "pm-1",
    "items": [{"sku": "SKU-1", "quantity": 2, "unitPrice": 9.99}],
}


class RecordingPublisher(AnalyticsPublisher):
    """Keeps published events instead of talking to a broker."""

    def __init__(self):
        super().__init__()
        self.events = []

    def publish(self, event):
        self.events.append(event)


class DownstreamStub:
    """httpx handler standing in for the payment and shipping services."""

    def __init__(self, payment_status=200, shipping_status=200, fail_with=None):
        self.payment_status = payment_status
        self.shipping_status = shipping_status
        self.fail_with = fail_with
        self.calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append((request.url.path, json.loads(request.content)))
        if self.fail_with is not None:
            raise self.fail_with("simulated failure", request=request)
        if request.url.host == "payment.test":
            return httpx.Response(self.payment_status, json={"status": "AUTHORIZED"})
        return httpx.Response(self.shipping_status, json={"status": "CREATED"})

    @property
    def paths(self):
        return [path for path, _ in self.calls]


# -----------------------------------------------------------------------------
# Fake aio-pika objects
# -----------------------------------------------------------------------------


async def _forever():
    await asyncio.Event().wait()


class FakeExchange:
    def __init__(self, confirm=None):
        self.published = []
        self._confirm = confirm

    async def publish(self, message, routing_key, mandatory=True):
        self.published.append((routing_key, message))
        if self._confirm is not None:
            await self._confirm()


class FakeChannel:
    def __init__(self, exchange):
        self.exchange = exchange
        self.publisher_confirms = None

    async def declare_exchange(self, name, type=None, durable=False):
        self.exchange.name = name
        self.exchange.durable = durable
        return self.exchange


class FakeConnection:
    def __init__(self, confirm=None, close_delay=0.0):
        self.exchange = FakeExchange(confirm)
        self.channel_obj = FakeChannel(self.exchange)
        self.close_calls = 0
        self._close_delay = close_delay

    async def channel(self, publisher_confirms=True):
        self.channel_obj.publisher_confirms = publisher_confirms
        return self.channel_obj

    async def close(self):
        self.close_calls += 1
        if self._close_delay:
            await asyncio.sleep(self._close_delay)


class FakeConnect:
    """Connection factory with the aio_pika.connect call shape."""

    def __init__(self, connection=None, error=None, hang=False):
        self.connection = connection
        self.error = error
        self.hang = hang
        self.calls = []

    async def __call__(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.hang:
            await _forever()
        if self.error is not None:
            raise self.error
        return self.connection


@pytest.fixture
def downstream():
    return DownstreamStub()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def store():
    return OrderStore()


def make_service(store, downstream, publisher, synthesize_missing=True):
    notifier = DependencyNotifier(
        payment_url=PAYMENT_URL,
        shipping_url=SHIPPING_URL,
        timeout_ms=200,
        transport=httpx.MockTransport(downstream),
    )
    return OrderService(store, notifier, publisher, synthesize_missing=synthesize_missing)


@pytest.fixture
def service(store, downstream, publisher):
    return make_service(store, downstream, publisher)


@pytest.fixture
def client(service):
    with TestClient(create_app(service)) as c:
        yield c
