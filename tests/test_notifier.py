import asyncio
import logging
import math

import httpx
import pytest

from order_service.builder import build_order
from order_service.notifier import DependencyNotifier
from order_service.validation import validate_create

from conftest import PAYMENT_URL, SHIPPING_URL, VALID_PAYLOAD, DownstreamStub


def _notify(handler, order=None):
    notifier = DependencyNotifier(
        payment_url=PAYMENT_URL + "/",
        shipping_url=SHIPPING_URL,
        timeout_ms=200,
        transport=httpx.MockTransport(handler),
    )
    if order is None:
        order = build_order("order-1", validate_create(VALID_PAYLOAD))
    return asyncio.run(notifier.notify(order, "pm-1"))


def test_payment_then_shipping_with_expected_bodies():
    stub = DownstreamStub()
    payment, shipping = _notify(stub)

    assert stub.calls == [
        (
            "/payments/authorize",
            {"orderId": "order-1", "amount": 19.98, "currency": "USD", "paymentMethodId": "pm-1"},
        ),
        ("/shipments", {"orderId": "order-1", "destinationPostalCode": "10001"}),
    ]
    assert payment.ok and payment.body == {"status": "AUTHORIZED"}
    assert shipping.ok and shipping.body == {"status": "CREATED"}


@pytest.mark.parametrize("error", [httpx.ConnectError, httpx.ReadTimeout])
def test_transport_failures_are_not_raised(error, caplog):
    stub = DownstreamStub(fail_with=error)
    with caplog.at_level(logging.WARNING, logger="order_service.notifier"):
        payment, shipping = _notify(stub)

    # both calls are still attempted, exactly once each
    assert stub.paths == ["/payments/authorize", "/shipments"]
    assert not payment.ok and payment.body is None
    assert not shipping.ok and shipping.body is None
    assert error.__name__ in payment.error
    assert "payment request" in caplog.text


def test_non_2xx_is_a_failed_result():
    payment, shipping = _notify(DownstreamStub(payment_status=503, shipping_status=404))
    assert payment.error == "HTTP 503"
    assert shipping.error == "HTTP 404"


def test_undecodable_body_is_a_failed_result():
    def handler(request):
        return httpx.Response(200, content=b"<html>ok</html>")

    payment, shipping = _notify(handler)
    assert payment.error == "invalid JSON body"
    assert shipping.error == "invalid JSON body"


def test_payment_failure_does_not_skip_shipping():
    payment, shipping = _notify(DownstreamStub(payment_status=500))
    assert not payment.ok
    assert shipping.ok


def test_timeout_is_applied_to_each_call():
    seen = []

    def handler(request):
        seen.append(request.extensions["timeout"])
        return httpx.Response(200, json={})

    _notify(handler)
    assert seen == [{"connect": 0.2, "read": 0.2, "write": 0.2, "pool": 0.2}] * 2


def test_non_finite_amount_is_not_sent(caplog):
    stub = DownstreamStub()
    order = build_order("order-1", validate_create(VALID_PAYLOAD))
    order = order.model_copy(update={"total_amount": math.inf})

    with caplog.at_level(logging.WARNING, logger="order_service.notifier"):
        payment, shipping = _notify(stub, order)

    assert stub.paths == ["/shipments"]
    assert not payment.ok and payment.body is None
    assert payment.error.startswith("unencodable request body")
    assert shipping.ok
    assert "payment request" in caplog.text
