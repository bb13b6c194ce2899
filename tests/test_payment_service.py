"""
Tests for the Cashfree gateway adapter
"""

import json
from decimal import Decimal

import pytest
from fastapi import HTTPException

from fdp_portal.schemas.payment import CustomerDetails
from fdp_portal.services.payment_service import CashfreeGateway


async def _order(gateway, event):
    return await gateway.create_order(
        amount=Decimal("1500"),
        entity_type="faculty",
        entity_id="faculty-1",
        fdp_id=event["id"],
        customer=CustomerDetails(customer_id="faculty-1", email="j@x.com", phone="+911234567890", name="Jane Doe"),
    )


def test_order_ids_are_unique_and_prefixed():
    first = CashfreeGateway.generate_order_id()
    second = CashfreeGateway.generate_order_id()

    assert first.startswith("ORDER_")
    assert first != second


async def test_create_order_moves_payment_to_pending(gateway, gateway_stub, store, make_event):
    event = await make_event()

    order = await _order(gateway, event)

    assert order["payment_session_id"] == "session_abc"
    payment = await store.get_payment_by_order_id(order["order_id"])
    assert payment["status"] == "pending"
    assert payment["amount"] == Decimal("1500.00")
    assert payment["gateway_response"]["cf_order_id"] == "cf_1"

    sent = json.loads(gateway_stub.requests[0].content)
    assert sent["order_amount"] == 1500.0
    assert sent["order_meta"]["notify_url"] == "http://api.test/api/payments/webhook"
    assert gateway_stub.requests[0].headers["x-client-id"] == "test-app"


async def test_create_order_gateway_failure_leaves_created_row(gateway, gateway_stub, store, make_event):
    event = await make_event()
    gateway_stub.fail_orders = True

    with pytest.raises(HTTPException) as exc:
        await _order(gateway, event)

    assert exc.value.status_code == 502
    payments = await store.list_payments(event["id"])
    assert [p["status"] for p in payments] == ["created"]


async def test_create_order_requires_credentials(settings, store, make_event):
    event = await make_event()
    settings.CASHFREE_SECRET_KEY = None
    gateway = CashfreeGateway(settings, store)

    with pytest.raises(HTTPException) as exc:
        await _order(gateway, event)

    assert exc.value.status_code == 500
    assert await store.list_payments(event["id"]) == []


async def test_signature_mismatch_skips_gateway(gateway, gateway_stub):
    assert await gateway.verify_payment("ORDER_1", "cf_pay_1", "forged") is False
    assert gateway_stub.requests == []


async def test_valid_signature_checks_payment_status(gateway, gateway_stub):
    signature = gateway.compute_signature("ORDER_1", "cf_pay_1")

    assert await gateway.verify_payment("ORDER_1", "cf_pay_1", signature) is True
    assert gateway_stub.requests[0].url.path.endswith("/orders/ORDER_1/payments/cf_pay_1")

    gateway_stub.payment_status = "FAILED"
    assert await gateway.verify_payment("ORDER_1", "cf_pay_1", signature) is False


def test_webhook_signature(gateway):
    body = b'{"orderId": "ORDER_1"}'
    signature = gateway.compute_webhook_signature(body, "1700000000")

    assert gateway.verify_webhook_signature(body, signature, "1700000000") is True
    assert gateway.verify_webhook_signature(body + b" ", signature, "1700000000") is False
    assert gateway.verify_webhook_signature(body, signature, None) is False
    assert gateway.verify_webhook_signature(body, None, "1700000000") is False


async def test_refund_posts_to_order(gateway, gateway_stub):
    result = await gateway.initiate_refund("ORDER_1", Decimal("500"), "Duplicate payment")

    assert result["refund_status"] == "PENDING"
    request = gateway_stub.requests[0]
    assert request.url.path.endswith("/orders/ORDER_1/refunds")
    assert json.loads(request.content)["refund_amount"] == 500.0
