"""
Tests for the registration -> payment -> certificate pipeline
"""

import json
from decimal import Decimal

import pytest
from fastapi import HTTPException

from fdp_portal.schemas.payment import RefundRequest
from fdp_portal.services.registration_service import parse_webhook_payload


def _signed(gateway, payload: dict, timestamp: str = "1700000000"):
    body = json.dumps(payload).encode()
    return body, gateway.compute_webhook_signature(body, timestamp), timestamp


def test_parse_webhook_payload_shapes():
    nested = {"data": {"order": {"order_id": "ORDER_1"}, "payment": {"payment_status": "SUCCESS", "cf_payment_id": 42}}}
    flat = {"orderId": "ORDER_2", "paymentStatus": "FAILED", "paymentId": "p2"}

    assert parse_webhook_payload(nested) == ("ORDER_1", "SUCCESS", "42")
    assert parse_webhook_payload(flat) == ("ORDER_2", "FAILED", "p2")
    assert parse_webhook_payload({}) == (None, None, None)


async def test_faculty_registration_end_to_end(
    registrations, gateway, store, make_event, faculty_form, email_transport, whatsapp_transport
):
    event = await make_event()

    result = await registrations.register_faculty(faculty_form(event["id"]))

    registration = result["registration"]
    assert registration["payment_status"] == "pending"
    assert registration["registration_type"] == "individual"
    order_id = result["payment_order"]["order_id"]
    payment = await store.get_payment_by_order_id(order_id)
    assert payment["amount"] == Decimal("1500.00")
    assert payment["status"] == "pending"

    signature = gateway.compute_signature(order_id, "cf_pay_1")
    await registrations.verify_payment(order_id, "cf_pay_1", signature, "upi")

    registration = await store.get_faculty_registration(registration["id"])
    assert registration["payment_status"] == "completed"
    assert registration["amount_paid"] == Decimal("1500.00")
    payment = await store.get_payment_by_order_id(order_id)
    assert payment["status"] == "success"
    assert payment["payment_method"] == "upi"

    assert len(email_transport.sent) == 1
    assert email_transport.sent[0].to == "j@x.com"
    assert len(whatsapp_transport.sent) == 1
    assert whatsapp_transport.sent[0].to == "+911234567890"

    # A webhook for the same order must not notify again
    body, webhook_signature, timestamp = _signed(
        gateway, {"data": {"order": {"order_id": order_id}, "payment": {"payment_status": "SUCCESS", "cf_payment_id": "cf_pay_1"}}}
    )
    assert await registrations.handle_webhook(body, webhook_signature, timestamp) is True
    assert len(email_transport.sent) == 1
    assert len(whatsapp_transport.sent) == 1


async def test_faculty_under_host_college(registrations, store, make_event, faculty_form, host_college_form):
    event = await make_event()
    college = (await registrations.register_host_college(host_college_form(event["id"])))["college"]

    result = await registrations.register_faculty(faculty_form(event["id"], host_college_id=college["id"]))

    assert result["registration"]["registration_type"] == "host_college"
    assert [f["id"] for f in await registrations.list_host_college_faculty(college["id"])] == [result["registration"]["id"]]
    host_payment = (await store.list_payments_for_entity("host_college", college["id"]))[0]
    assert host_payment["amount"] == Decimal("5000.00")


async def test_host_college_from_other_event_is_rejected(
    registrations, make_event, faculty_form, host_college_form
):
    event = await make_event()
    other = await make_event(title="Other")
    college = (await registrations.register_host_college(host_college_form(other["id"])))["college"]

    with pytest.raises(HTTPException) as exc:
        await registrations.register_faculty(faculty_form(event["id"], host_college_id=college["id"]))

    assert exc.value.status_code == 400


async def test_closed_and_full_events_reject_registrations(
    registrations, paid_faculty, make_event, faculty_form
):
    cancelled = await make_event(status="cancelled")
    with pytest.raises(HTTPException) as exc:
        await registrations.register_faculty(faculty_form(cancelled["id"]))
    assert exc.value.status_code == 400

    full = await make_event(max_participants=1)
    await paid_faculty(event=full)
    with pytest.raises(HTTPException) as exc:
        await registrations.register_faculty(faculty_form(full["id"], email="late@x.com"))
    assert exc.value.status_code == 400


async def test_unknown_event_is_not_found(registrations, faculty_form):
    with pytest.raises(HTTPException) as exc:
        await registrations.register_faculty(faculty_form("missing"))

    assert exc.value.status_code == 404


async def test_forged_verification_changes_nothing(registrations, store, make_event, faculty_form, email_transport):
    event = await make_event()
    result = await registrations.register_faculty(faculty_form(event["id"]))
    order_id = result["payment_order"]["order_id"]

    with pytest.raises(HTTPException) as exc:
        await registrations.verify_payment(order_id, "cf_pay_1", "forged")

    assert exc.value.status_code == 400
    assert (await store.get_payment_by_order_id(order_id))["status"] == "pending"
    assert email_transport.sent == []


async def test_invalid_webhook_signature_writes_nothing(registrations, gateway, store, make_event, faculty_form):
    event = await make_event()
    result = await registrations.register_faculty(faculty_form(event["id"]))
    order_id = result["payment_order"]["order_id"]
    body, _, timestamp = _signed(gateway, {"orderId": order_id, "paymentStatus": "SUCCESS"})

    with pytest.raises(HTTPException) as exc:
        await registrations.handle_webhook(body, "not-the-signature", timestamp)

    assert exc.value.status_code == 401
    assert (await store.get_payment_by_order_id(order_id))["status"] == "pending"
    assert (await store.get_faculty_registration(result["registration"]["id"]))["payment_status"] == "pending"


async def test_webhook_unknown_order_and_bad_body(registrations, gateway):
    body, signature, timestamp = _signed(gateway, {"orderId": "ORDER_unknown", "paymentStatus": "SUCCESS"})
    assert await registrations.handle_webhook(body, signature, timestamp) is False

    body, signature, timestamp = _signed(gateway, {"data": {}})
    with pytest.raises(HTTPException) as exc:
        await registrations.handle_webhook(body, signature, timestamp)
    assert exc.value.status_code == 400

    raw = b"not json"
    with pytest.raises(HTTPException) as exc:
        await registrations.handle_webhook(raw, gateway.compute_webhook_signature(raw, timestamp), timestamp)
    assert exc.value.status_code == 400


async def test_failed_webhook_marks_registration_failed(
    registrations, gateway, store, make_event, faculty_form, email_transport
):
    event = await make_event()
    result = await registrations.register_faculty(faculty_form(event["id"]))
    order_id = result["payment_order"]["order_id"]
    body, signature, timestamp = _signed(gateway, {"orderId": order_id, "paymentStatus": "FAILED"})

    assert await registrations.handle_webhook(body, signature, timestamp) is True

    assert (await store.get_payment_by_order_id(order_id))["status"] == "failed"
    assert (await store.get_faculty_registration(result["registration"]["id"]))["payment_status"] == "failed"
    assert [m.subject for m in email_transport.sent] == [f"Payment Failed - {event['title']}"]


async def test_feedback_twice_issues_one_certificate(registrations, paid_faculty, store, email_transport):
    faculty = await paid_faculty()

    first = await registrations.submit_feedback(faculty["id"])
    second = await registrations.submit_feedback(faculty["id"])

    assert first["certificate_status"] == "generated"
    assert second["certificate_status"] == "already_exists"
    assert second["certificate"]["certificate_id"] == first["certificate"]["certificate_id"]
    assert len(await store.list_certificates(faculty["fdp_id"])) == 1
    assert second["registration"]["feedback_submitted"] is True
    assert second["registration"]["certificate_generated"] is True
    # confirmation + certificate
    assert len(email_transport.sent) == 2


async def test_feedback_before_payment_issues_nothing(registrations, make_event, faculty_form, store):
    event = await make_event()
    result = await registrations.register_faculty(faculty_form(event["id"]))

    outcome = await registrations.submit_feedback(result["registration"]["id"])

    assert outcome["certificate_status"] == "not_eligible"
    assert outcome["certificate"] is None
    assert outcome["registration"]["feedback_submitted"] is True
    assert await store.list_certificates(event["id"]) == []


async def test_admin_generation_requires_payment(registrations, make_event, faculty_form):
    event = await make_event()
    result = await registrations.register_faculty(faculty_form(event["id"]))

    with pytest.raises(HTTPException) as exc:
        await registrations.generate_certificate(result["registration"]["id"])

    assert exc.value.status_code == 400


async def test_bulk_generation_isolates_failures(registrations, paid_faculty, make_event, pdf_engine, store):
    event = await make_event()
    await paid_faculty(event=event, feedback=True, name="Asha Rao", email="a@x.com")
    await paid_faculty(event=event, feedback=True, name="Broken Render", email="b@x.com")
    await paid_faculty(event=event, feedback=True, name="Chen Li", email="c@x.com")
    await paid_faculty(event=event, feedback=False, name="No Feedback", email="d@x.com")
    pdf_engine.fail_marker = "Broken Render"

    summary = await registrations.bulk_generate_certificates(event["id"])

    assert summary["total"] == 3
    assert summary["generated"] == 2
    statuses = sorted(item["status"] for item in summary["results"])
    assert statuses == ["error", "generated", "generated"]
    assert len(await store.list_certificates(event["id"])) == 2

    # Already issued registrations are skipped on the next run
    rerun = await registrations.bulk_generate_certificates(event["id"])
    assert rerun["generated"] == 0
    assert [item["status"] for item in rerun["results"]] == ["error"]


async def test_verify_certificate(registrations, paid_faculty):
    faculty = await paid_faculty()
    certificate = await registrations.generate_certificate(faculty["id"])

    verified = await registrations.verify_certificate(certificate["certificate_id"])
    assert verified["valid"] is True
    assert verified["participant_name"] == "Jane Doe"

    with pytest.raises(HTTPException) as exc:
        await registrations.verify_certificate("CERT-0-NOPE")
    assert exc.value.status_code == 404


async def test_refund(registrations, paid_faculty, store, gateway_stub):
    faculty = await paid_faculty()
    payment = (await store.list_payments_for_entity("faculty", faculty["id"]))[0]

    with pytest.raises(HTTPException) as exc:
        await registrations.refund_payment(payment["order_id"], RefundRequest(amount=Decimal("2000"), reason="Too much"))
    assert exc.value.status_code == 400

    result = await registrations.refund_payment(payment["order_id"], RefundRequest(reason="Cancelled"))

    assert result["payment"]["status"] == "refunded"
    assert result["payment"]["gateway_response"]["refund"]["refund_status"] == "PENDING"
    assert (await store.get_faculty_registration(faculty["id"]))["payment_status"] == "refunded"


async def test_refunded_payment_is_final(registrations, paid_faculty, store, gateway, email_transport):
    faculty = await paid_faculty()
    payment = (await store.list_payments_for_entity("faculty", faculty["id"]))[0]
    order_id = payment["order_id"]
    await registrations.refund_payment(order_id, RefundRequest(reason="Cancelled"))
    sent_before = len(email_transport.sent)

    body, signature, timestamp = _signed(gateway, {"orderId": order_id, "paymentStatus": "SUCCESS"})
    await registrations.handle_webhook(body, signature, timestamp)
    await registrations.verify_payment(order_id, "cf_pay_1", gateway.compute_signature(order_id, "cf_pay_1"))

    assert (await store.get_payment_by_order_id(order_id))["status"] == "refunded"
    assert (await store.get_faculty_registration(faculty["id"]))["payment_status"] == "refunded"
    assert len(email_transport.sent) == sent_before


async def test_late_failure_keeps_successful_payment(registrations, paid_faculty, store, gateway, email_transport):
    faculty = await paid_faculty()
    order_id = (await store.list_payments_for_entity("faculty", faculty["id"]))[0]["order_id"]
    sent_before = len(email_transport.sent)

    body, signature, timestamp = _signed(gateway, {"orderId": order_id, "paymentStatus": "FAILED"})
    assert await registrations.handle_webhook(body, signature, timestamp) is True

    assert (await store.get_payment_by_order_id(order_id))["status"] == "success"
    assert (await store.get_faculty_registration(faculty["id"]))["payment_status"] == "completed"
    assert len(email_transport.sent) == sent_before
