"""
Tests for the entity store
"""

from decimal import Decimal

from fdp_portal.services.entity_store import to_money


def test_to_money_rounds_to_two_places():
    assert to_money("1500") == Decimal("1500.00")
    assert to_money(99.999) == Decimal("100.00")
    assert to_money(None) == Decimal("0.00")


async def test_create_event_fills_id_and_timestamps(make_event):
    event = await make_event()

    assert len(event["id"]) == 36
    assert event["created_at"] is not None
    assert event["updated_at"] is not None
    assert to_money(event["faculty_fee"]) == Decimal("1500.00")


async def test_missing_rows_read_as_none(store):
    assert await store.get_event("does-not-exist") is None
    assert await store.get_payment_by_order_id("ORDER_missing") is None
    assert await store.list_host_colleges("does-not-exist") == []
    assert await store.delete_event("does-not-exist") is False


async def test_update_event_touches_updated_at(store, make_event):
    event = await make_event()

    updated = await store.update_event(event["id"], {"title": "Renamed", "id": "ignored"})

    assert updated["id"] == event["id"]
    assert updated["title"] == "Renamed"
    assert updated["updated_at"] >= event["updated_at"]


async def test_only_one_default_template(store):
    first = await store.create_certificate_template({"name": "A", "html_template": "<p>A</p>", "is_default": True})
    second = await store.create_certificate_template({"name": "B", "html_template": "<p>B</p>", "is_default": True})

    default = await store.get_default_certificate_template()
    assert default["id"] == second["id"]
    assert (await store.get_certificate_template(first["id"]))["is_default"] is False


async def test_coupon_lookup_ignores_inactive_codes(store):
    await store.create_coupon({
        "code": "OLD10",
        "discount_type": "percentage",
        "discount_value": Decimal("10"),
        "is_active": False,
    })

    assert await store.get_coupon_by_code("OLD10") is None
    assert await store.coupon_code_exists("OLD10") is True


async def test_event_analytics_counts_paid_registrations(store, make_event):
    event = await make_event()
    await store.create_faculty_registration({
        "fdp_id": event["id"], "registration_type": "individual", "name": "Paid",
        "email": "p@x.com", "phone": "+911111111111", "institution": "X",
        "payment_status": "completed", "amount_paid": Decimal("1500.00"),
    })
    await store.create_faculty_registration({
        "fdp_id": event["id"], "registration_type": "individual", "name": "Unpaid",
        "email": "u@x.com", "phone": "+912222222222", "institution": "X",
        "payment_status": "pending",
    })
    await store.create_host_college({
        "fdp_id": event["id"], "college_name": "C", "address": "A", "contact_person": "P",
        "email": "c@x.com", "phone": "+913333333333",
        "payment_status": "completed", "amount_paid": Decimal("5000.00"),
    })

    analytics = await store.get_event_analytics(event["id"])

    assert analytics["total_faculty"] == 1
    assert analytics["total_host_colleges"] == 1
    assert analytics["total_revenue"] == Decimal("6500.00")
    assert analytics["certificates_generated"] == 0

    summary = await store.get_dashboard_summary()
    assert summary["total_events"] == 1
    assert summary["total_faculty"] == 2
    assert summary["paid_faculty"] == 1
