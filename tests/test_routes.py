"""
HTTP-level tests against the FastAPI app with services overridden
"""

from decimal import Decimal

import httpx
import pytest

from fdp_portal.auth import create_access_token, create_admin_token, hash_password
from fdp_portal.config import settings as app_settings
from fdp_portal.dependencies import get_event_service, get_registration_service
from fdp_portal.main import app
from fdp_portal.rate_limit import limiter
from fdp_portal.services.event_service import EventService

EVENT_BODY = {
    "title": "Outcome Based Education",
    "category": "NBA",
    "start_date": "2025-01-05T10:00:00",
    "end_date": "2025-01-09T17:00:00",
    "host_fee": "5000",
    "faculty_fee": "1500",
}


@pytest.fixture
async def client(store, registrations):
    limiter.reset()
    app.dependency_overrides[get_event_service] = lambda: EventService(store)
    app.dependency_overrides[get_registration_service] = lambda: registrations
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    token = create_admin_token("admin@fdp.test")
    return {"Authorization": f"Bearer {token}"}


async def test_health(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_login(client, monkeypatch):
    monkeypatch.setattr(app_settings, "ADMIN_EMAIL", "admin@fdp.test")
    monkeypatch.setattr(app_settings, "ADMIN_PASSWORD_HASH", hash_password("correct-horse"))

    bad = await client.post("/api/admin/login", json={"email": "admin@fdp.test", "password": "wrong"})
    assert bad.status_code == 401

    good = await client.post("/api/admin/login", json={"email": "ADMIN@fdp.test", "password": "correct-horse"})
    assert good.status_code == 200
    token = good.json()["access_token"]

    me = await client.get("/api/admin/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json() == {"email": "admin@fdp.test", "role": "admin"}


async def test_login_attempts_are_rate_limited(client, monkeypatch):
    monkeypatch.setattr(app_settings, "ADMIN_EMAIL", "admin@fdp.test")
    monkeypatch.setattr(app_settings, "ADMIN_PASSWORD_HASH", hash_password("correct-horse"))
    attempt = {"email": "admin@fdp.test", "password": "wrong"}

    for _ in range(5):
        assert (await client.post("/api/admin/login", json=attempt)).status_code == 401

    blocked = await client.post("/api/admin/login", json=dict(attempt, password="correct-horse"))

    assert blocked.status_code == 429
    assert blocked.json()["detail"] == "Too many login attempts, please try again after 15 minutes"


async def test_admin_routes_need_a_token(client):
    assert (await client.post("/api/fdp-events", json=EVENT_BODY)).status_code == 401

    forged = {"Authorization": f"Bearer {create_access_token({'email': 'x@y.z', 'role': 'faculty'})}"}
    assert (await client.post("/api/fdp-events", json=EVENT_BODY, headers=forged)).status_code == 401


async def test_event_lifecycle(client, admin_headers):
    created = await client.post("/api/fdp-events", json=EVENT_BODY, headers=admin_headers)
    assert created.status_code == 201
    event = created.json()
    assert event["status"] == "upcoming"
    assert Decimal(event["faculty_fee"]) == Decimal("1500")

    listed = await client.get("/api/fdp-events", params={"active": True})
    assert [e["id"] for e in listed.json()] == [event["id"]]

    inverted = await client.put(
        f"/api/fdp-events/{event['id']}", json={"end_date": "2025-01-01T00:00:00"}, headers=admin_headers
    )
    assert inverted.status_code == 400

    deleted = await client.delete(f"/api/fdp-events/{event['id']}", headers=admin_headers)
    assert deleted.status_code == 204
    assert (await client.get(f"/api/fdp-events/{event['id']}")).status_code == 404


async def test_event_dates_with_offsets_are_stored_as_utc(client, admin_headers):
    body = dict(EVENT_BODY, start_date="2025-01-05T10:00:00+05:30")
    event = (await client.post("/api/fdp-events", json=body, headers=admin_headers)).json()
    assert event["start_date"] == "2025-01-05T04:30:00"

    updated = await client.put(
        f"/api/fdp-events/{event['id']}", json={"end_date": "2025-01-10T00:00:00Z"}, headers=admin_headers
    )

    assert updated.status_code == 200
    assert updated.json()["end_date"] == "2025-01-10T00:00:00"


async def test_event_update_rejects_null_for_required_fields(client, admin_headers):
    event = (await client.post("/api/fdp-events", json=EVENT_BODY, headers=admin_headers)).json()

    for field in ("title", "start_date", "faculty_fee", "status"):
        response = await client.put(f"/api/fdp-events/{event['id']}", json={field: None}, headers=admin_headers)
        assert response.status_code == 422, field

    cleared = await client.put(
        f"/api/fdp-events/{event['id']}", json={"feedback_form_link": None}, headers=admin_headers
    )
    assert cleared.status_code == 200
    assert cleared.json()["feedback_form_link"] is None


async def test_event_dates_are_validated(client, admin_headers):
    body = dict(EVENT_BODY, end_date="2025-01-01T00:00:00")

    response = await client.post("/api/fdp-events", json=body, headers=admin_headers)

    assert response.status_code == 422


async def test_faculty_registration(client, make_event):
    event = await make_event()

    response = await client.post("/api/faculty-registrations", json={
        "fdp_id": event["id"],
        "name": "Jane Doe",
        "email": "j@x.com",
        "phone": "+911234567890",
        "institution": "State Engineering College",
    })

    assert response.status_code == 201
    body = response.json()
    assert body["registration"]["payment_status"] == "pending"
    assert body["payment_order"]["order_id"].startswith("ORDER_")
    assert body["payment_order"]["payment_session_id"] == "session_abc"


async def test_invalid_registration_is_rejected(client, make_event):
    event = await make_event()

    response = await client.post("/api/faculty-registrations", json={
        "fdp_id": event["id"],
        "name": "Jane Doe",
        "email": "not-an-email",
        "phone": "12",
        "institution": "X",
    })

    assert response.status_code == 422


async def test_host_college_multipart_registration(client, make_event):
    event = await make_event()

    response = await client.post("/api/host-colleges", data={
        "fdp_id": event["id"],
        "college_name": "City Institute of Technology",
        "address": "12 College Road",
        "contact_person": "R. Kumar",
        "email": "principal@cit.test",
        "phone": "+919876543210",
    })

    assert response.status_code == 201
    assert response.json()["college"]["payment_status"] == "pending"


async def test_webhook_with_bad_signature(client):
    response = await client.post(
        "/api/payments/webhook",
        content=b'{"orderId": "ORDER_1", "paymentStatus": "SUCCESS"}',
        headers={"x-webhook-signature": "bad", "x-webhook-timestamp": "1700000000"},
    )

    assert response.status_code == 401


async def test_feedback_route(client, paid_faculty):
    faculty = await paid_faculty()

    response = await client.post(f"/api/faculty-registrations/{faculty['id']}/feedback")

    assert response.status_code == 200
    body = response.json()
    assert body["certificate_status"] == "generated"
    assert body["certificate"]["certificate_id"].startswith("CERT-")

    verified = await client.get(f"/api/certificates/verify/{body['certificate']['certificate_id']}")
    assert verified.json()["valid"] is True
