"""
Shared fixtures: a throwaway SQLite database, stub transports and a mocked gateway
"""

from datetime import datetime
from decimal import Decimal

import httpx
import pytest
from databases import Database

from fdp_portal.config import Settings
from fdp_portal.database import Base, create_sync_engine
from fdp_portal.schemas.registration import FacultyRegistrationCreate, HostCollegeCreate
from fdp_portal.services.certificate_service import CertificateService
from fdp_portal.services.entity_store import EntityStore
from fdp_portal.services.errors import NotificationError
from fdp_portal.services.notification_service import NotificationService
from fdp_portal.services.payment_service import CashfreeGateway
from fdp_portal.services.registration_service import RegistrationService
from fdp_portal.services.storage_service import StorageService

import fdp_portal.models  # noqa: F401

GATEWAY_SECRET = "test-secret"


class RecordingTransport:
    """Email/WhatsApp transport that keeps what it was asked to send"""

    def __init__(self, channel: str, fail: bool = False):
        self.channel = channel
        self.fail = fail
        self.sent = []

    async def send(self, message):
        if self.fail:
            raise NotificationError(self.channel, message.to, "provider unavailable")
        self.sent.append(message)


class StubPdfEngine:
    """Returns a fake PDF; fails for any HTML containing a marker"""

    def __init__(self, fail_marker=None):
        self.fail_marker = fail_marker
        self.rendered = []

    async def html_to_pdf(self, html: str) -> bytes:
        if self.fail_marker and self.fail_marker in html:
            raise RuntimeError("chromium crashed")
        self.rendered.append(html)
        return b"%PDF-1.4 test"


class GatewayStub:
    """httpx.MockTransport handler imitating the Cashfree endpoints"""

    def __init__(self):
        self.requests = []
        self.payment_status = "SUCCESS"
        self.fail_orders = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "POST" and path.endswith("/orders"):
            if self.fail_orders:
                return httpx.Response(500, json={"message": "gateway down"})
            return httpx.Response(200, json={
                "cf_order_id": "cf_1",
                "payment_session_id": "session_abc",
                "payment_link": "https://payments.test/pay/session_abc",
            })
        if request.method == "POST" and path.endswith("/refunds"):
            return httpx.Response(200, json={"refund_status": "PENDING", "cf_refund_id": "rf_1"})
        if request.method == "GET" and "/payments/" in path:
            return httpx.Response(200, json={"payment_status": self.payment_status})
        return httpx.Response(404, json={"message": "not found"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        CASHFREE_APP_ID="test-app",
        CASHFREE_SECRET_KEY=GATEWAY_SECRET,
        UPLOAD_DIR=str(tmp_path / "uploads"),
        API_URL="http://api.test",
        APP_URL="http://app.test",
        ORGANISER_NAME="FDP Team",
    )


@pytest.fixture
async def database(settings):
    engine = create_sync_engine(settings.DATABASE_URL)
    Base.metadata.create_all(engine)
    engine.dispose()

    db = Database(settings.DATABASE_URL)
    await db.connect()
    yield db
    await db.disconnect()


@pytest.fixture
def store(database):
    return EntityStore(database)


@pytest.fixture
def email_transport():
    return RecordingTransport("email")


@pytest.fixture
def whatsapp_transport():
    return RecordingTransport("whatsapp")


@pytest.fixture
def pdf_engine():
    return StubPdfEngine()


@pytest.fixture
def gateway_stub():
    return GatewayStub()


@pytest.fixture
def gateway(settings, store, gateway_stub):
    return CashfreeGateway(settings, store, transport=gateway_stub.transport())


@pytest.fixture
def storage(settings):
    return StorageService(settings)


@pytest.fixture
def notifications(store, email_transport, whatsapp_transport, settings):
    return NotificationService(store, email_transport, whatsapp_transport, settings)


@pytest.fixture
def certificates(store, storage, pdf_engine, settings):
    return CertificateService(store, storage, pdf_engine, settings)


@pytest.fixture
def registrations(store, gateway, notifications, certificates, storage, settings):
    return RegistrationService(store, gateway, notifications, certificates, storage, settings)


@pytest.fixture
def make_event(store):
    async def _make_event(**overrides):
        data = {
            "title": "Outcome Based Education",
            "category": "NBA",
            "start_date": datetime(2025, 1, 5, 10, 0),
            "end_date": datetime(2025, 1, 9, 17, 0),
            "host_fee": Decimal("5000.00"),
            "faculty_fee": Decimal("1500.00"),
            "status": "upcoming",
            "joining_link": "https://meet.test/obe",
            "whatsapp_group_link": "https://chat.whatsapp.test/obe",
            "feedback_form_link": "https://forms.test/obe",
        }
        data.update(overrides)
        return await store.create_event(data)

    return _make_event


@pytest.fixture
def faculty_form():
    def _faculty_form(fdp_id: str, **overrides):
        data = {
            "fdp_id": fdp_id,
            "name": "Jane Doe",
            "email": "j@x.com",
            "phone": "+911234567890",
            "institution": "State Engineering College",
            "designation": "Assistant Professor",
            "department": "Computer Science",
        }
        data.update(overrides)
        return FacultyRegistrationCreate(**data)

    return _faculty_form


@pytest.fixture
def host_college_form():
    def _host_college_form(fdp_id: str, **overrides):
        data = {
            "fdp_id": fdp_id,
            "college_name": "City Institute of Technology",
            "address": "12 College Road",
            "contact_person": "R. Kumar",
            "email": "principal@cit.test",
            "phone": "+919876543210",
        }
        data.update(overrides)
        return HostCollegeCreate(**data)

    return _host_college_form


@pytest.fixture
def paid_faculty(registrations, store, make_event, faculty_form):
    """Registers a faculty member and confirms the payment"""
    async def _paid_faculty(event=None, feedback=False, **overrides):
        event = event or await make_event()
        result = await registrations.register_faculty(faculty_form(event["id"], **overrides))
        payment = await store.get_payment_by_order_id(result["payment_order"]["order_id"])
        await registrations.confirm_payment(payment, success=True, payment_id="cf_pay_1")
        if feedback:
            await store.update_faculty_registration(result["registration"]["id"], {"feedback_submitted": True})
        return await store.get_faculty_registration(result["registration"]["id"])

    return _paid_faculty
