"""
Tests for bulk messaging, reminders and link sharing
"""

import pytest
from fastapi import HTTPException

from fdp_portal.schemas.communication import BroadcastRequest, BulkEmailRequest, BulkWhatsAppRequest
from fdp_portal.services.communication_service import CommunicationService
from fdp_portal.services.notification_service import NotificationService

from tests.conftest import RecordingTransport


@pytest.fixture
def communications(store, notifications, settings):
    return CommunicationService(store, notifications, settings)


async def test_audience_is_paid_registrants_only(communications, paid_faculty, make_event, registrations, faculty_form):
    event = await make_event()
    await paid_faculty(event=event)
    await registrations.register_faculty(faculty_form(event["id"], name="Unpaid", email="u@x.com"))

    recipients = await communications.resolve_audience(event["id"], "faculty")

    assert [r.name for r in recipients] == ["Jane Doe"]
    assert recipients[0].whatsapp == "+911234567890"


async def test_bulk_email_personalises_content(communications, paid_faculty, email_transport, store):
    faculty = await paid_faculty()
    email_transport.sent.clear()

    result = await communications.send_bulk_email(BulkEmailRequest(
        fdp_id=faculty["fdp_id"], audience="all", subject="Schedule", content="<p>Hello {{name}}</p>"
    ))

    assert result["email_sent"] == 1
    assert email_transport.sent[0].html == "<p>Hello Jane Doe</p>"
    logs = await store.list_communication_logs(faculty["fdp_id"])
    assert any(log["message_type"] == "bulk_email" and log["status"] == "sent" for log in logs)


async def test_bulk_whatsapp_counts_failures(store, paid_faculty, email_transport, settings):
    faculty = await paid_faculty()
    failing = NotificationService(store, email_transport, RecordingTransport("whatsapp", fail=True), settings)
    communications = CommunicationService(store, failing, settings)

    result = await communications.send_bulk_whatsapp(BulkWhatsAppRequest(
        fdp_id=faculty["fdp_id"],
        recipients=[{"id": faculty["id"], "name": "Jane", "whatsapp": "+911234567890"},
                    {"id": "x", "name": "No Number"}],
        message="Hi {{name}}",
    ))

    assert result["total_recipients"] == 2
    assert result["whatsapp_sent"] == 0
    assert result["whatsapp_failed"] == 1


async def test_reminders_use_both_channels(communications, paid_faculty, email_transport, whatsapp_transport):
    faculty = await paid_faculty()
    email_transport.sent.clear()
    whatsapp_transport.sent.clear()

    result = await communications.send_reminders(faculty["fdp_id"], BroadcastRequest())

    assert result["email_sent"] == 1
    assert result["whatsapp_sent"] == 1
    assert "Jan 05, 2025" in whatsapp_transport.sent[0].body


async def test_share_community_falls_back_to_group_link(communications, paid_faculty, whatsapp_transport):
    faculty = await paid_faculty()
    whatsapp_transport.sent.clear()

    await communications.share_community(faculty["fdp_id"], BroadcastRequest(channels=["whatsapp"]))

    assert "https://chat.whatsapp.test/obe" in whatsapp_transport.sent[0].body


async def test_share_feedback_needs_a_link(communications, make_event):
    event = await make_event(feedback_form_link=None)

    with pytest.raises(HTTPException) as exc:
        await communications.share_feedback(event["id"], BroadcastRequest())

    assert exc.value.status_code == 400


def test_request_needs_recipients_or_audience():
    with pytest.raises(ValueError):
        BulkEmailRequest(fdp_id="x", subject="s", content="c")
