"""
Communication Service
Bulk email/WhatsApp, reminders and link sharing for an event's registrants
"""

import logging
from typing import List, Optional

from fastapi import HTTPException, status

from fdp_portal.config import Settings
from fdp_portal.schemas.communication import (
    BulkEmailRequest,
    BulkWhatsAppRequest,
    BroadcastRequest,
    Recipient,
)
from fdp_portal.schemas.notification import DeliveryContext, OutboundWhatsApp
from fdp_portal.services import email_service as emails
from fdp_portal.services import whatsapp_service as whatsapp
from fdp_portal.services.certificate_service import format_certificate_date
from fdp_portal.services.entity_store import EntityStore
from fdp_portal.services.notification_service import NotificationService, contact_of

logger = logging.getLogger(__name__)


class DispatchSummary:
    """Per-channel sent/failed counters for one bulk operation"""

    def __init__(self, total_recipients: int):
        self.total_recipients = total_recipients
        self.email_sent = 0
        self.email_failed = 0
        self.whatsapp_sent = 0
        self.whatsapp_failed = 0

    def count(self, channel: str, ok: bool):
        key = f"{channel}_{'sent' if ok else 'failed'}"
        setattr(self, key, getattr(self, key) + 1)

    def as_response(self, message: str) -> dict:
        return {
            "success": True,
            "message": message,
            "total_recipients": self.total_recipients,
            "email_sent": self.email_sent,
            "email_failed": self.email_failed,
            "whatsapp_sent": self.whatsapp_sent,
            "whatsapp_failed": self.whatsapp_failed,
        }


class CommunicationService:
    """
    Sends one message per recipient, sequentially

    Every attempt is written to the communication log by the notification
    service; a failed recipient never stops the batch.
    """

    def __init__(self, store: EntityStore, notifications: NotificationService, settings: Settings):
        self.store = store
        self.notifications = notifications
        self.settings = settings

    async def _get_event(self, fdp_id: str) -> dict:
        event = await self.store.get_event(fdp_id)
        if not event:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="FDP event not found"
            )
        return event

    async def resolve_audience(self, fdp_id: str, audience: str) -> List[Recipient]:
        """Paid registrants of the event as recipients"""
        recipients: List[Recipient] = []

        if audience in ("host_college", "all"):
            for college in await self.store.list_host_colleges(fdp_id):
                if college["payment_status"] != "completed":
                    continue
                contact = contact_of("host_college", college)
                recipients.append(Recipient(
                    id=college["id"],
                    type="host_college",
                    name=contact["name"],
                    email=contact["email"],
                    whatsapp=contact["whatsapp"],
                ))

        if audience in ("faculty", "all"):
            for faculty in await self.store.list_faculty_by_event(fdp_id):
                if faculty["payment_status"] != "completed":
                    continue
                contact = contact_of("faculty", faculty)
                recipients.append(Recipient(
                    id=faculty["id"],
                    type="faculty",
                    name=contact["name"],
                    email=contact["email"],
                    whatsapp=contact["whatsapp"],
                ))

        return recipients

    async def _recipients_for(self, fdp_id: str, recipients: Optional[List[Recipient]], audience: Optional[str]):
        if recipients:
            return list(recipients)
        return await self.resolve_audience(fdp_id, audience)

    @staticmethod
    def _context(fdp_id: str, recipient: Recipient, message_type: str) -> DeliveryContext:
        return DeliveryContext(
            fdp_id=fdp_id,
            recipient_type=recipient.type,
            recipient_id=recipient.id,
            message_type=message_type,
        )

    async def send_bulk_email(self, request: BulkEmailRequest) -> dict:
        await self._get_event(request.fdp_id)
        recipients = await self._recipients_for(request.fdp_id, request.recipients, request.audience)
        summary = DispatchSummary(len(recipients))

        for recipient in recipients:
            if not recipient.email:
                continue
            content = request.content.replace("{{name}}", recipient.name or "")
            ok = await self.notifications.send_email(
                emails.custom_email(recipient.email, request.subject, content),
                self._context(request.fdp_id, recipient, "bulk_email")
            )
            summary.count("email", ok)

        logger.info(
            f"Bulk email for FDP {request.fdp_id}: {summary.email_sent} sent, {summary.email_failed} failed"
        )
        return summary.as_response(f"Bulk email sent to {summary.email_sent} recipients")

    async def send_bulk_whatsapp(self, request: BulkWhatsAppRequest) -> dict:
        await self._get_event(request.fdp_id)
        recipients = await self._recipients_for(request.fdp_id, request.recipients, request.audience)
        summary = DispatchSummary(len(recipients))

        for recipient in recipients:
            if not recipient.whatsapp:
                continue
            body = request.message.replace("{{name}}", recipient.name or "")
            ok = await self.notifications.send_whatsapp(
                OutboundWhatsApp(to=recipient.whatsapp, body=body),
                self._context(request.fdp_id, recipient, "bulk_whatsapp")
            )
            summary.count("whatsapp", ok)

        logger.info(
            f"Bulk WhatsApp for FDP {request.fdp_id}: "
            f"{summary.whatsapp_sent} sent, {summary.whatsapp_failed} failed"
        )
        return summary.as_response(f"WhatsApp message sent to {summary.whatsapp_sent} recipients")

    async def _broadcast(
        self,
        event: dict,
        request: BroadcastRequest,
        message_type: str,
        build_email,
        build_whatsapp
    ) -> DispatchSummary:
        recipients = await self.resolve_audience(event["id"], request.audience)
        summary = DispatchSummary(len(recipients))

        for recipient in recipients:
            context = self._context(event["id"], recipient, message_type)
            name = recipient.name or "Participant"
            if "email" in request.channels and recipient.email:
                ok = await self.notifications.send_email(build_email(recipient.email, name), context)
                summary.count("email", ok)
            if "whatsapp" in request.channels and recipient.whatsapp:
                ok = await self.notifications.send_whatsapp(build_whatsapp(recipient.whatsapp, name), context)
                summary.count("whatsapp", ok)

        return summary

    async def send_reminders(self, fdp_id: str, request: BroadcastRequest) -> dict:
        """Start date and joining link to every paid registrant"""
        event = await self._get_event(fdp_id)
        start_date = format_certificate_date(event["start_date"])
        organiser = self.settings.ORGANISER_NAME

        summary = await self._broadcast(
            event,
            request,
            "reminder",
            lambda to, name: emails.reminder_email(
                to, name, event["title"], start_date, organiser, event.get("joining_link")
            ),
            lambda to, name: whatsapp.reminder_whatsapp(
                to, name, event["title"], start_date, organiser, event.get("joining_link")
            ),
        )
        return summary.as_response(f"Reminders sent for {event['title']}")

    async def _share_link(
        self,
        fdp_id: str,
        request: BroadcastRequest,
        label: str,
        url_keys: tuple,
        message_type: str
    ) -> dict:
        event = await self._get_event(fdp_id)
        url = next((event.get(key) for key in url_keys if event.get(key)), None)
        if not url:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"No {label.lower()} configured for this FDP"
            )
        organiser = self.settings.ORGANISER_NAME

        summary = await self._broadcast(
            event,
            request,
            message_type,
            lambda to, name: emails.link_share_email(to, name, event["title"], label, url, organiser),
            lambda to, name: whatsapp.link_share_whatsapp(to, name, event["title"], label, url, organiser),
        )
        return summary.as_response(f"{label} shared for {event['title']}")

    async def share_community(self, fdp_id: str, request: BroadcastRequest) -> dict:
        """Community link, or the WhatsApp group link when there is none"""
        return await self._share_link(
            fdp_id, request, "Community Link", ("community_link", "whatsapp_group_link"), "community_link"
        )

    async def share_feedback(self, fdp_id: str, request: BroadcastRequest) -> dict:
        return await self._share_link(
            fdp_id, request, "Feedback Form", ("feedback_form_link",), "feedback_link"
        )

    async def list_logs(self, fdp_id: str) -> dict:
        await self._get_event(fdp_id)
        logs = await self.store.list_communication_logs(fdp_id)
        return {"fdp_id": fdp_id, "total": len(logs), "logs": logs}
