"""
Notification Service
Best-effort email/WhatsApp dispatch with one communication log row per attempt
"""

import logging
from datetime import datetime
from typing import Optional

from fdp_portal.config import Settings
from fdp_portal.schemas.notification import OutboundEmail, OutboundWhatsApp, DeliveryContext
from fdp_portal.services.entity_store import EntityStore
from fdp_portal.services import email_service as emails
from fdp_portal.services import whatsapp_service as whatsapp
from fdp_portal.services.errors import NotificationError

logger = logging.getLogger(__name__)


def contact_of(entity_type: str, entity: dict) -> dict:
    """Name, email and WhatsApp number of a host college or faculty row"""
    if entity_type == "host_college":
        name = entity.get("contact_person") or entity.get("college_name")
    else:
        name = entity.get("name")
    return {
        "name": name or "Participant",
        "email": entity.get("email"),
        # Registrants without a separate WhatsApp number are reached on their phone
        "whatsapp": entity.get("whatsapp") or entity.get("phone"),
    }


class NotificationService:
    """
    Sends messages through injected transports

    A transport signals failure by raising NotificationError; this service is
    the only place that catches it, so callers only ever see True/False.
    """

    def __init__(self, store: EntityStore, email_transport, whatsapp_transport, settings: Settings):
        self.store = store
        self.email_transport = email_transport
        self.whatsapp_transport = whatsapp_transport
        self.settings = settings

    async def _record(
        self,
        channel: str,
        recipient: str,
        subject: Optional[str],
        content: str,
        error: Optional[str],
        context: Optional[DeliveryContext]
    ) -> None:
        if context is None:
            return
        now = datetime.utcnow()
        await self.store.create_communication_log({
            "fdp_id": context.fdp_id,
            "recipient_type": context.recipient_type,
            "recipient_id": context.recipient_id,
            "channel": channel,
            "message_type": context.message_type,
            "recipient": recipient,
            "subject": subject,
            "content": content,
            "status": "failed" if error else "sent",
            "error_message": error,
            "sent_at": None if error else now,
        })

    async def send_email(self, message: OutboundEmail, context: Optional[DeliveryContext] = None) -> bool:
        """Returns False instead of raising when delivery fails"""
        error = None
        try:
            await self.email_transport.send(message)
        except NotificationError as e:
            error = e.reason
            logger.error(f"Email to {message.to} failed: {e.reason}")

        await self._record("email", message.to, message.subject, message.html, error, context)
        return error is None

    async def send_whatsapp(self, message: OutboundWhatsApp, context: Optional[DeliveryContext] = None) -> bool:
        """Returns False instead of raising when delivery fails"""
        error = None
        try:
            await self.whatsapp_transport.send(message)
        except NotificationError as e:
            error = e.reason
            logger.error(f"WhatsApp to {message.to} failed: {e.reason}")

        await self._record("whatsapp", message.to, None, message.body, error, context)
        return error is None

    # ------------------------------------------------------------------
    # Pipeline messages
    # ------------------------------------------------------------------

    async def send_payment_confirmation(
        self,
        event: dict,
        entity_type: str,
        entity: dict,
        payment: dict
    ) -> dict:
        """One confirmation email and, when a number is known, one WhatsApp"""
        contact = contact_of(entity_type, entity)
        context = DeliveryContext(
            fdp_id=event["id"],
            recipient_type=entity_type,
            recipient_id=entity["id"],
            message_type="payment_confirmation"
        )
        details = dict(
            name=contact["name"],
            fdp_title=event["title"],
            payment_id=payment.get("payment_id"),
            amount=payment["amount"],
            currency=payment.get("currency") or self.settings.CURRENCY,
            organiser=self.settings.ORGANISER_NAME,
            joining_link=event.get("joining_link"),
            whatsapp_group_link=event.get("whatsapp_group_link"),
            host_college=entity_type == "host_college",
        )

        result = {"email": False, "whatsapp": None}
        if contact["email"]:
            result["email"] = await self.send_email(
                emails.confirmation_email(to=contact["email"], **details), context
            )
        if contact["whatsapp"]:
            result["whatsapp"] = await self.send_whatsapp(
                whatsapp.confirmation_whatsapp(to=contact["whatsapp"], **details), context
            )
        return result

    async def send_payment_failure(
        self,
        event: dict,
        entity_type: str,
        entity: dict,
        order_id: str
    ) -> dict:
        contact = contact_of(entity_type, entity)
        context = DeliveryContext(
            fdp_id=event["id"],
            recipient_type=entity_type,
            recipient_id=entity["id"],
            message_type="payment_failed"
        )
        path = "host" if entity_type == "host_college" else "faculty"
        retry_url = f"{self.settings.APP_URL}/fdp/{event['id']}/register/{path}"

        result = {"email": False, "whatsapp": None}
        if contact["email"]:
            result["email"] = await self.send_email(
                emails.payment_failed_email(
                    to=contact["email"],
                    name=contact["name"],
                    fdp_title=event["title"],
                    order_id=order_id,
                    organiser=self.settings.ORGANISER_NAME,
                    retry_url=retry_url
                ),
                context
            )
        if contact["whatsapp"]:
            result["whatsapp"] = await self.send_whatsapp(
                whatsapp.payment_failed_whatsapp(
                    to=contact["whatsapp"],
                    name=contact["name"],
                    fdp_title=event["title"],
                    order_id=order_id,
                    organiser=self.settings.ORGANISER_NAME
                ),
                context
            )
        return result

    async def send_certificate_ready(self, event: dict, faculty: dict, certificate_url: str) -> dict:
        contact = contact_of("faculty", faculty)
        context = DeliveryContext(
            fdp_id=event["id"],
            recipient_type="faculty",
            recipient_id=faculty["id"],
            message_type="certificate"
        )
        link = certificate_url
        if link.startswith("/"):
            link = f"{self.settings.API_URL}{link}"

        result = {"email": False, "whatsapp": None}
        if contact["email"]:
            result["email"] = await self.send_email(
                emails.certificate_email(
                    to=contact["email"],
                    name=contact["name"],
                    fdp_title=event["title"],
                    certificate_url=link,
                    organiser=self.settings.ORGANISER_NAME
                ),
                context
            )
        if contact["whatsapp"]:
            result["whatsapp"] = await self.send_whatsapp(
                whatsapp.certificate_whatsapp(
                    to=contact["whatsapp"],
                    name=contact["name"],
                    fdp_title=event["title"],
                    certificate_url=link,
                    organiser=self.settings.ORGANISER_NAME
                ),
                context
            )
        return result
