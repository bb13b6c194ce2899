"""
WhatsApp Service
Meta Cloud API and Twilio transports plus the message texts
"""

import logging
from typing import Optional

import httpx

from fdp_portal.config import Settings
from fdp_portal.schemas.notification import OutboundWhatsApp
from fdp_portal.services.email_service import format_amount
from fdp_portal.services.errors import NotificationError

logger = logging.getLogger(__name__)

TWILIO_API_URL = "https://api.twilio.com/2010-04-01"


class MetaWhatsAppTransport:
    """WhatsApp Cloud API (graph.facebook.com)"""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    @staticmethod
    def build_payload(message: OutboundWhatsApp) -> dict:
        if message.template_name:
            components = []
            if message.template_params:
                components.append({
                    "type": "body",
                    "parameters": [{"type": "text", "text": p} for p in message.template_params],
                })
            return {
                "messaging_product": "whatsapp",
                "to": message.to,
                "type": "template",
                "template": {
                    "name": message.template_name,
                    "language": {"code": "en"},
                    "components": components,
                },
            }

        return {
            "messaging_product": "whatsapp",
            "to": message.to,
            "type": "text",
            "text": {"body": message.body},
        }

    async def send(self, message: OutboundWhatsApp) -> None:
        """
        Raises:
            NotificationError: Missing credentials, network error or non-2xx reply
        """
        if not self.settings.WHATSAPP_PHONE_ID or not self.settings.WHATSAPP_TOKEN:
            raise NotificationError("whatsapp", message.to, "WhatsApp credentials not configured")

        url = f"{self.settings.WHATSAPP_API_URL.rstrip('/')}/{self.settings.WHATSAPP_PHONE_ID}/messages"
        headers = {"Authorization": f"Bearer {self.settings.WHATSAPP_TOKEN}"}

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.HTTP_TIMEOUT_SECONDS,
                transport=self.transport
            ) as client:
                response = await client.post(url, headers=headers, json=self.build_payload(message))
        except httpx.HTTPError as e:
            raise NotificationError("whatsapp", message.to, str(e)) from e

        if not response.is_success:
            raise NotificationError(
                "whatsapp", message.to, f"API error {response.status_code}: {response.text}"
            )

        logger.info(f"WhatsApp message sent to {message.to}")


class TwilioWhatsAppTransport:
    """Twilio Messages API with whatsapp: addressed numbers"""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    async def send(self, message: OutboundWhatsApp) -> None:
        sid = self.settings.TWILIO_ACCOUNT_SID
        token = self.settings.TWILIO_AUTH_TOKEN
        sender = self.settings.TWILIO_WHATSAPP_NUMBER

        if not sid or not token or not sender:
            raise NotificationError("whatsapp", message.to, "Twilio WhatsApp credentials not configured")

        # Named templates are a Cloud API feature; Twilio gets the text body
        if not message.body.strip():
            raise NotificationError(
                "whatsapp", message.to, f"No text body for Twilio (template {message.template_name!r})"
            )

        url = f"{TWILIO_API_URL}/Accounts/{sid}/Messages.json"
        form = {
            "From": f"whatsapp:{sender}",
            "To": f"whatsapp:{message.to}",
            "Body": message.body,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.HTTP_TIMEOUT_SECONDS,
                transport=self.transport
            ) as client:
                response = await client.post(url, data=form, auth=(sid, token))
        except httpx.HTTPError as e:
            raise NotificationError("whatsapp", message.to, str(e)) from e

        if not response.is_success:
            raise NotificationError(
                "whatsapp", message.to, f"Twilio error {response.status_code}: {response.text}"
            )

        logger.info(f"Twilio WhatsApp message sent to {message.to}")


def build_whatsapp_transport(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
    """Pick the provider named by WHATSAPP_PROVIDER"""
    if settings.WHATSAPP_PROVIDER.lower() == "twilio":
        return TwilioWhatsAppTransport(settings, transport)
    return MetaWhatsAppTransport(settings, transport)


# Message texts

def confirmation_whatsapp(
    to: str,
    name: str,
    fdp_title: str,
    payment_id: Optional[str],
    amount,
    currency: str,
    organiser: str,
    joining_link: Optional[str] = None,
    whatsapp_group_link: Optional[str] = None,
    host_college: bool = False
) -> OutboundWhatsApp:
    kind = "host college registration" if host_college else "registration"
    lines = [
        "✅ *Registration Confirmed*",
        "",
        f"Dear {name},",
        "",
        f"Your {kind} for *{fdp_title}* is confirmed.",
        "",
        f"Payment ID: {payment_id or '-'}",
        f"Amount: {format_amount(amount, currency)}",
    ]
    if whatsapp_group_link:
        lines += ["", f"WhatsApp Group: {whatsapp_group_link}"]
    if joining_link:
        lines += ["", f"FDP Link: {joining_link}"]
    lines += ["", f"- {organiser}"]
    return OutboundWhatsApp(to=to, body="\n".join(lines))


def payment_failed_whatsapp(to: str, name: str, fdp_title: str, order_id: str, organiser: str) -> OutboundWhatsApp:
    body = (
        f"❌ *Payment Failed*\n\n"
        f"Dear {name},\n\n"
        f"We could not confirm your payment for *{fdp_title}*.\n"
        f"Order ID: {order_id}\n\n"
        f"Please try registering again.\n\n"
        f"- {organiser}"
    )
    return OutboundWhatsApp(to=to, body=body)


def certificate_whatsapp(to: str, name: str, fdp_title: str, certificate_url: str, organiser: str) -> OutboundWhatsApp:
    body = (
        f"🎓 *Certificate Generated*\n\n"
        f"Dear {name},\n\n"
        f"Congratulations! Your certificate for *{fdp_title}* is ready.\n\n"
        f"📥 Download: {certificate_url}\n\n"
        f"- {organiser}"
    )
    return OutboundWhatsApp(to=to, body=body)


def reminder_whatsapp(
    to: str,
    name: str,
    fdp_title: str,
    start_date: str,
    organiser: str,
    joining_link: Optional[str] = None
) -> OutboundWhatsApp:
    join = f"🔗 Join: {joining_link}\n\n" if joining_link else ""
    body = (
        f"📅 *FDP Reminder*\n\n"
        f"Dear {name},\n\n"
        f"The FDP *{fdp_title}* starts on *{start_date}*.\n\n"
        f"{join}"
        f"Please join on time!\n\n"
        f"- {organiser}"
    )
    return OutboundWhatsApp(to=to, body=body)


def link_share_whatsapp(to: str, name: str, fdp_title: str, label: str, url: str, organiser: str) -> OutboundWhatsApp:
    body = (
        f"Dear {name},\n\n"
        f"{label} for *{fdp_title}*:\n{url}\n\n"
        f"- {organiser}"
    )
    return OutboundWhatsApp(to=to, body=body)
