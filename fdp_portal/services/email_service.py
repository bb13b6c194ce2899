"""
Email Service
SMTP transport and the HTML messages sent to registrants
"""

import logging
import re
from decimal import Decimal
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Optional

import aiosmtplib

from fdp_portal.config import Settings
from fdp_portal.schemas.notification import OutboundEmail
from fdp_portal.services.errors import NotificationError

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")
_BLANK_LINES_RE = re.compile(r"\n\s*\n+")


def format_amount(amount, currency: str = "INR") -> str:
    """₹1500.00 for rupees, '<CUR> 1500.00' otherwise"""
    value = Decimal(str(amount or 0)).quantize(Decimal("0.01"))
    if currency == "INR":
        return f"₹{value}"
    return f"{currency} {value}"


def html_to_text(html: str) -> str:
    """Rough plain-text alternative for an HTML body"""
    text = _TAG_RE.sub("", html.replace("<br>", "\n").replace("</p>", "\n"))
    return _BLANK_LINES_RE.sub("\n\n", text).strip()


class SmtpEmailTransport:
    """Delivers an OutboundEmail over SMTP"""

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.SMTP_HOST and self.settings.SMTP_USER and self.settings.SMTP_PASSWORD)

    def build_mime(self, message: OutboundEmail) -> MIMEMultipart:
        body = MIMEMultipart("alternative")
        body.attach(MIMEText(message.text or html_to_text(message.html), "plain", "utf-8"))
        body.attach(MIMEText(message.html, "html", "utf-8"))

        if message.attachments:
            mime = MIMEMultipart("mixed")
            mime.attach(body)
            for attachment in message.attachments:
                subtype = attachment.content_type.split("/")[-1]
                part = MIMEApplication(attachment.content, _subtype=subtype)
                part.add_header("Content-Disposition", "attachment", filename=attachment.filename)
                mime.attach(part)
        else:
            mime = body

        mime["Subject"] = message.subject
        mime["From"] = self.settings.EMAIL_FROM
        mime["To"] = message.to
        return mime

    async def send(self, message: OutboundEmail) -> None:
        """
        Send one email

        Raises:
            NotificationError: If the SMTP exchange fails
        """
        mime = self.build_mime(message)

        if not self.is_configured:
            # Development mode - no SMTP configured
            logger.info(
                f"--- EMAIL (development mode) --- To: {message.to} | "
                f"Subject: {message.subject}"
            )
            logger.debug(message.html)
            return

        try:
            async with aiosmtplib.SMTP(
                hostname=self.settings.SMTP_HOST,
                port=self.settings.SMTP_PORT,
                use_tls=self.settings.SMTP_USE_TLS,
                timeout=self.settings.HTTP_TIMEOUT_SECONDS
            ) as smtp:
                await smtp.login(self.settings.SMTP_USER, self.settings.SMTP_PASSWORD)
                await smtp.send_message(mime)
        except (aiosmtplib.SMTPException, OSError) as e:
            raise NotificationError("email", message.to, str(e)) from e

        logger.info(f"Email sent to {message.to}: {message.subject}")


def _layout(heading: str, body: str, organiser: str) -> str:
    return f"""
    <html>
      <body style="font-family: Arial, sans-serif; color: #333; line-height: 1.6;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
          <div style="background: linear-gradient(135deg, #3b82f6, #ec4899); color: white; padding: 24px; text-align: center;">
            <h2 style="margin: 0;">{heading}</h2>
          </div>
          <div style="padding: 20px; background: #f9f9f9;">
            {body}
            <p>Best regards,<br><strong>{escape(organiser)}</strong></p>
          </div>
        </div>
      </body>
    </html>
    """


def _link_line(label: str, url: Optional[str], text: str = "Click Here") -> str:
    if not url:
        return ""
    return f'<p><strong>{label}:</strong> <a href="{escape(url)}">{text}</a></p>'


def confirmation_email(
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
) -> OutboundEmail:
    """Sent once when a payment is first confirmed"""
    kind = "host college registration" if host_college else "registration"
    body = f"""
            <p>Dear {escape(name)},</p>
            <p>Your {kind} for <strong>{escape(fdp_title)}</strong> has been confirmed.</p>
            <div style="background: white; padding: 15px; margin: 15px 0; border-left: 4px solid #3b82f6;">
              <p><strong>Payment ID:</strong> {escape(payment_id or '-')}</p>
              <p><strong>Amount Paid:</strong> {format_amount(amount, currency)}</p>
            </div>
            {_link_line("WhatsApp Group", whatsapp_group_link, "Join Here")}
            {_link_line("FDP Joining Link", joining_link)}
            <p>You will receive further updates via email and WhatsApp.</p>
    """
    return OutboundEmail(
        to=to,
        subject=f"Registration Confirmed - {fdp_title}",
        html=_layout("Registration Confirmed!", body, organiser)
    )


def payment_failed_email(
    to: str,
    name: str,
    fdp_title: str,
    order_id: str,
    organiser: str,
    retry_url: Optional[str] = None
) -> OutboundEmail:
    """Sent when the gateway reports a non-successful payment"""
    retry = _link_line("Try again", retry_url, "Complete your registration")
    body = f"""
            <p>Dear {escape(name)},</p>
            <p>We could not confirm your payment for <strong>{escape(fdp_title)}</strong>.</p>
            <p><strong>Order ID:</strong> {escape(order_id)}</p>
            {retry}
            <p>If any amount was debited it will be refunded by your bank. Reply to this email if you need help.</p>
    """
    return OutboundEmail(
        to=to,
        subject=f"Payment Failed - {fdp_title}",
        html=_layout("Payment Unsuccessful", body, organiser)
    )


def certificate_email(
    to: str,
    name: str,
    fdp_title: str,
    certificate_url: str,
    organiser: str
) -> OutboundEmail:
    """Sent when a certificate has been issued"""
    body = f"""
            <p>Dear {escape(name)},</p>
            <p>Congratulations! Your certificate for <strong>{escape(fdp_title)}</strong> has been generated.</p>
            <p>
              <a href="{escape(certificate_url)}" style="display: inline-block; padding: 12px 30px; background: #3b82f6; color: white; text-decoration: none; border-radius: 5px;">
                Download Certificate
              </a>
            </p>
    """
    return OutboundEmail(
        to=to,
        subject=f"Certificate - {fdp_title}",
        html=_layout("Certificate Generated", body, organiser)
    )


def reminder_email(
    to: str,
    name: str,
    fdp_title: str,
    start_date: str,
    organiser: str,
    joining_link: Optional[str] = None
) -> OutboundEmail:
    """Sent by the admin reminder broadcast"""
    body = f"""
            <p>Dear {escape(name)},</p>
            <p>This is a reminder that the FDP <strong>{escape(fdp_title)}</strong> starts on <strong>{escape(start_date)}</strong>.</p>
            {_link_line("Joining Link", joining_link, escape(joining_link or ""))}
            <p>Please ensure you join on time.</p>
    """
    return OutboundEmail(
        to=to,
        subject=f"Reminder: {fdp_title} - Starting Soon",
        html=_layout("FDP Reminder", body, organiser)
    )


def link_share_email(
    to: str,
    name: str,
    fdp_title: str,
    label: str,
    url: str,
    organiser: str
) -> OutboundEmail:
    """Shares one event link (community group, feedback form)"""
    body = f"""
            <p>Dear {escape(name)},</p>
            <p>Here is the {escape(label.lower())} for <strong>{escape(fdp_title)}</strong>:</p>
            <p><a href="{escape(url)}">{escape(url)}</a></p>
    """
    return OutboundEmail(
        to=to,
        subject=f"{label} - {fdp_title}",
        html=_layout(escape(label), body, organiser)
    )


def custom_email(to: str, subject: str, content: str) -> OutboundEmail:
    """Admin-authored bulk email; content is already HTML"""
    return OutboundEmail(to=to, subject=subject, html=content)
