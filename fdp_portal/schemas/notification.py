"""
Outbound Message Models
What the notification service hands to a transport
"""

from pydantic import BaseModel, Field
from typing import Optional, List


class EmailAttachment(BaseModel):
    """File attached to an email"""
    filename: str
    content: bytes
    content_type: str = "application/pdf"


class OutboundEmail(BaseModel):
    """Email to one recipient"""
    to: str
    subject: str
    html: str
    text: Optional[str] = None
    attachments: List[EmailAttachment] = Field(default_factory=list)


class OutboundWhatsApp(BaseModel):
    """WhatsApp message to one number, plain text or a named template"""
    to: str
    body: str
    template_name: Optional[str] = None
    template_params: List[str] = Field(default_factory=list)


class DeliveryContext(BaseModel):
    """Where a dispatch attempt is recorded in the communication log"""
    fdp_id: Optional[str] = None
    recipient_type: str = "faculty"
    recipient_id: Optional[str] = None
    message_type: Optional[str] = None
