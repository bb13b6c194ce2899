"""
Communication Request/Response Models
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum


class RecipientType(str, Enum):
    """Who a message is addressed to"""
    HOST_COLLEGE = "host_college"
    FACULTY = "faculty"
    ALL = "all"


class Channel(str, Enum):
    """Outbound channel"""
    EMAIL = "email"
    WHATSAPP = "whatsapp"


class Recipient(BaseModel):
    """Explicit recipient of a bulk message"""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    id: Optional[str] = None
    type: RecipientType = RecipientType.FACULTY
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    whatsapp: Optional[str] = None


class _AudienceRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    fdp_id: str = Field(..., min_length=1)
    recipients: Optional[List[Recipient]] = None
    audience: Optional[RecipientType] = Field(
        default=None,
        description="Resolve recipients from the paid registrants of the event"
    )

    @model_validator(mode="after")
    def check_target(self):
        if not self.recipients and not self.audience:
            raise ValueError("either recipients or audience is required")
        return self


class BulkEmailRequest(_AudienceRequest):
    """Send one email to many recipients"""
    subject: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1, description="HTML body")


class BulkWhatsAppRequest(_AudienceRequest):
    """Send one WhatsApp message to many recipients"""
    message: str = Field(..., min_length=1, max_length=4096)


class BroadcastRequest(BaseModel):
    """Channels for reminder / link sharing broadcasts"""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    channels: List[Channel] = Field(default_factory=lambda: [Channel.EMAIL, Channel.WHATSAPP])
    audience: RecipientType = RecipientType.ALL


class CommunicationResultResponse(BaseModel):
    """Per-channel delivery counts for a bulk operation"""
    success: bool = True
    message: str
    total_recipients: int
    email_sent: int = 0
    email_failed: int = 0
    whatsapp_sent: int = 0
    whatsapp_failed: int = 0


class CommunicationLogEntry(BaseModel):
    """Single communication log entry"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    fdp_id: Optional[str] = None
    recipient_type: str
    recipient_id: Optional[str] = None
    channel: str
    message_type: Optional[str] = None
    recipient: str
    subject: Optional[str] = None
    content: str
    status: str
    error_message: Optional[str] = None
    sent_at: Optional[datetime] = None
    created_at: datetime


class CommunicationLogListResponse(BaseModel):
    """Communication logs for an event"""
    fdp_id: str
    total: int
    logs: List[CommunicationLogEntry]
