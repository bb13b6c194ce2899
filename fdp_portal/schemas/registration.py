"""
Registration Request/Response Models
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum

from fdp_portal.schemas.certificate import CertificateResponse

PHONE_PATTERN = r"^\+?[0-9][0-9\s-]{6,19}$"


class PaymentStatus(str, Enum):
    """Payment state of a registration"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class EntityType(str, Enum):
    """Kind of registrant a payment belongs to"""
    HOST_COLLEGE = "host_college"
    FACULTY = "faculty"


class HostCollegeCreate(BaseModel):
    """Host college registration form"""
    fdp_id: str = Field(..., min_length=1)
    college_name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1)
    website: Optional[str] = Field(default=None, max_length=255)
    contact_person: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., pattern=PHONE_PATTERN)
    whatsapp: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)


class HostCollegeResponse(BaseModel):
    """Host college details"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    fdp_id: str
    college_name: str
    address: str
    website: Optional[str] = None
    contact_person: str
    email: str
    phone: str
    whatsapp: Optional[str] = None
    logo_url: Optional[str] = None
    payment_status: str
    payment_id: Optional[str] = None
    amount_paid: Optional[Decimal] = None
    registered_at: datetime


class FacultyRegistrationCreate(BaseModel):
    """Faculty registration form"""
    fdp_id: str = Field(..., min_length=1)
    host_college_id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., pattern=PHONE_PATTERN)
    whatsapp: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    designation: Optional[str] = Field(default=None, max_length=100)
    department: Optional[str] = Field(default=None, max_length=100)
    institution: str = Field(..., min_length=1, max_length=255)


class FacultyRegistrationResponse(BaseModel):
    """Faculty registration details"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    fdp_id: str
    host_college_id: Optional[str] = None
    registration_type: str
    name: str
    email: str
    phone: str
    whatsapp: Optional[str] = None
    designation: Optional[str] = None
    department: Optional[str] = None
    institution: str
    payment_status: str
    payment_id: Optional[str] = None
    amount_paid: Optional[Decimal] = None
    feedback_submitted: bool
    certificate_generated: bool
    certificate_url: Optional[str] = None
    registered_at: datetime


class PaymentOrderResponse(BaseModel):
    """Gateway order the client completes payment against"""
    order_id: str
    payment_session_id: Optional[str] = None
    payment_link: Optional[str] = None


class HostCollegeRegistrationResponse(BaseModel):
    """Created host college plus its payment order"""
    college: HostCollegeResponse
    payment_order: PaymentOrderResponse


class FacultyRegistrationResult(BaseModel):
    """Created faculty registration plus its payment order"""
    registration: FacultyRegistrationResponse
    payment_order: PaymentOrderResponse


class FeedbackResponse(BaseModel):
    """Outcome of reporting feedback completion"""
    registration: FacultyRegistrationResponse
    certificate: Optional[CertificateResponse] = None
    certificate_status: str = Field(
        ...,
        description="generated, already_exists or not_eligible"
    )
