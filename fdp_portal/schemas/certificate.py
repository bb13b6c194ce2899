"""
Certificate Request/Response Models
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List, Literal
from datetime import datetime

from fdp_portal.schemas.validators import reject_nulls


class CertificateResponse(BaseModel):
    """Issued certificate"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    faculty_id: str
    fdp_id: str
    certificate_id: str
    certificate_url: Optional[str] = None
    participant_name: str
    college_name: Optional[str] = None
    fdp_title: str
    fdp_dates: Optional[str] = None
    organiser_logo: Optional[str] = None
    college_logo: Optional[str] = None
    signature_image: Optional[str] = None
    generated_at: datetime


class CertificateVerifyResponse(BaseModel):
    """Public verification of a certificate id"""
    valid: bool
    certificate_id: str
    participant_name: str
    fdp_title: str
    fdp_dates: Optional[str] = None
    college_name: Optional[str] = None
    generated_at: datetime


class BulkCertificateItem(BaseModel):
    """Per-registration result of a bulk run"""
    faculty_id: str
    status: Literal["generated", "already_exists", "error"]
    certificate_id: Optional[str] = None
    error: Optional[str] = None


class BulkCertificateResponse(BaseModel):
    """Result of bulk certificate generation for an event"""
    fdp_id: str
    total: int
    generated: int
    results: List[BulkCertificateItem]


class CertificateTemplateCreate(BaseModel):
    """HTML certificate template with {{token}} placeholders"""
    name: str = Field(..., min_length=1, max_length=255)
    html_template: str = Field(..., min_length=1)
    organiser_logo: Optional[str] = None
    signature_image: Optional[str] = None
    is_default: bool = False


class CertificateTemplateUpdate(BaseModel):
    """Partial template update"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    html_template: Optional[str] = Field(default=None, min_length=1)
    organiser_logo: Optional[str] = None
    signature_image: Optional[str] = None
    is_default: Optional[bool] = None

    @model_validator(mode="before")
    @classmethod
    def check_nulls(cls, data):
        return reject_nulls(data, ("name", "html_template", "is_default"))


class CertificateTemplateResponse(BaseModel):
    """Certificate template details"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    html_template: str
    organiser_logo: Optional[str] = None
    signature_image: Optional[str] = None
    is_default: bool
    created_at: datetime
    updated_at: datetime
