"""
FDP Event Request/Response Models
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum

from fdp_portal.schemas.validators import reject_nulls, to_naive_utc


class EventStatus(str, Enum):
    """Lifecycle of an event"""
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EventCreate(BaseModel):
    """Request to create an FDP event"""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=100, description="NAAC, NBA, ...")
    banner_image: Optional[str] = None
    start_date: datetime
    end_date: datetime
    host_fee: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    faculty_fee: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    max_participants: Optional[int] = Field(default=None, ge=1)
    status: EventStatus = EventStatus.UPCOMING
    joining_link: Optional[str] = None
    community_link: Optional[str] = None
    whatsapp_group_link: Optional[str] = None
    feedback_form_link: Optional[str] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def naive_dates(cls, value):
        return to_naive_utc(value)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class EventUpdate(BaseModel):
    """Partial update; the date order is re-checked after merging"""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    banner_image: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    host_fee: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    faculty_fee: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    max_participants: Optional[int] = Field(default=None, ge=1)
    status: Optional[EventStatus] = None
    joining_link: Optional[str] = None
    community_link: Optional[str] = None
    whatsapp_group_link: Optional[str] = None
    feedback_form_link: Optional[str] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def naive_dates(cls, value):
        return to_naive_utc(value)

    @model_validator(mode="before")
    @classmethod
    def check_nulls(cls, data):
        return reject_nulls(data, (
            "title", "category", "start_date", "end_date", "host_fee", "faculty_fee", "status"
        ))


class EventResponse(BaseModel):
    """Event details"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    category: str
    banner_image: Optional[str] = None
    start_date: datetime
    end_date: datetime
    host_fee: Decimal
    faculty_fee: Decimal
    max_participants: Optional[int] = None
    status: str
    joining_link: Optional[str] = None
    community_link: Optional[str] = None
    whatsapp_group_link: Optional[str] = None
    feedback_form_link: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class EventAnalyticsResponse(BaseModel):
    """Registration and revenue figures for one event"""
    fdp_id: str
    total_host_colleges: int
    total_faculty: int
    total_revenue: Decimal
    payments_pending: int
    payments_completed: int
    certificates_generated: int


class DashboardSummaryResponse(BaseModel):
    """Admin dashboard figures across all events"""
    total_events: int
    upcoming_events: int
    total_host_colleges: int
    total_faculty: int
    paid_host_colleges: int
    paid_faculty: int
    total_revenue: Decimal
    certificates_generated: int
