"""
Pydantic schemas for request/response validation
"""

from fdp_portal.schemas.event import (
    EventCreate,
    EventUpdate,
    EventResponse,
    EventAnalyticsResponse,
)
from fdp_portal.schemas.registration import (
    HostCollegeCreate,
    FacultyRegistrationCreate,
    HostCollegeResponse,
    FacultyRegistrationResponse,
    PaymentOrderResponse,
)
from fdp_portal.schemas.payment import (
    PaymentVerifyRequest,
    PaymentResponse,
)

__all__ = [
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "EventAnalyticsResponse",
    "HostCollegeCreate",
    "FacultyRegistrationCreate",
    "HostCollegeResponse",
    "FacultyRegistrationResponse",
    "PaymentOrderResponse",
    "PaymentVerifyRequest",
    "PaymentResponse",
]
