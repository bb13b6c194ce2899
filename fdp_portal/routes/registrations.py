"""
Registration Routes
Host college and faculty registration, feedback completion
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from fdp_portal.auth import get_current_admin
from fdp_portal.dependencies import get_event_service, get_registration_service
from fdp_portal.schemas.registration import (
    HostCollegeCreate,
    HostCollegeResponse,
    HostCollegeRegistrationResponse,
    FacultyRegistrationCreate,
    FacultyRegistrationResponse,
    FacultyRegistrationResult,
    FeedbackResponse,
)
from fdp_portal.services.event_service import EventService
from fdp_portal.services.registration_service import RegistrationService

router = APIRouter()


class HostCollegeOption(BaseModel):
    """What the faculty form needs to offer a host college"""
    id: str
    college_name: str
    logo_url: Optional[str] = None


@router.post(
    "/host-colleges",
    response_model=HostCollegeRegistrationResponse,
    status_code=status.HTTP_201_CREATED
)
async def register_host_college(
    fdp_id: str = Form(...),
    college_name: str = Form(...),
    address: str = Form(...),
    contact_person: str = Form(...),
    email: str = Form(...),
    phone: str = Form(...),
    website: Optional[str] = Form(None),
    whatsapp: Optional[str] = Form(None),
    logo: Optional[UploadFile] = File(None),
    registrations: RegistrationService = Depends(get_registration_service)
):
    """
    Register a host college (multipart form)
    
    - **logo**: optional PNG/JPG/GIF, normalised and stored under /uploads/logos
    
    Returns the college and the payment order to complete.
    """
    try:
        data = HostCollegeCreate(
            fdp_id=fdp_id,
            college_name=college_name,
            address=address,
            contact_person=contact_person,
            email=email,
            phone=phone,
            website=website or None,
            whatsapp=whatsapp or None,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))

    logo_file = None
    if logo is not None and logo.filename:
        logo_file = (await logo.read(), logo.content_type or "")

    return await registrations.register_host_college(data, logo_file)


@router.get("/host-colleges/{college_id}", response_model=HostCollegeResponse)
async def get_host_college(
    college_id: str,
    current_admin: dict = Depends(get_current_admin),
    registrations: RegistrationService = Depends(get_registration_service)
):
    return await registrations.get_host_college_or_404(college_id)


@router.get("/fdp-events/{event_id}/host-colleges", response_model=List[HostCollegeOption])
async def list_host_college_options(
    event_id: str,
    events: EventService = Depends(get_event_service)
):
    """Paid host colleges of an event, for the faculty registration form"""
    colleges = await events.list_host_colleges(event_id)
    return [c for c in colleges if c["payment_status"] == "completed"]


@router.get("/admin/fdp-events/{event_id}/host-colleges", response_model=List[HostCollegeResponse])
async def list_host_colleges(
    event_id: str,
    current_admin: dict = Depends(get_current_admin),
    events: EventService = Depends(get_event_service)
):
    return await events.list_host_colleges(event_id)


@router.post(
    "/faculty-registrations",
    response_model=FacultyRegistrationResult,
    status_code=status.HTTP_201_CREATED
)
async def register_faculty(
    request: FacultyRegistrationCreate,
    registrations: RegistrationService = Depends(get_registration_service)
):
    """
    Register a faculty member
    
    - **host_college_id**: optional, must be a host college of the same FDP
    
    The fee is always the event's faculty fee.
    """
    return await registrations.register_faculty(request)


@router.get("/faculty-registrations/{faculty_id}", response_model=FacultyRegistrationResponse)
async def get_faculty_registration(
    faculty_id: str,
    registrations: RegistrationService = Depends(get_registration_service)
):
    return await registrations.get_faculty_or_404(faculty_id)


@router.post("/faculty-registrations/{faculty_id}/feedback", response_model=FeedbackResponse)
async def submit_feedback(
    faculty_id: str,
    registrations: RegistrationService = Depends(get_registration_service)
):
    """
    Report that the feedback form was completed
    
    Issues the certificate when the payment is completed and none exists yet.
    """
    return await registrations.submit_feedback(faculty_id)


@router.get("/fdp-events/{event_id}/faculty", response_model=List[FacultyRegistrationResponse])
async def list_faculty(
    event_id: str,
    current_admin: dict = Depends(get_current_admin),
    events: EventService = Depends(get_event_service)
):
    return await events.list_faculty(event_id)


@router.get("/host-colleges/{college_id}/faculty", response_model=List[FacultyRegistrationResponse])
async def list_host_college_faculty(
    college_id: str,
    current_admin: dict = Depends(get_current_admin),
    registrations: RegistrationService = Depends(get_registration_service)
):
    return await registrations.list_host_college_faculty(college_id)
