"""
Certificate Routes
Issuance, lookup, public verification and template management
"""

from typing import List

from fastapi import APIRouter, Depends, status

from fdp_portal.auth import get_current_admin
from fdp_portal.dependencies import (
    get_event_service,
    get_registration_service,
    get_template_service,
)
from fdp_portal.schemas.certificate import (
    CertificateResponse,
    CertificateVerifyResponse,
    BulkCertificateResponse,
    CertificateTemplateCreate,
    CertificateTemplateUpdate,
    CertificateTemplateResponse,
)
from fdp_portal.services.event_service import EventService
from fdp_portal.services.registration_service import RegistrationService
from fdp_portal.services.template_service import TemplateService

router = APIRouter()


@router.post(
    "/certificates/generate/{faculty_id}",
    response_model=CertificateResponse,
    status_code=status.HTTP_201_CREATED
)
async def generate_certificate(
    faculty_id: str,
    current_admin: dict = Depends(get_current_admin),
    registrations: RegistrationService = Depends(get_registration_service)
):
    """
    Issue a certificate for one registration (Admin only)
    
    Requires a completed payment; 409 if the certificate already exists.
    """
    return await registrations.generate_certificate(faculty_id)


@router.post("/certificates/bulk-generate/{event_id}", response_model=BulkCertificateResponse)
async def bulk_generate_certificates(
    event_id: str,
    current_admin: dict = Depends(get_current_admin),
    registrations: RegistrationService = Depends(get_registration_service)
):
    """
    Issue certificates for every paid registration with feedback submitted
    
    Each registration gets its own result: generated, already_exists or error.
    """
    return await registrations.bulk_generate_certificates(event_id)


@router.get("/certificates/faculty/{faculty_id}", response_model=CertificateResponse)
async def get_faculty_certificate(
    faculty_id: str,
    registrations: RegistrationService = Depends(get_registration_service)
):
    return await registrations.get_certificate_for_faculty(faculty_id)


@router.get("/certificates/verify/{certificate_id}", response_model=CertificateVerifyResponse)
async def verify_certificate(
    certificate_id: str,
    registrations: RegistrationService = Depends(get_registration_service)
):
    """Public check that a certificate id was issued"""
    return await registrations.verify_certificate(certificate_id)


@router.get("/fdp-events/{event_id}/certificates", response_model=List[CertificateResponse])
async def list_certificates(
    event_id: str,
    current_admin: dict = Depends(get_current_admin),
    events: EventService = Depends(get_event_service)
):
    return await events.list_certificates(event_id)


# Templates

@router.get("/certificate-templates", response_model=List[CertificateTemplateResponse])
async def list_templates(
    current_admin: dict = Depends(get_current_admin),
    templates: TemplateService = Depends(get_template_service)
):
    return await templates.list_templates()


@router.post(
    "/certificate-templates",
    response_model=CertificateTemplateResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_template(
    request: CertificateTemplateCreate,
    current_admin: dict = Depends(get_current_admin),
    templates: TemplateService = Depends(get_template_service)
):
    """
    Create an HTML certificate template (Admin only)
    
    Placeholders: {{participant_name}}, {{fdp_title}}, {{start_date}},
    {{end_date}}, {{fdp_dates}}, {{certificate_id}}, {{issue_date}},
    {{college_name}}, {{organiser_logo}}, {{college_logo}}, {{signature_image}}
    
    Marking a template as default unsets the previous default.
    """
    return await templates.create_template(request)


@router.get("/certificate-templates/{template_id}", response_model=CertificateTemplateResponse)
async def get_template(
    template_id: str,
    current_admin: dict = Depends(get_current_admin),
    templates: TemplateService = Depends(get_template_service)
):
    return await templates.get_template(template_id)


@router.put("/certificate-templates/{template_id}", response_model=CertificateTemplateResponse)
async def update_template(
    template_id: str,
    request: CertificateTemplateUpdate,
    current_admin: dict = Depends(get_current_admin),
    templates: TemplateService = Depends(get_template_service)
):
    return await templates.update_template(template_id, request)


@router.delete("/certificate-templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: str,
    current_admin: dict = Depends(get_current_admin),
    templates: TemplateService = Depends(get_template_service)
):
    await templates.delete_template(template_id)
