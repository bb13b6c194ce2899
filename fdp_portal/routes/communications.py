"""
Communication Routes
Bulk email/WhatsApp, reminders, link sharing and the communication log
"""

from fastapi import APIRouter, Depends

from fdp_portal.auth import get_current_admin
from fdp_portal.dependencies import get_communication_service
from fdp_portal.schemas.communication import (
    BulkEmailRequest,
    BulkWhatsAppRequest,
    BroadcastRequest,
    CommunicationResultResponse,
    CommunicationLogListResponse,
)
from fdp_portal.services.communication_service import CommunicationService

router = APIRouter()


@router.post("/communications/bulk-email", response_model=CommunicationResultResponse)
async def send_bulk_email(
    request: BulkEmailRequest,
    current_admin: dict = Depends(get_current_admin),
    communications: CommunicationService = Depends(get_communication_service)
):
    """
    Send one email to many recipients (Admin only)
    
    - **recipients**: explicit list, or
    - **audience**: faculty, host_college or all paid registrants of the FDP
    
    `{{name}}` in the content is replaced per recipient.
    """
    return await communications.send_bulk_email(request)


@router.post("/communications/bulk-whatsapp", response_model=CommunicationResultResponse)
async def send_bulk_whatsapp(
    request: BulkWhatsAppRequest,
    current_admin: dict = Depends(get_current_admin),
    communications: CommunicationService = Depends(get_communication_service)
):
    return await communications.send_bulk_whatsapp(request)


@router.post("/communications/send-reminders/{event_id}", response_model=CommunicationResultResponse)
async def send_reminders(
    event_id: str,
    request: BroadcastRequest = BroadcastRequest(),
    current_admin: dict = Depends(get_current_admin),
    communications: CommunicationService = Depends(get_communication_service)
):
    """Start date and joining link to every paid registrant"""
    return await communications.send_reminders(event_id, request)


@router.post("/communications/share-community/{event_id}", response_model=CommunicationResultResponse)
async def share_community(
    event_id: str,
    request: BroadcastRequest = BroadcastRequest(),
    current_admin: dict = Depends(get_current_admin),
    communications: CommunicationService = Depends(get_communication_service)
):
    return await communications.share_community(event_id, request)


@router.post("/communications/share-feedback/{event_id}", response_model=CommunicationResultResponse)
async def share_feedback(
    event_id: str,
    request: BroadcastRequest = BroadcastRequest(),
    current_admin: dict = Depends(get_current_admin),
    communications: CommunicationService = Depends(get_communication_service)
):
    return await communications.share_feedback(event_id, request)


@router.get("/fdp-events/{event_id}/communications", response_model=CommunicationLogListResponse)
async def list_communication_logs(
    event_id: str,
    current_admin: dict = Depends(get_current_admin),
    communications: CommunicationService = Depends(get_communication_service)
):
    return await communications.list_logs(event_id)
