"""
FDP Event Routes
Public event listing and admin event management
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status

from fdp_portal.auth import get_current_admin
from fdp_portal.dependencies import get_event_service
from fdp_portal.schemas.event import EventCreate, EventUpdate, EventResponse, EventAnalyticsResponse
from fdp_portal.services.event_service import EventService

router = APIRouter()


@router.get("/fdp-events", response_model=List[EventResponse])
async def list_events(
    active: bool = Query(False, description="Only upcoming events, soonest first"),
    events: EventService = Depends(get_event_service)
):
    return await events.list_events(active_only=active)


@router.get("/fdp-events/{event_id}", response_model=EventResponse)
async def get_event(event_id: str, events: EventService = Depends(get_event_service)):
    return await events.get_event(event_id)


@router.post("/fdp-events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: EventCreate,
    current_admin: dict = Depends(get_current_admin),
    events: EventService = Depends(get_event_service)
):
    """
    Create an FDP event (Admin only)
    
    - **host_fee** / **faculty_fee**: fees charged at registration
    - **end_date** must not be before **start_date**
    """
    return await events.create_event(request)


@router.put("/fdp-events/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    request: EventUpdate,
    current_admin: dict = Depends(get_current_admin),
    events: EventService = Depends(get_event_service)
):
    """Partial update; only the fields sent are changed"""
    return await events.update_event(event_id, request)


@router.delete("/fdp-events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: str,
    current_admin: dict = Depends(get_current_admin),
    events: EventService = Depends(get_event_service)
):
    await events.delete_event(event_id)


@router.get("/fdp-events/{event_id}/analytics", response_model=EventAnalyticsResponse)
async def get_event_analytics(
    event_id: str,
    current_admin: dict = Depends(get_current_admin),
    events: EventService = Depends(get_event_service)
):
    return await events.get_analytics(event_id)
