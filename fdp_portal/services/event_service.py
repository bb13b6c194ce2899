"""
Event Service
FDP event management, registrant listings and analytics
"""

import logging
from typing import List

from fastapi import HTTPException, status

from fdp_portal.schemas.event import EventCreate, EventUpdate
from fdp_portal.services.entity_store import EntityStore

logger = logging.getLogger(__name__)


class EventService:
    """Service for event operations"""

    def __init__(self, store: EntityStore):
        self.store = store

    async def list_events(self, active_only: bool = False) -> List[dict]:
        if active_only:
            return await self.store.list_upcoming_events()
        return await self.store.list_events()

    async def get_event(self, event_id: str) -> dict:
        event = await self.store.get_event(event_id)
        if not event:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="FDP event not found"
            )
        return event

    async def create_event(self, data: EventCreate) -> dict:
        event = await self.store.create_event(data.model_dump())
        logger.info(f"FDP event created: {event['title']} ({event['id']})")
        return event

    async def update_event(self, event_id: str, data: EventUpdate) -> dict:
        """
        Partial update

        Raises:
            HTTPException: 404 unknown event, 400 if the merged dates are inverted
        """
        current = await self.get_event(event_id)
        changes = data.model_dump(exclude_unset=True)

        start = changes.get("start_date") or current["start_date"]
        end = changes.get("end_date") or current["end_date"]
        if end < start:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="end_date must not be before start_date"
            )

        if not changes:
            return current

        return await self.store.update_event(event_id, changes)

    async def delete_event(self, event_id: str) -> None:
        if not await self.store.delete_event(event_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="FDP event not found"
            )
        logger.info(f"FDP event deleted: {event_id}")

    async def list_host_colleges(self, event_id: str) -> List[dict]:
        await self.get_event(event_id)
        return await self.store.list_host_colleges(event_id)

    async def list_faculty(self, event_id: str) -> List[dict]:
        await self.get_event(event_id)
        return await self.store.list_faculty_by_event(event_id)

    async def list_payments(self, event_id: str) -> List[dict]:
        await self.get_event(event_id)
        return await self.store.list_payments(event_id)

    async def list_certificates(self, event_id: str) -> List[dict]:
        await self.get_event(event_id)
        return await self.store.list_certificates(event_id)

    async def get_analytics(self, event_id: str) -> dict:
        await self.get_event(event_id)
        return await self.store.get_event_analytics(event_id)

    async def get_dashboard(self) -> dict:
        return await self.store.get_dashboard_summary()
