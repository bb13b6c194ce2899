"""
Template Service
Business logic for HTML certificate template management
"""

import logging
from typing import List

from fastapi import HTTPException, status

from fdp_portal.schemas.certificate import CertificateTemplateCreate, CertificateTemplateUpdate
from fdp_portal.services.certificate_service import CERTIFICATE_TOKENS, TOKEN_RE
from fdp_portal.services.entity_store import EntityStore

logger = logging.getLogger(__name__)


class TemplateService:
    """Service for template management operations"""

    def __init__(self, store: EntityStore):
        self.store = store

    @staticmethod
    def unknown_tokens(html_template: str) -> List[str]:
        """Placeholders that will always render empty"""
        found = {match.group(1) for match in TOKEN_RE.finditer(html_template)}
        return sorted(found - set(CERTIFICATE_TOKENS))

    async def create_template(self, data: CertificateTemplateCreate) -> dict:
        unknown = self.unknown_tokens(data.html_template)
        if unknown:
            logger.warning(f"Template '{data.name}' uses unknown placeholders: {', '.join(unknown)}")

        template = await self.store.create_certificate_template(data.model_dump())
        logger.info(f"Certificate template created: {template['name']} (default={template['is_default']})")
        return template

    async def list_templates(self) -> List[dict]:
        return await self.store.list_certificate_templates()

    async def get_template(self, template_id: str) -> dict:
        template = await self.store.get_certificate_template(template_id)
        if not template:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Template not found"
            )
        return template

    async def update_template(self, template_id: str, data: CertificateTemplateUpdate) -> dict:
        await self.get_template(template_id)
        return await self.store.update_certificate_template(
            template_id, data.model_dump(exclude_unset=True)
        )

    async def delete_template(self, template_id: str) -> None:
        if not await self.store.delete_certificate_template(template_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Template not found"
            )
