from __future__ import annotations
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quotify_api.models.quotation import QuotationTemplate


class TemplateRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, id_: int, organization_id: int) -> Optional[QuotationTemplate]:
        stmt = select(QuotationTemplate).where(
            QuotationTemplate.id == id_,
            QuotationTemplate.organization_id == organization_id,
        )
        res = await self.session.execute(stmt)
        return res.scalar_one_or_none()

    async def get_for_organization(self, organization_id: int) -> Optional[QuotationTemplate]:
        stmt = select(QuotationTemplate).where(
            QuotationTemplate.organization_id == organization_id
        )
        res = await self.session.execute(stmt)
        return res.scalar_one_or_none()

    async def upsert(
        self,
        organization_id: int,
        template_data: Dict[str, Any],
        template_name: Optional[str] = None,
    ) -> QuotationTemplate:
        existing = await self.get_for_organization(organization_id)
        if existing:
            existing.template_data = dict(template_data)
            if template_name:
                existing.template_name = template_name
            await self.session.flush()
            return existing

        template = QuotationTemplate(
            organization_id=organization_id,
            template_name=template_name or "Default",
            template_data=dict(template_data),
        )
        self.session.add(template)
        await self.session.flush()
        return template
