from __future__ import annotations
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quotify_api.models.quotation import Quotation


class QuotationRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, id_: str, organization_id: int) -> Optional[Quotation]:
        stmt = select(Quotation).where(
            Quotation.id == id_, Quotation.organization_id == organization_id
        )
        res = await self.session.execute(stmt)
        return res.scalar_one_or_none()

    async def add(
        self,
        *,
        organization_id: int,
        user_id: int,
        template_id: Optional[int],
        quote_number: str,
        quotation_data: Dict[str, Any],
    ) -> Quotation:
        quotation = Quotation(
            organization_id=organization_id,
            user_id=user_id,
            template_id=template_id,
            quote_number=quote_number,
            quotation_data=quotation_data,
        )
        self.session.add(quotation)
        await self.session.flush()
        return quotation

    async def list_for_organization(
        self, organization_id: int, *, limit: int = 20, offset: int = 0
    ) -> List[Quotation]:
        stmt = (
            select(Quotation)
            .where(Quotation.organization_id == organization_id)
            .order_by(Quotation.created_at.desc(), Quotation.quote_number.desc())
            .limit(limit)
            .offset(offset)
        )
        res = await self.session.execute(stmt)
        return list(res.scalars().all())
