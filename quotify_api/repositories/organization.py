from __future__ import annotations
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quotify_api.models.organization import Organization, OrganizationUser


class OrganizationRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, id_: int) -> Optional[Organization]:
        return await self.session.get(Organization, id_)

    async def get_for_update(self, id_: int) -> Optional[Organization]:
        # FOR UPDATE is a no-op on SQLite
        stmt = select(Organization).where(Organization.id == id_).with_for_update()
        res = await self.session.execute(stmt)
        return res.scalar_one_or_none()

    async def get_organization_id(self, user_id: int) -> Optional[int]:
        stmt = select(OrganizationUser.organization_id).where(
            OrganizationUser.user_id == user_id
        )
        res = await self.session.execute(stmt)
        return res.scalar_one_or_none()

    async def create_for_owner(self, user_id: int, name: str) -> Organization:
        org = Organization(name=name, org_data={})
        self.session.add(org)
        await self.session.flush()
        self.session.add(
            OrganizationUser(organization_id=org.id, user_id=user_id, role="owner")
        )
        await self.session.flush()
        return org

    async def update(
        self, org: Organization, *, name: Optional[str], org_data: Dict[str, Any]
    ) -> Organization:
        if name is not None:
            org.name = name
        # JSON columns only track reassignment, not in-place mutation
        org.org_data = dict(org_data)
        await self.session.flush()
        return org
