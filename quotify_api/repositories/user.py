from __future__ import annotations
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quotify_api.models.user import User


class UserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, id_: int) -> Optional[User]:
        return await self.session.get(User, id_)

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email.lower())
        res = await self.session.execute(stmt)
        return res.scalar_one_or_none()

    async def add(self, email: str, hashed_password: str, full_name: Optional[str]) -> User:
        user = User(email=email.lower(), hashed_password=hashed_password, full_name=full_name)
        self.session.add(user)
        await self.session.flush()
        return user
