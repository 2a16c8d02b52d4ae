from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from quotify_api.auth.security import AGENT_SCOPE, decode_token, extract_bearer_token
from quotify_api.core.db import get_db
from quotify_api.core.exceptions import AuthError, NotFoundError
from quotify_api.models.user import User
from quotify_api.repositories.organization import OrganizationRepository
from quotify_api.repositories.user import UserRepository


@dataclass
class CurrentUser:
    user: User
    organization_id: int
    scope: Optional[str] = None

    @property
    def id(self) -> int:
        return self.user.id


async def get_current_user(
    authorization: Optional[str] = Header(default=None),
    session: AsyncSession = Depends(get_db),
) -> CurrentUser:
    token = extract_bearer_token(authorization)
    data = decode_token(token)

    user = await UserRepository(session).get_by_email(data.sub)
    if not user or user.disabled:
        raise AuthError()

    organization_id = await OrganizationRepository(session).get_organization_id(user.id)
    if organization_id is None:
        raise NotFoundError("Organization not found")

    return CurrentUser(user=user, organization_id=organization_id, scope=data.scope)


async def get_interactive_user(
    current: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Rejects the delegated tokens handed to voice agents."""
    if current.scope == AGENT_SCOPE:
        raise HTTPException(status_code=403, detail="Agent tokens cannot perform this action")
    return current
