from fastapi import APIRouter, HTTPException, status, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from quotify_api.auth.deps import CurrentUser, get_current_user
from quotify_api.auth.schemas import LoginRequest, MeResponse, SignupRequest, TokenResponse
from quotify_api.auth.security import authenticate_user, create_access_token, hash_password
from quotify_api.core.db import get_db
from quotify_api.core.exceptions import ConflictError
from quotify_api.repositories.organization import OrganizationRepository
from quotify_api.repositories.user import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account and its organization",
)
async def signup(
    body: SignupRequest, session: AsyncSession = Depends(get_db)
) -> TokenResponse:
    users = UserRepository(session)
    if await users.get_by_email(body.email):
        raise ConflictError("An account with this email already exists")

    user = await users.add(body.email, hash_password(body.password), body.full_name)
    org_name = body.company_name or f"{user.email}'s company"
    org = await OrganizationRepository(session).create_for_owner(user.id, org_name)
    await session.commit()

    logger.info("Created user %s with organization %s", user.id, org.id)
    return TokenResponse(access_token=create_access_token(sub=user.email))


@router.post("/login", response_model=TokenResponse, summary="Login with email/password (JSON)")
async def login(
    body: LoginRequest, session: AsyncSession = Depends(get_db)
) -> TokenResponse:
    user = await authenticate_user(session, body.email, body.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
        )
    token = create_access_token(sub=user.email)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=MeResponse)
async def me(current: CurrentUser = Depends(get_current_user)) -> MeResponse:
    return MeResponse(
        email=current.user.email,
        full_name=current.user.full_name,
        organization_id=current.organization_id,
    )
