from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Body, Depends
import logging

from quotify_api.adapters.livekit_tokens import TokenIssuerPort
from quotify_api.auth.deps import CurrentUser, get_interactive_user
from quotify_api.auth.security import AGENT_SCOPE, create_access_token
from quotify_api.core.config import settings
from quotify_api.deps import get_token_issuer
from quotify_api.schemas.livekit import ConnectionDetails, TokenRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/livekit", tags=["livekit"])


@router.post("/token", response_model=ConnectionDetails, summary="Join details for a voice session")
async def create_token(
    body: Optional[TokenRequest] = Body(default=None),
    current: CurrentUser = Depends(get_interactive_user),
    issuer: TokenIssuerPort = Depends(get_token_issuer),
) -> ConnectionDetails:
    agent_token = create_access_token(
        sub=current.user.email,
        expires_delta=timedelta(hours=settings.AGENT_TOKEN_TTL_HOURS),
        scope=AGENT_SCOPE,
    )
    details = issuer.issue(body.roomName if body else None, api_token=agent_token)
    logger.info("Issued voice session %s for user %s", details.session_id, current.id)
    return details
