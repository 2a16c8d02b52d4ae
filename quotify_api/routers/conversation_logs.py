from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from quotify_api.auth.deps import CurrentUser, get_current_user
from quotify_api.core.db import get_db
from quotify_api.core.exceptions import ValidationFailed
from quotify_api.models.conversation import Speaker
from quotify_api.repositories.conversation import ConversationLogRepository
from quotify_api.schemas.conversation import (
    ConversationLogIn,
    ConversationLogList,
    ConversationLogOut,
    ConversationLogStored,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/conversation-logs", tags=["conversation-logs"])

REQUIRED_FIELDS = ("speaker", "text", "timestamp", "session_id", "room_name")
SPEAKERS = [s.value for s in Speaker]


@router.post("", response_model=ConversationLogStored)
async def store_log(
    body: ConversationLogIn,
    current: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ConversationLogStored:
    missing: List[str] = [f for f in REQUIRED_FIELDS if getattr(body, f) in (None, "")]
    if missing:
        raise ValidationFailed(f"Missing required fields: {', '.join(REQUIRED_FIELDS)}")
    if body.speaker not in SPEAKERS:
        raise ValidationFailed(f"Invalid speaker value. Must be one of: {', '.join(SPEAKERS)}")

    log = await ConversationLogRepository(session).add(
        organization_id=current.organization_id,
        user_id=current.id,
        session_id=body.session_id,
        room_name=body.room_name,
        speaker=body.speaker,
        text=body.text,
        timestamp=body.timestamp,
        meta=body.metadata,
    )
    await session.commit()

    logger.debug("Stored %s log %s for room %s", body.speaker, log.id, body.room_name)
    return ConversationLogStored(log_id=log.id)


@router.get("", response_model=ConversationLogList)
async def list_logs(
    session_id: Optional[str] = Query(default=None),
    room_name: Optional[str] = Query(default=None),
    current: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ConversationLogList:
    rows = await ConversationLogRepository(session).search(
        current.id, session_id=session_id, room_name=room_name
    )
    logs = [ConversationLogOut.model_validate(r) for r in rows]
    return ConversationLogList(logs=logs, count=len(logs))
