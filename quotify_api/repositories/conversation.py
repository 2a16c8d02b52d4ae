from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quotify_api.models.conversation import ConversationLog


class ConversationLogRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(
        self,
        *,
        organization_id: int,
        user_id: int,
        session_id: str,
        room_name: str,
        speaker: str,
        text: str,
        timestamp: datetime,
        meta: Optional[Dict[str, Any]] = None,
    ) -> ConversationLog:
        log = ConversationLog(
            organization_id=organization_id,
            user_id=user_id,
            session_id=session_id,
            room_name=room_name,
            speaker=speaker,
            text=text,
            timestamp=timestamp,
            meta=meta or {},
        )
        self.session.add(log)
        await self.session.flush()
        return log

    async def search(
        self,
        user_id: int,
        *,
        session_id: Optional[str] = None,
        room_name: Optional[str] = None,
    ) -> List[ConversationLog]:
        stmt = select(ConversationLog).where(ConversationLog.user_id == user_id)
        if session_id:
            stmt = stmt.where(ConversationLog.session_id == session_id)
        if room_name:
            stmt = stmt.where(ConversationLog.room_name == room_name)
        stmt = stmt.order_by(ConversationLog.timestamp.asc(), ConversationLog.id.asc())
        res = await self.session.execute(stmt)
        return list(res.scalars().all())
