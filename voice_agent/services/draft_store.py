from typing import Optional
import logging

from pydantic import ValidationError

from voice_agent.domain.draft import QuotationDraft
from voice_agent.services.redis_manager import AsyncRedisClient

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "quotify:draft"


class DraftStore:
    """Keeps the live draft of each room in Redis so a restarted job can resume it."""

    def __init__(
        self,
        client: AsyncRedisClient,
        prefix: str = DEFAULT_PREFIX,
        ttl_seconds: Optional[int] = 60 * 60 * 12,
    ) -> None:
        self.client = client
        self.prefix = prefix
        self.ttl = ttl_seconds

    def key(self, room_name: str) -> str:
        return f"{self.prefix}:{room_name}"

    async def load(self, room_name: str) -> Optional[QuotationDraft]:
        raw = await self.client.get(self.key(room_name))
        if not raw:
            return None
        try:
            return QuotationDraft.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding unreadable draft for room %s: %s", room_name, e)
            return None

    async def save(self, room_name: str, draft: QuotationDraft) -> None:
        await self.client.set(self.key(room_name), draft.model_dump_json(), ex=self.ttl)

    async def delete(self, room_name: str) -> None:
        await self.client.delete(self.key(room_name))
