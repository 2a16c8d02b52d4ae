from typing import Any, Dict, Optional
import asyncio
import logging

from voice_agent.domain.draft import QuotationDraft
from voice_agent.rpc.publisher import QuotationPublisher
from voice_agent.services.draft_store import DraftStore

logger = logging.getLogger(__name__)


class QuotationEditor:
    """
    Applies the agent's tool calls to the room's draft.
    Every change is persisted (when a store is configured) and pushed to the room client.
    Methods return the sentence the agent reads back to the user.
    """

    def __init__(
        self,
        room_name: str,
        publisher: QuotationPublisher,
        store: Optional[DraftStore] = None,
        draft: Optional[QuotationDraft] = None,
    ) -> None:
        self.room_name = room_name
        self.publisher = publisher
        self.store = store
        self.draft = draft or QuotationDraft()
        self.saved_quotation_id: Optional[str] = None
        self._save_lock = asyncio.Lock()
        self._saved_result: Optional[Dict[str, Any]] = None

    async def _commit(self) -> None:
        # an edited draft is a new quotation
        self._saved_result = None
        if self.store is not None:
            await self.store.save(self.room_name, self.draft)
        await self.publisher.publish(self.draft)

    async def set_customer(self, name: str) -> str:
        self.draft.set_customer(name)
        await self._commit()
        return f"Customer set to {self.draft.customer or 'nobody'}."

    async def add_item(self, name: str, quantity: int, rate: float) -> str:
        try:
            item = self.draft.add_item(name, quantity, rate)
        except ValueError as e:
            return str(e)
        await self._commit()
        return f"{item.name}: {item.qty} at {item.rate:g} each. Total is now {self.draft.total:g}."

    async def update_item(
        self, name: str, quantity: Optional[int] = None, rate: Optional[float] = None
    ) -> str:
        try:
            item = self.draft.update_item(name, quantity, rate)
        except ValueError as e:
            return str(e)
        await self._commit()
        return f"Updated {item.name} to {item.qty} at {item.rate:g}. Total is now {self.draft.total:g}."

    async def remove_item(self, name: str) -> str:
        try:
            item = self.draft.remove_item(name)
        except ValueError as e:
            return str(e)
        await self._commit()
        return f"Removed {item.name}. Total is now {self.draft.total:g}."

    async def clear(self) -> str:
        self.draft.clear()
        await self._commit()
        return "The quotation has been cleared."

    def summary(self) -> str:
        return self.draft.summary()

    async def save(self) -> Dict[str, Any]:
        """Save once; callers racing the first save get its result."""
        async with self._save_lock:
            if self._saved_result is not None:
                return self._saved_result
            if not self.draft.items:
                return {"status": "error", "message": "There are no items to save yet."}

            result = await self.publisher.request_save(self.draft)
            if result.get("status") != "success":
                logger.warning("Save failed for room %s: %s", self.room_name, result.get("message"))
                return result

            self.saved_quotation_id = result.get("quotation_id")
            self._saved_result = result
            if self.store is not None:
                await self.store.delete(self.room_name)
            logger.info("Quotation %s saved for room %s", self.saved_quotation_id, self.room_name)
            return result
