from typing import Any, Dict, Optional
import logging

from livekit import rtc

from voice_agent.domain.draft import QuotationDraft
from voice_agent.rpc import protocol

logger = logging.getLogger(__name__)


class QuotationPublisher:
    """Agent-side sender of quotation drafts to the user's room client."""

    def __init__(
        self,
        local_participant: Any,
        destination_identity: Optional[str] = None,
        response_timeout: float = 10.0,
    ) -> None:
        self.local_participant = local_participant
        self.destination_identity = destination_identity
        self.response_timeout = response_timeout

    async def publish(self, draft: QuotationDraft) -> bool:
        """Send the draft; returns True when the client acknowledged the RPC."""
        payload = protocol.encode(draft.to_update_message())

        if self.destination_identity:
            try:
                response = await self.local_participant.perform_rpc(
                    destination_identity=self.destination_identity,
                    method=protocol.UPDATE_METHOD,
                    payload=payload,
                    response_timeout=self.response_timeout,
                )
                logger.debug("updateQuotation acknowledged: %s", response)
                return True
            except rtc.RpcError as e:
                logger.warning("updateQuotation RPC failed (%s), falling back to data channel", e.message)

        await self.local_participant.publish_data(
            payload.encode("utf-8"), reliable=True, topic=protocol.DATA_TOPIC
        )
        logger.info("Quotation update broadcast on topic '%s'", protocol.DATA_TOPIC)
        return False

    async def request_save(self, draft: QuotationDraft) -> Dict[str, Any]:
        if not self.destination_identity:
            return protocol.error("No participant to save the quotation")

        logger.info("Requesting save for %s item(s)", len(draft.items))
        try:
            response = await self.local_participant.perform_rpc(
                destination_identity=self.destination_identity,
                method=protocol.SAVE_METHOD,
                payload=protocol.encode(draft.to_save_message()),
                response_timeout=self.response_timeout,
            )
        except rtc.RpcError as e:
            logger.error("saveQuotation RPC failed: %s", e.message)
            return protocol.error(f"Failed to save quotation: {e.message}")

        try:
            return protocol.decode(response)
        except ValueError:
            logger.error("saveQuotation returned a non-JSON response: %r", response)
            return protocol.error("Invalid response from client")
