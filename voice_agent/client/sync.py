"""
Room-side quotation sync.

Mirrors the live-quotation panel of the web client: it answers the agent's
`updateQuotation` and `saveQuotation` RPCs, listens for drafts broadcast on
the data channel when RPC delivery fails, and persists the finished
quotation through the backend.
"""
from typing import Any, Callable, Dict, Optional
import logging

from livekit import rtc

from voice_agent.adapters.api_client import ApiError, QuotifyPort
from voice_agent.domain.draft import DEFAULT_CUSTOMER
from voice_agent.rpc import protocol

logger = logging.getLogger(__name__)

APPLICATION_ERROR = 1500


class QuotationSync:
    def __init__(
        self,
        room: Any,
        api_client: QuotifyPort,
        on_change: Optional[Callable[["QuotationSync"], None]] = None,
    ) -> None:
        self.room = room
        self.api = api_client
        self.on_change = on_change

        self.quotation: Optional[Dict[str, Any]] = None
        self.customer_name: str = ""
        self.saved_quotation_id: Optional[str] = None
        self.show_success = False

        self._started = False

    # ------------------ lifecycle ------------------

    def start(self) -> None:
        if self._started:
            return
        participant = self.room.local_participant
        participant.register_rpc_method(protocol.UPDATE_METHOD, self.handle_update_rpc)
        participant.register_rpc_method(protocol.SAVE_METHOD, self.handle_save_rpc)
        self.room.on("data_received", self.handle_data_packet)
        self._started = True
        logger.info("Quotation RPC methods registered")

    def stop(self) -> None:
        if not self._started:
            return
        participant = self.room.local_participant
        participant.unregister_rpc_method(protocol.UPDATE_METHOD)
        participant.unregister_rpc_method(protocol.SAVE_METHOD)
        self.room.off("data_received", self.handle_data_packet)
        self._started = False
        logger.info("Quotation RPC methods unregistered")

    # ------------------ updates ------------------

    def apply_update(self, message: Dict[str, Any]) -> bool:
        """Apply a `quotation_update` message; returns False for anything else."""
        data = message.get("data")
        if message.get("type") != protocol.QUOTATION_UPDATE or not isinstance(data, dict):
            return False

        if data.get("items") or data.get("customer"):
            self.quotation = data
            self.customer_name = data.get("customer") or DEFAULT_CUSTOMER
        else:
            self.quotation = None
            self.customer_name = ""
        self._changed()
        return True

    async def handle_update_rpc(self, data: Any) -> str:
        logger.info("Received quotation update via RPC from %s", getattr(data, "caller_identity", "?"))
        try:
            message = protocol.decode(data.payload)
        except ValueError as e:
            logger.error("Error processing quotation update: %s", e)
            raise rtc.RpcError(APPLICATION_ERROR, f"Failed to process quotation: {e}")
        self.apply_update(message)
        return protocol.encode(protocol.UPDATE_ACK)

    def handle_data_packet(self, packet: Any) -> None:
        topic = getattr(packet, "topic", None)
        if topic and topic != protocol.DATA_TOPIC:
            return
        try:
            message = protocol.decode(packet.data)
        except ValueError as e:
            logger.error("Error parsing data channel message: %s", e)
            return
        if self.apply_update(message):
            logger.info("Received quotation update via data channel")

    # ------------------ save ------------------

    async def handle_save_rpc(self, data: Any) -> str:
        logger.info("Received save quotation request via RPC")
        try:
            message = protocol.decode(data.payload)
            if message.get("type") != protocol.SAVE_QUOTATION:
                return protocol.encode(protocol.error("Invalid request type"))

            try:
                result = await self.api.save_quotation(message.get("data"))
            except ApiError as e:
                logger.error("Failed to save quotation: %s", e.message)
                return protocol.encode(protocol.error(e.message))

            self.saved_quotation_id = result.get("quotation_id")
            self.show_success = True
            self._changed()
            logger.info("Quotation saved successfully: %s", self.saved_quotation_id)
            return protocol.encode(
                {
                    "status": "success",
                    "message": "Quotation saved successfully",
                    "quotation_id": self.saved_quotation_id,
                    "total_amount": result.get("total_amount", 0),
                }
            )
        except Exception as e:
            logger.exception("Error saving quotation")
            return protocol.encode(protocol.error(f"Failed to save quotation: {e}"))

    # ------------------ panel actions ------------------

    def rename_customer(self, name: str) -> str:
        """Edits the displayed name only; the next update from the agent replaces it."""
        self.customer_name = name.strip() or DEFAULT_CUSTOMER
        self._changed()
        return self.customer_name

    def dismiss_success(self) -> None:
        self.show_success = False
        self._changed()

    def preview_path(self) -> Optional[str]:
        if not self.saved_quotation_id:
            return None
        return f"/quotations/{self.saved_quotation_id}/preview"

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self)
