"""
Names and payloads shared by the voice agent and the room client.

The agent pushes drafts with the `updateQuotation` RPC and asks the room
client to persist the quotation with `saveQuotation`. When an RPC cannot be
delivered the update is broadcast as a reliable data packet on the
`quotation` topic instead.
"""
from typing import Any, Dict
import json

UPDATE_METHOD = "updateQuotation"
SAVE_METHOD = "saveQuotation"

QUOTATION_UPDATE = "quotation_update"
SAVE_QUOTATION = "save_quotation"

DATA_TOPIC = "quotation"

UPDATE_ACK = {"status": "success", "message": "Quotation received"}


def encode(message: Dict[str, Any]) -> str:
    return json.dumps(message, separators=(",", ":"))


def decode(payload: Any) -> Dict[str, Any]:
    """Parse an RPC payload or data packet; raises ValueError on anything but a JSON object."""
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8")
    message = json.loads(payload)
    if not isinstance(message, dict):
        raise ValueError("Expected a JSON object")
    return message


def error(message: str) -> Dict[str, Any]:
    return {"status": "error", "message": message}
