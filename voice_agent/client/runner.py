"""
Headless room client.

Joins the LiveKit room with the user's connection details, keeps the live
quotation in sync with the agent and saves it through the backend when the
agent asks. Run with `quotify-room --url wss://... --token <join token>
--api-token <quotify token>`.
"""
from typing import Any, Optional
import argparse
import asyncio
import logging
import os

from livekit import rtc

from voice_agent.adapters.api_client import ApiClient
from voice_agent.client.connection import ConnectionInfo, parse_connection_details, status_label
from voice_agent.client.sync import QuotationSync
from voice_agent.core.config import settings
from voice_agent.core.logging import setup_logging

logger = logging.getLogger(__name__)

AGENT_STATE_ATTRIBUTE = "lk.agent.state"


def _log_panel(sync: QuotationSync) -> None:
    if sync.show_success:
        logger.info("Quotation saved, preview at %s", sync.preview_path())
    elif sync.quotation:
        logger.info(
            "Quotation for %s: %d item(s), total %s",
            sync.customer_name,
            len(sync.quotation.get("items") or []),
            sync.quotation.get("total", 0),
        )
    else:
        logger.info("Quotation cleared")


async def run_room_client(
    info: ConnectionInfo,
    api: ApiClient,
    room: Optional[Any] = None,
    stop: Optional[asyncio.Event] = None,
) -> QuotationSync:
    """Stay in the room until it disconnects or `stop` is set."""
    room = room if room is not None else rtc.Room()
    stop = stop or asyncio.Event()

    def on_disconnected(*_: Any) -> None:
        logger.info("Disconnected from room %s", info.room_name)
        stop.set()

    def on_attributes_changed(changed: Any, participant: Any) -> None:
        if AGENT_STATE_ATTRIBUTE in (changed or {}):
            logger.info("Agent: %s", status_label(changed[AGENT_STATE_ATTRIBUTE]))

    sync = QuotationSync(room, api, on_change=_log_panel)
    room.on("disconnected", on_disconnected)
    room.on("participant_attributes_changed", on_attributes_changed)

    await room.connect(info.url, info.token)
    logger.info("Connected to room %s", info.room_name)
    sync.start()
    try:
        await stop.wait()
    finally:
        sync.stop()
        room.off("participant_attributes_changed", on_attributes_changed)
        room.off("disconnected", on_disconnected)
        await room.disconnect()
    return sync


def main() -> None:
    ap = argparse.ArgumentParser(description="Join a Quotify voice session and sync the live quotation.")
    ap.add_argument("--url", default=os.getenv("LIVEKIT_URL"), help="LiveKit server URL.")
    ap.add_argument("--token", required=True, help="Participant join token from /livekit/token.")
    ap.add_argument("--api-token", default=os.getenv("QUOTIFY_API_TOKEN"), help="Quotify access token used to save.")
    args = ap.parse_args()

    setup_logging()
    info = parse_connection_details(args.token, args.url)
    api = ApiClient(settings.quotify_api_url, token=args.api_token, timeout=settings.api_timeout_seconds)
    try:
        asyncio.run(run_room_client(info, api))
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
