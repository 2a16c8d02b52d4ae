"""
LiveKit worker for the Quotify voice agent.

Run with `python -m voice_agent.worker dev` (or `start` in production).
"""
from typing import Any, Optional, Set
import asyncio
import json
import logging

import httpx
from livekit.agents import AgentServer, AgentSession, JobContext, JobProcess, cli
from livekit.plugins import openai, silero

from voice_agent.adapters.api_client import ApiClient, ApiError
from voice_agent.agent import QuotationAgent
from voice_agent.core.config import settings
from voice_agent.core.logging import setup_logging
from voice_agent.domain.draft import QuotationDraft
from voice_agent.domain.end_of_call import EndOfCallDetector
from voice_agent.rpc.publisher import QuotationPublisher
from voice_agent.services.draft_store import DraftStore
from voice_agent.services.editor import QuotationEditor
from voice_agent.services.redis_manager import RedisManager

logger = logging.getLogger("voice_agent")

GOODBYE = "Thanks, your quotation is saved. Goodbye!"
GOODBYE_UNSAVED = "Thanks for calling. Goodbye!"


def api_token_from_metadata(metadata: Optional[str]) -> Optional[str]:
    if not metadata:
        return None
    try:
        data = json.loads(metadata)
    except ValueError:
        logger.warning("Participant metadata is not JSON; conversation logging disabled")
        return None
    return data.get("api_token") if isinstance(data, dict) else None


class TranscriptLogger:
    """Posts transcript lines to the backend without blocking the audio loop."""

    def __init__(self, api: ApiClient, room_name: str) -> None:
        self.api = api
        self.room_name = room_name
        self._tasks: Set[asyncio.Task] = set()

    def log(self, speaker: str, text: str) -> None:
        if not text.strip() or not self.api.token:
            return
        task = asyncio.create_task(self._post(speaker, text))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _post(self, speaker: str, text: str) -> None:
        try:
            await self.api.log_conversation(
                speaker=speaker,
                text=text,
                session_id=self.room_name,
                room_name=self.room_name,
            )
        except (ApiError, httpx.HTTPError) as e:
            logger.warning("Failed to store %s transcript: %s", speaker, e)

    async def drain(self) -> None:
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)


server = AgentServer()


def prewarm(proc: JobProcess):
    proc.userdata["vad"] = silero.VAD.load()


server.setup_fnc = prewarm


async def _open_store(ctx: JobContext) -> Optional[DraftStore]:
    if not settings.redis_url:
        return None
    manager = RedisManager(settings.redis_url)
    await manager.connect()
    ctx.add_shutdown_callback(manager.close)
    return DraftStore(manager.client, ttl_seconds=settings.redis_draft_ttl_seconds)


@server.rtc_session(agent_name=settings.agent_name)
async def entrypoint(ctx: JobContext):
    await ctx.connect()
    room_name = ctx.room.name

    participant = await ctx.wait_for_participant()
    logger.info("User %s joined room %s", participant.identity, room_name)

    api = ApiClient(
        settings.quotify_api_url,
        token=api_token_from_metadata(participant.metadata),
        timeout=settings.api_timeout_seconds,
    )
    transcripts = TranscriptLogger(api, room_name)
    ctx.add_shutdown_callback(transcripts.drain)

    store = await _open_store(ctx)
    draft = (await store.load(room_name) if store else None) or QuotationDraft()
    publisher = QuotationPublisher(
        ctx.room.local_participant,
        participant.identity,
        response_timeout=settings.rpc_response_timeout,
    )
    editor = QuotationEditor(room_name, publisher, store=store, draft=draft)

    session = AgentSession(
        stt=openai.STT(model=settings.stt_model),
        llm=openai.LLM(model=settings.llm_model),
        tts=openai.TTS(model=settings.tts_model, voice=settings.tts_voice),
        vad=ctx.proc.userdata["vad"],
    )
    detector = EndOfCallDetector()
    closing: Set[asyncio.Task] = set()

    async def finish_call() -> None:
        if editor.draft.items:
            result = await editor.save()
            saved = result.get("status") == "success"
        else:
            saved = editor.saved_quotation_id is not None
        handle = session.say(GOODBYE if saved else GOODBYE_UNSAVED, allow_interruptions=False)
        await handle
        ctx.shutdown(reason="end of call")

    @session.on("user_input_transcribed")
    def on_user_input(event: Any):
        if not event.is_final:
            return
        transcripts.log("user", event.transcript)
        if detector.check(event.transcript):
            logger.info("End of call detected in room %s", room_name)
            task = asyncio.create_task(finish_call())
            closing.add(task)
            task.add_done_callback(closing.discard)

    @session.on("conversation_item_added")
    def on_conversation_item(event: Any):
        item = event.item
        if getattr(item, "role", None) != "assistant":
            return
        text = getattr(item, "text_content", None)
        if text:
            transcripts.log("agent", text)

    await session.start(agent=QuotationAgent(editor), room=ctx.room)

    if not draft.is_empty():
        # resumed job: bring the room client back in sync
        await publisher.publish(draft)


def main() -> None:
    setup_logging()
    cli.run_app(server)


if __name__ == "__main__":
    main()
