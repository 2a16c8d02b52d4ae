from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import jwt


class ConnectionDetailsError(ValueError):
    pass


@dataclass(frozen=True)
class ConnectionInfo:
    url: str
    token: str
    room_name: str


def parse_connection_details(token: Optional[str], url: Optional[str]) -> ConnectionInfo:
    """Read the room name out of a LiveKit join token without verifying it."""
    if not token or not url:
        raise ConnectionDetailsError("Missing connection parameters")
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        raise ConnectionDetailsError("Invalid token format")

    room = (claims.get("video") or {}).get("room")
    if not room:
        raise ConnectionDetailsError("Room name not found in token")
    return ConnectionInfo(url=url, token=token, room_name=room)


class AgentState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    LISTENING = "listening"
    THINKING = "thinking"
    SPEAKING = "speaking"


_LABELS = {
    AgentState.SPEAKING: "Speaking",
    AgentState.LISTENING: "Listening",
    AgentState.THINKING: "Thinking",
    AgentState.CONNECTED: "Connected",
}


def status_label(state: Union[AgentState, str, None]) -> str:
    try:
        return _LABELS.get(AgentState(state), "Idle")
    except ValueError:
        return "Idle"
