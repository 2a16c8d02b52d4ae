import jwt
import pytest

from voice_agent.client.connection import (
    AgentState,
    ConnectionDetailsError,
    parse_connection_details,
    status_label,
)

SECRET = "a-livekit-secret-that-is-long-enough-for-hs256"


def test_reads_room_from_token():
    token = jwt.encode({"sub": "user_1", "video": {"room": "user_session_1_abc1234"}}, SECRET)
    info = parse_connection_details(token, "wss://example.livekit.cloud")
    assert info.room_name == "user_session_1_abc1234"
    assert info.url == "wss://example.livekit.cloud"


@pytest.mark.parametrize(
    "token,url,message",
    [
        (None, "wss://x", "Missing connection parameters"),
        ("abc", None, "Missing connection parameters"),
        ("not-a-jwt", "wss://x", "Invalid token format"),
        (jwt.encode({"sub": "user_1"}, SECRET), "wss://x", "Room name not found in token"),
    ],
)
def test_errors(token, url, message):
    with pytest.raises(ConnectionDetailsError, match=message):
        parse_connection_details(token, url)


def test_status_labels():
    assert status_label(AgentState.SPEAKING) == "Speaking"
    assert status_label("listening") == "Listening"
    assert status_label(AgentState.THINKING) == "Thinking"
    assert status_label(AgentState.CONNECTED) == "Connected"
    assert status_label(AgentState.CONNECTING) == "Idle"
    assert status_label("initializing") == "Idle"
    assert status_label(None) == "Idle"
