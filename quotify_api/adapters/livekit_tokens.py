from typing import Optional, Protocol
from datetime import timedelta
import json
import random
import string
import time

from livekit import api

from quotify_api.core.exceptions import ConfigurationError
from quotify_api.schemas.livekit import ConnectionDetails


_BASE36 = string.digits + string.ascii_lowercase


def default_room_name(now_ms: Optional[int] = None) -> str:
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = "".join(random.choice(_BASE36) for _ in range(7))
    return f"user_session_{now_ms}_{suffix}"


class TokenIssuerPort(Protocol):
    def issue(
        self, room_name: Optional[str], api_token: Optional[str] = None
    ) -> ConnectionDetails: ...


class LiveKitTokenIssuer(TokenIssuerPort):
    def __init__(
        self,
        url: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
        ttl_hours: int = 10,
    ) -> None:
        self.url = url
        self.api_key = api_key
        self.api_secret = api_secret
        self.ttl = timedelta(hours=ttl_hours)

    def issue(
        self, room_name: Optional[str], api_token: Optional[str] = None
    ) -> ConnectionDetails:
        if not (self.url and self.api_key and self.api_secret):
            raise ConfigurationError("Server misconfigured: missing LiveKit credentials")

        now_ms = int(time.time() * 1000)
        room = room_name or default_room_name(now_ms)

        token = (
            api.AccessToken(self.api_key, self.api_secret)
            .with_identity(f"user_{now_ms}")
            .with_ttl(self.ttl)
            .with_grants(
                api.VideoGrants(
                    room_join=True,
                    room=room,
                    can_publish=True,
                    can_subscribe=True,
                    can_publish_data=True,
                )
            )
        )
        if api_token:
            # the voice agent reads this to call the backend on the user's behalf
            token = token.with_metadata(json.dumps({"api_token": api_token}))

        return ConnectionDetails(url=self.url, token=token.to_jwt(), session_id=room)
