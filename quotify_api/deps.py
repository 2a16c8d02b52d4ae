from __future__ import annotations
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from quotify_api.adapters.livekit_tokens import TokenIssuerPort


def get_token_issuer() -> "TokenIssuerPort":
    from quotify_api.adapters.livekit_tokens import LiveKitTokenIssuer
    from quotify_api.core.config import settings

    return LiveKitTokenIssuer(
        settings.LIVEKIT_URL,
        settings.LIVEKIT_API_KEY,
        settings.LIVEKIT_API_SECRET,
        ttl_hours=settings.LIVEKIT_TOKEN_TTL_HOURS,
    )
