from typing import Any, Optional, Protocol, runtime_checkable, Literal, cast, Dict
from redis.asyncio import Redis
from redis.backoff import ExponentialBackoff
from redis.retry import Retry

from voice_agent.core.config import settings


@runtime_checkable
class AsyncRedisClient(Protocol):
    async def ping(self) -> Any: ...
    async def get(self, name: str) -> Any: ...
    async def set(self, name: str, value: Any, ex: Optional[int] = None) -> Any: ...
    async def delete(self, *names: str) -> Any: ...
    async def aclose(self) -> Any: ...


class RedisManager:
    def __init__(self, url: Optional[str] = None) -> None:
        self.url = url or settings.redis_url
        self._client: Optional[AsyncRedisClient] = None

    async def connect(self) -> None:
        if not self.url:
            raise RuntimeError("REDIS_URL is not set")

        retry = Retry(ExponentialBackoff(), retries=int(settings.redis_retries))
        decode_true: Literal[True] = True

        kwargs: Dict[str, Any] = {
            "url": self.url,
            "max_connections": int(settings.redis_max_connections),
            "socket_timeout": float(settings.redis_socket_timeout),
            "health_check_interval": int(settings.redis_healthcheck_secs),
            "decode_responses": decode_true,
            "retry": retry,
        }
        client = cast(AsyncRedisClient, Redis.from_url(**kwargs))

        self._client = client
        assert self._client is not None
        await self._client.ping()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> AsyncRedisClient:
        if self._client is None:
            raise RuntimeError(
                "Redis client not initialized. Call connect() first."
            )
        return self._client
