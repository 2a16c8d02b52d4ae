from __future__ import annotations
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    app_name: str = Field("Quotify Voice Agent")
    debug: bool = Field(False)

    quotify_api_url: str = Field("http://localhost:8000")
    api_timeout_seconds: float = Field(10.0, gt=0)

    redis_url: Optional[str] = Field(None)
    redis_draft_ttl_seconds: int = Field(60 * 60 * 12, ge=60)
    redis_retries: int = Field(3, ge=0)
    redis_max_connections: int = Field(10, ge=1)
    redis_socket_timeout: float = Field(5.0, gt=0)
    redis_healthcheck_secs: int = Field(30, ge=0)

    agent_name: str = Field("quotify-agent")
    llm_model: str = Field("gpt-4o-mini")
    stt_model: str = Field("whisper-1")
    tts_model: str = Field("tts-1")
    tts_voice: str = Field("alloy")

    # seconds the agent waits for the browser to acknowledge an RPC
    rpc_response_timeout: float = Field(10.0, gt=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
