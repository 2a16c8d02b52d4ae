from typing import Any, List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field, field_validator


def _coerce_list(v: Any) -> List[str]:
    if isinstance(v, str):
        s = v.strip()
        if s.startswith("["):  # JSON
            import json

            try:
                arr = json.loads(s)
                if isinstance(arr, list):
                    return [str(x) for x in arr]
            except ValueError:
                pass
        # CSV
        return [p.strip() for p in s.split(",") if p.strip()]
    return v


class Settings(BaseSettings):
    APP_NAME: str = Field(default="Quotify API")
    APP_VERSION: str = Field(default="0.1.0")
    DEBUG: bool = Field(default=False)

    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./quotify.db",
        validation_alias=AliasChoices("DATABASE_URL"),
    )
    DB_SSL_CA_BUNDLE: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DB_SSL_CA_BUNDLE", "RDS_CA_BUNDLE"),
    )

    SECRET_KEY: str = Field(default="change-me")
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60)

    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000"],
        validation_alias=AliasChoices("CORS_ORIGINS"),
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(
        default=True,
        validation_alias=AliasChoices("CORS_ALLOW_CREDENTIALS"),
    )
    ALLOWED_HOSTS: List[str] = Field(
        default=["localhost", "127.0.0.1", "testserver"],
        validation_alias=AliasChoices("ALLOWED_HOSTS"),
    )

    LIVEKIT_URL: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("LIVEKIT_URL", "NEXT_PUBLIC_LIVEKIT_URL"),
    )
    LIVEKIT_API_KEY: Optional[str] = Field(default=None)
    LIVEKIT_API_SECRET: Optional[str] = Field(default=None)
    LIVEKIT_TOKEN_TTL_HOURS: int = Field(default=10, ge=1)
    AGENT_TOKEN_TTL_HOURS: int = Field(default=10, ge=1)

    QUOTATION_VALIDITY_DAYS: int = Field(default=30, ge=0)
    TAX_RATE: float = Field(default=0.18, ge=0)
    CURRENCY_SYMBOL: str = Field(default="₹")
    LOGO_MAX_BYTES: int = Field(default=2 * 1024 * 1024)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("CORS_ORIGINS", "ALLOWED_HOSTS", mode="before")
    @classmethod
    def _coerce_lists(cls, v: Any) -> List[str]:
        return _coerce_list(v)


settings = Settings()
