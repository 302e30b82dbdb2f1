"""Application configuration for the token server."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ServiceConfig:
    """Read-only LiveKit credentials handed to the token issuer."""

    api_key: str = ""
    api_secret: str = ""
    server_url: str = ""
    token_ttl: timedelta | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.api_key and self.api_secret and self.server_url)


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_env: str = Field(default="development")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3001, ge=1, le=65535)
    log_level: str = Field(default="info")
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])

    livekit_api_key: str = Field(default="")
    livekit_api_secret: str = Field(default="")
    livekit_url: str = Field(default="")
    livekit_token_ttl: int | None = Field(default=None, ge=1, description="Token lifetime in seconds")

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        """Allow comma-separated env values for CORS origins."""

        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("livekit_token_ttl", mode="before")
    @classmethod
    def _lenient_ttl(cls, value: object) -> object:
        """Fall back to the library default when the TTL is blank or not a positive integer."""

        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
            if not value.isdecimal() or int(value) < 1:
                logger.warning("Ignoring invalid LIVEKIT_TOKEN_TTL %r; using the default token lifetime", value)
                return None
        elif isinstance(value, int) and value < 1:
            logger.warning("Ignoring invalid LIVEKIT_TOKEN_TTL %r; using the default token lifetime", value)
            return None
        return value

    def service_config(self) -> ServiceConfig:
        """Freeze the LiveKit credentials into a ServiceConfig."""

        ttl = timedelta(seconds=self.livekit_token_ttl) if self.livekit_token_ttl else None
        return ServiceConfig(
            api_key=self.livekit_api_key.strip(),
            api_secret=self.livekit_api_secret.strip(),
            server_url=self.livekit_url.strip(),
            token_ttl=ttl,
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


settings = get_settings()
