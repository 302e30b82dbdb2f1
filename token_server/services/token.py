"""Token issuance service.

Validates the caller's room and participant names, checks the LiveKit credentials
and delegates signing to a ``TokenSigner``. Checks run in a fixed order so that a
malformed request is never reported as a server configuration problem."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from pydantic import ValidationError

from ..core.config import ServiceConfig, settings
from ..schemas.token import TokenRequest
from .signing import LiveKitSigner, RoomGrant, TokenSigner

logger = logging.getLogger(__name__)

REDACTED = "[redacted]"


class TokenIssuanceError(RuntimeError):
    """Base class for errors surfaced to the caller of ``POST /api/token``."""

    status_code = 500

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> dict[str, str]:
        payload = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class TokenValidationError(TokenIssuanceError):
    status_code = 400


class ConfigurationError(TokenIssuanceError):
    status_code = 500


class SigningError(TokenIssuanceError):
    status_code = 500


@dataclass(slots=True)
class IssuedToken:
    token: str
    server_url: str
    room_name: str
    participant_name: str


class TokenIssuer:
    """Issue room-scoped credentials with a fixed grant."""

    def __init__(self, config: ServiceConfig, signer: TokenSigner) -> None:
        self._config = config
        self._signer = signer

    async def issue(self, payload: Any) -> IssuedToken:
        request = self._validate(payload)

        if not self._config.is_complete:
            logger.warning("Token requested but LiveKit credentials are not configured")
            raise ConfigurationError("LiveKit credentials are not configured")

        try:
            token = await self._signer.sign(
                self._config.api_key,
                self._config.api_secret,
                identity=request.participant_name,
                name=request.participant_name,
                grant=RoomGrant.for_room(request.room_name),
                ttl=self._config.token_ttl,
            )
            if not token:
                raise ValueError("Signer returned an empty token")
        except Exception as exc:  # noqa: BLE001
            details = self._redact(str(exc) or exc.__class__.__name__)
            logger.error(
                "Failed to sign token for room %s: %s: %s", request.room_name, exc.__class__.__name__, details
            )
            raise SigningError("Failed to generate token", details=details) from exc

        logger.info("Issued token for %s in room %s", request.participant_name, request.room_name)
        return IssuedToken(
            token=token,
            server_url=self._config.server_url,
            room_name=request.room_name,
            participant_name=request.participant_name,
        )

    @staticmethod
    def _validate(payload: Any) -> TokenRequest:
        try:
            return TokenRequest.model_validate(payload)
        except ValidationError as exc:
            raise TokenValidationError("roomName and participantName are required") from exc

    def _redact(self, message: str) -> str:
        secret = self._config.api_secret
        if secret:
            message = message.replace(secret, REDACTED)
        return message


@lru_cache
def get_token_issuer() -> TokenIssuer:
    """FastAPI dependency returning the process-wide issuer."""

    return TokenIssuer(settings.service_config(), LiveKitSigner())
