"""Credential signing.

The issuer only depends on the ``TokenSigner`` protocol. ``LiveKitSigner`` is the
production implementation backed by the ``livekit-api`` access token builder."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol

from livekit import api


class SigningFailure(RuntimeError):
    """Raised when a credential cannot be produced."""


@dataclass(frozen=True, slots=True)
class RoomGrant:
    """Capabilities embedded in every issued credential."""

    room: str
    room_join: bool = True
    can_publish: bool = True
    can_subscribe: bool = True
    can_update_own_metadata: bool = True

    @classmethod
    def for_room(cls, room: str) -> "RoomGrant":
        return cls(room=room)

    def to_video_grants(self) -> api.VideoGrants:
        return api.VideoGrants(
            room_join=self.room_join,
            room=self.room,
            can_publish=self.can_publish,
            can_subscribe=self.can_subscribe,
            can_update_own_metadata=self.can_update_own_metadata,
            can_publish_data=False,
        )


class TokenSigner(Protocol):
    async def sign(
        self,
        api_key: str,
        api_secret: str,
        *,
        identity: str,
        name: str,
        grant: RoomGrant,
        ttl: timedelta | None = None,
    ) -> str:
        """Return a signed credential for ``identity`` carrying ``grant``."""


class LiveKitSigner:
    """Sign LiveKit access tokens locally with the API key and secret."""

    async def sign(
        self,
        api_key: str,
        api_secret: str,
        *,
        identity: str,
        name: str,
        grant: RoomGrant,
        ttl: timedelta | None = None,
    ) -> str:
        try:
            builder = (
                api.AccessToken(api_key, api_secret)
                .with_identity(identity)
                .with_name(name)
                .with_grants(grant.to_video_grants())
            )
            if ttl is not None:
                builder = builder.with_ttl(ttl)
            return builder.to_jwt()
        except Exception as exc:  # noqa: BLE001
            raise SigningFailure(str(exc) or exc.__class__.__name__) from exc
