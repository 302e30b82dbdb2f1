"""Data contracts for the token endpoint."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TokenRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    room_name: str = Field(..., alias="roomName", min_length=1, strict=True, description="Room to join")
    participant_name: str = Field(
        ..., alias="participantName", min_length=1, strict=True, description="Identity and display name of the caller"
    )


class TokenResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(..., description="Signed LiveKit access token")
    server_url: str = Field(..., alias="serverUrl", description="LiveKit server to connect to")
    room_name: str = Field(..., alias="roomName")
    participant_name: str = Field(..., alias="participantName")


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None


class HealthResponse(BaseModel):
    status: str
    message: str
