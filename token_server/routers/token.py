"""Token issuance endpoint."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from ..schemas.token import ErrorResponse, TokenResponse
from ..services.token import TokenIssuer, get_token_issuer

router = APIRouter()


@router.post(
    "/token",
    response_model=TokenResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_token(
    payload: Any = Body(default=None),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> TokenResponse:
    """Return a LiveKit access token and the server URL for the requested room."""

    issued = await issuer.issue(payload)
    return TokenResponse(
        token=issued.token,
        server_url=issued.server_url,
        room_name=issued.room_name,
        participant_name=issued.participant_name,
    )
