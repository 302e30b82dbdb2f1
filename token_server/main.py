"""FastAPI application for the LiveKit token server."""
from __future__ import annotations

import base64
import logging
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response

from .core.config import settings
from .routers import token as token_router
from .schemas.token import HealthResponse
from .services.token import TokenIssuanceError

logger = logging.getLogger(__name__)

INDEX_PATH = Path(__file__).resolve().parent / "static" / "index.html"
TOKEN_PATH = "/api/token"

app = FastAPI(title="LiveKit Token Server", version="0.1.0")

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(token_router.router, prefix="/api", tags=["token"])


@app.exception_handler(TokenIssuanceError)
async def token_issuance_error_handler(_request: Request, exc: TokenIssuanceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
    """Unparseable token requests are client errors in the same shape as missing fields."""

    if request.url.path == TOKEN_PATH:
        return JSONResponse(status_code=400, content={"error": "roomName and participantName are required"})
    return await request_validation_exception_handler(request, exc)


@app.get("/", response_class=HTMLResponse, tags=["meta"])
async def index() -> HTMLResponse:
    """Serve the browser test client."""

    try:
        content = INDEX_PATH.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Could not read %s: %s", INDEX_PATH, exc)
        return HTMLResponse(content="<h1>Error loading HTML file</h1>", status_code=500)
    return HTMLResponse(content=content)


@app.head("/", tags=["meta"])
async def index_head() -> Response:
    """Fast health checks issue HEAD /; answer with 200 to avoid noisy 405s."""

    return Response(status_code=200)


FAVICON_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR4nGMAAQAABQABDQottAAAAABJRU5ErkJggg=="
)


@app.get("/health", response_model=HealthResponse, tags=["meta"])
async def health() -> HealthResponse:
    """Liveness probe; does not depend on LiveKit configuration."""

    return HealthResponse(status="ok", message="LiveKit Token Server is running")


@app.head("/health", tags=["meta"])
async def health_head() -> Response:
    """Allow HEAD for uptime monitors that only need the status code."""

    return Response(status_code=200)


@app.get("/robots.txt", response_class=PlainTextResponse, include_in_schema=False)
async def robots() -> PlainTextResponse:
    return PlainTextResponse("User-agent: *\nDisallow:")


@app.get("/favicon.ico", include_in_schema=False)
async def favicon() -> Response:
    return Response(content=FAVICON_BYTES, media_type="image/png")


def run() -> None:
    """Start the server with uvicorn."""

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    base_url = f"http://localhost:{settings.port}"
    logger.info("LiveKit Token Server listening on %s", base_url)
    logger.info("Health: %s/health", base_url)
    logger.info("Web Interface: %s/", base_url)
    if not settings.service_config().is_complete:
        logger.warning(
            "LIVEKIT_API_KEY, LIVEKIT_API_SECRET and LIVEKIT_URL must all be set; /api/token will return 500"
        )

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
