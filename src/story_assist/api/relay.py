"""FastAPI relay that forwards completion requests to the upstream vendor."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from story_assist.api.contracts import CompletionRelayRequest, HealthResponse
from story_assist.config import RuntimeSettings, load_settings

logger = logging.getLogger(__name__)


def create_app(
    settings: RuntimeSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create the relay application; refuses to start without an upstream key."""
    effective = settings or load_settings()
    if not effective.upstream_api_key:
        raise RuntimeError("Set GROQ_API_KEY in the environment or .env file.")

    app = FastAPI(
        title="story_assist relay",
        version="0.1.0",
        description="Forwards story continuation requests to an OpenAI-compatible vendor.",
        openapi_tags=[
            {"name": "system", "description": "Service health."},
            {"name": "completions", "description": "Completion forwarding."},
        ],
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(effective.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info(
        "relay.start upstream=%s model=%s", effective.upstream_url, effective.upstream_model
    )

    @app.get("/healthz", response_model=HealthResponse, tags=["system"])
    def healthz() -> HealthResponse:
        return HealthResponse()

    @app.post("/api/completions", tags=["completions"])
    async def forward_completion(payload: CompletionRelayRequest) -> JSONResponse:
        body: dict[str, Any] = {
            "model": payload.model or effective.upstream_model,
            "messages": [message.model_dump() for message in payload.messages],
            "max_tokens": effective.max_tokens,
            "temperature": effective.temperature,
        }
        headers = {
            "Authorization": f"Bearer {effective.upstream_api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(timeout=60.0, transport=transport) as client:
                upstream = await client.post(effective.upstream_url, json=body, headers=headers)
            data = upstream.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("relay.proxy_error error=%s", exc)
            return JSONResponse(
                status_code=502,
                content={"error": {"message": "proxy error", "details": str(exc)}},
            )
        if not upstream.is_success:
            logger.warning("relay.upstream_error status=%s body=%s", upstream.status_code, data)
        return JSONResponse(status_code=upstream.status_code, content=data)

    return app
