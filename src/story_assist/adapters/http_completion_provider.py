"""httpx adapter for OpenAI-compatible completion endpoints and relays."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

import httpx

from story_assist.domain.errors import HTTPError, MalformedResponseError, NetworkError
from story_assist.domain.models import ChatMessage, CompletionResponse

logger = logging.getLogger(__name__)


class HttpCompletionProvider:
    """Post message lists to a completion endpoint and classify failures."""

    def __init__(
        self,
        *,
        endpoint_url: str,
        model: str | None = None,
        api_key: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._endpoint_url = endpoint_url
        self._model = model
        self._api_key = api_key
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def complete(self, messages: Sequence[ChatMessage]) -> CompletionResponse:
        payload: dict[str, Any] = {
            "messages": [{"role": message.role, "content": message.content} for message in messages]
        }
        if self._model:
            payload["model"] = self._model
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(self._endpoint_url, json=payload, headers=headers)
        except httpx.TransportError as exc:
            logger.warning("provider.unreachable url=%s error=%s", self._endpoint_url, exc)
            raise NetworkError(f"Completion provider unreachable: {exc}") from exc

        if not response.is_success:
            raise HTTPError(response.status_code, _error_message(response))
        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedResponseError("Completion provider returned invalid JSON.") from exc
        if not isinstance(body, dict):
            raise MalformedResponseError("Completion provider response was not an object.")
        return CompletionResponse(payload=body)


def _error_message(response: httpx.Response) -> str:
    """Prefer error.message, then error, then the raw JSON body."""
    fallback = f"HTTP error! status: {response.status_code}"
    try:
        data = response.json()
    except ValueError:
        return response.reason_phrase or fallback
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str) and error["message"]:
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    if not data:
        return fallback
    return json.dumps(data)
