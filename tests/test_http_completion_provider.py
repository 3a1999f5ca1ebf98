from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from story_assist.adapters.http_completion_provider import HttpCompletionProvider
from story_assist.domain.errors import HTTPError, MalformedResponseError, NetworkError
from story_assist.domain.models import ChatMessage

MESSAGES = (
    ChatMessage(role="system", content="Be creative."),
    ChatMessage(role="user", content="Continue this story:\n\nOnce"),
)
ENDPOINT = "http://relay.test/api/completions"


def _provider(
    transport: httpx.MockTransport, *, model: str | None = None, api_key: str | None = None
) -> HttpCompletionProvider:
    return HttpCompletionProvider(
        endpoint_url=ENDPOINT, model=model, api_key=api_key, transport=transport
    )


def test_complete_posts_messages_and_returns_payload() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"choices": [{"message": {"content": "the end"}}]})

    provider = _provider(httpx.MockTransport(handler), model="grok-4", api_key="secret")
    response = asyncio.run(provider.complete(MESSAGES))

    assert response.payload["choices"][0]["message"]["content"] == "the end"
    body = json.loads(seen[0].content)
    assert body["model"] == "grok-4"
    assert body["messages"][1] == {"role": "user", "content": "Continue this story:\n\nOnce"}
    assert seen[0].headers["Authorization"] == "Bearer secret"


def test_transport_failure_maps_to_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError, match="unreachable"):
        asyncio.run(_provider(httpx.MockTransport(handler)).complete(MESSAGES))


@pytest.mark.parametrize(
    ("response", "expected_message"),
    [
        (httpx.Response(401, json={"error": {"message": "Invalid API Key"}}), "Invalid API Key"),
        (httpx.Response(500, json={"error": "proxy error"}), "proxy error"),
        (httpx.Response(429, json={"detail": "slow down"}), '{"detail": "slow down"}'),
        (httpx.Response(503, json={}), "HTTP error! status: 503"),
        (httpx.Response(502, text="<html>bad gateway</html>"), "Bad Gateway"),
    ],
)
def test_error_status_maps_to_http_error(response: httpx.Response, expected_message: str) -> None:
    provider = _provider(httpx.MockTransport(lambda request: response))

    with pytest.raises(HTTPError) as caught:
        asyncio.run(provider.complete(MESSAGES))

    assert caught.value.status == response.status_code
    assert str(caught.value) == expected_message


@pytest.mark.parametrize(
    "response",
    [httpx.Response(200, text="not json"), httpx.Response(200, json=["a", "list"])],
)
def test_unusable_success_body_is_malformed(response: httpx.Response) -> None:
    provider = _provider(httpx.MockTransport(lambda request: response))
    with pytest.raises(MalformedResponseError):
        asyncio.run(provider.complete(MESSAGES))
