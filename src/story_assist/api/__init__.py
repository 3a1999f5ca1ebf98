"""HTTP relay surface for completion requests."""

from story_assist.api.contracts import ChatMessagePayload, CompletionRelayRequest, HealthResponse
from story_assist.api.relay import create_app

__all__ = [
    "ChatMessagePayload",
    "CompletionRelayRequest",
    "HealthResponse",
    "create_app",
]
