"""Completion-provider contract: request building, reply extraction, error mapping."""

from __future__ import annotations

from typing import Any, Final

from story_assist.domain.errors import GenerationError, MalformedResponseError, UnknownError
from story_assist.domain.models import ChatMessage, CompletionResponse

DEFAULT_SYSTEM_PROMPT: Final[str] = (
    "You are a creative writing assistant. "
    "Continue the story naturally in the same style and tone."
)


def build_continuation_messages(
    text: str, system_prompt: str = DEFAULT_SYSTEM_PROMPT
) -> tuple[ChatMessage, ...]:
    return (
        ChatMessage(role="system", content=system_prompt),
        ChatMessage(role="user", content=f"Continue this story:\n\n{text}"),
    )


def extract_reply_text(response: CompletionResponse) -> str:
    """Pull reply text from an OpenAI-style chat or text completion body."""
    choice = _first_choice(response.payload)
    text: Any = None
    if choice is not None:
        message = choice.get("message")
        if isinstance(message, dict):
            text = message.get("content")
        if not text:
            text = choice.get("text")
    if not isinstance(text, str) or not text:
        raise MalformedResponseError("No content returned from API")
    return text


def classify_failure(exc: BaseException) -> GenerationError:
    if isinstance(exc, GenerationError):
        return exc
    return UnknownError(str(exc) or "Unknown error")


def _first_choice(payload: dict[str, Any]) -> dict[str, Any] | None:
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    return first if isinstance(first, dict) else None
