"""Core writing-assistant domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from story_assist.domain.errors import GenerationError

HistoryKind = Literal["user", "ai"]
MessageRole = Literal["system", "user", "assistant"]
GenerationStatus = Literal["idle", "generating", "success", "failure"]
ThemeName = Literal["light", "dark", "system"]


@dataclass
class Story:
    """A named, saved document with identity independent of the editor buffer."""

    story_id: str
    title: str
    content: str
    timestamp: int


@dataclass(frozen=True)
class HistoryEntry:
    """A truncated, timestamped record of a submission or provider reply."""

    entry_id: str
    kind: HistoryKind
    content: str
    timestamp: int


@dataclass(frozen=True)
class ChatMessage:
    """One message in a completion request."""

    role: MessageRole
    content: str


@dataclass(frozen=True)
class CompletionResponse:
    """Raw success body returned by a completion provider."""

    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GenerationState:
    """Lifecycle state owned by the generation controller."""

    status: GenerationStatus = "idle"
    error: str | None = None
    last_reply: str | None = None
    cause: GenerationError | None = None
    request: tuple[ChatMessage, ...] | None = None
