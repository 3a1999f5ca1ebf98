"""Domain models, errors, and ports for the writing assistant."""

from story_assist.domain.errors import (
    GenerationError,
    HTTPError,
    MalformedResponseError,
    NetworkError,
    UnknownError,
    UserInputError,
)
from story_assist.domain.models import (
    ChatMessage,
    CompletionResponse,
    GenerationState,
    HistoryEntry,
    Story,
)
from story_assist.domain.ports import CompletionProvider, EditingSurface, KeyValueStore

__all__ = [
    "ChatMessage",
    "CompletionProvider",
    "CompletionResponse",
    "EditingSurface",
    "GenerationError",
    "GenerationState",
    "HTTPError",
    "HistoryEntry",
    "KeyValueStore",
    "MalformedResponseError",
    "NetworkError",
    "Story",
    "UnknownError",
    "UserInputError",
]
