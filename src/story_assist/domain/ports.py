"""Ports for completion, editing, and persistence."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from story_assist.domain.models import ChatMessage, CompletionResponse


class CompletionProvider(Protocol):
    """Accepts an ordered message list and returns generated text."""

    async def complete(self, messages: Sequence[ChatMessage]) -> CompletionResponse:
        ...


class EditingSurface(Protocol):
    """Capability interface onto the text the writer is editing."""

    def get_text(self) -> str:
        ...

    def set_text(self, text: str) -> None:
        ...

    def insert_text_at_end(self, text: str) -> None:
        ...

    def clear(self) -> None:
        ...


class KeyValueStore(Protocol):
    """Durable string storage; missing keys read as None."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...
