"""Generation lifecycle: a pure reducer plus an asyncio effect executor.

The reducer maps ``(state, event)`` to ``(state, effects)``. The controller commits the
new state before running any effect, so a second ``Generate`` arriving while a provider
call is suspended sees ``generating`` and is ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from story_assist.core.completion import (
    DEFAULT_SYSTEM_PROMPT,
    build_continuation_messages,
    classify_failure,
    extract_reply_text,
)
from story_assist.core.history_log import HistoryLog
from story_assist.domain.errors import GenerationError, UserInputError
from story_assist.domain.models import ChatMessage, GenerationState
from story_assist.domain.ports import CompletionProvider, EditingSurface

EMPTY_SUBMISSION_MESSAGE = "Please write something first!"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Generate:
    text: str


@dataclass(frozen=True)
class Continue:
    pass


@dataclass(frozen=True)
class Retry:
    pass


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class ProviderSucceeded:
    reply: str


@dataclass(frozen=True)
class ProviderFailed:
    error: GenerationError


GenerationEvent = Generate | Continue | Retry | Cancel | ProviderSucceeded | ProviderFailed


@dataclass(frozen=True)
class RecordSubmission:
    text: str


@dataclass(frozen=True)
class InvokeProvider:
    messages: tuple[ChatMessage, ...]


@dataclass(frozen=True)
class ApplyReply:
    reply: str


GenerationEffect = RecordSubmission | InvokeProvider | ApplyReply


def transition(
    state: GenerationState,
    event: GenerationEvent,
    *,
    system_prompt: str = DEFAULT_SYSTEM_PROMPT,
) -> tuple[GenerationState, tuple[GenerationEffect, ...]]:
    """Apply one event; events the current status does not accept are ignored."""
    status = state.status
    if status == "idle" and isinstance(event, Generate):
        if not event.text.strip():
            error = UserInputError(EMPTY_SUBMISSION_MESSAGE)
            return replace(_failed(state, error), request=None), ()
        messages = build_continuation_messages(event.text, system_prompt)
        entered = replace(state, status="generating", error=None, cause=None, request=messages)
        return entered, (RecordSubmission(event.text), InvokeProvider(messages))
    if status == "generating" and isinstance(event, ProviderSucceeded):
        return replace(state, status="success", last_reply=event.reply), (ApplyReply(event.reply),)
    if status == "generating" and isinstance(event, ProviderFailed):
        return _failed(state, event.error), ()
    if status == "success" and isinstance(event, Continue):
        return replace(state, status="idle"), ()
    if status == "failure" and isinstance(event, Retry):
        if state.request is None:
            return _failed(state, UserInputError(EMPTY_SUBMISSION_MESSAGE)), ()
        entered = replace(state, status="generating", error=None, cause=None)
        return entered, (InvokeProvider(state.request),)
    if status == "failure" and isinstance(event, Cancel):
        return replace(state, status="idle", error=None, cause=None), ()
    return state, ()


def _failed(state: GenerationState, error: GenerationError) -> GenerationState:
    return replace(state, status="failure", error=str(error) or "Unknown error", cause=error)


class GenerationController:
    """Drive one completion request at a time against an editing surface."""

    def __init__(
        self,
        *,
        provider: CompletionProvider,
        surface: EditingSurface,
        history: HistoryLog,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        self._provider = provider
        self._surface = surface
        self._history = history
        self._system_prompt = system_prompt
        self._state = GenerationState()

    @property
    def state(self) -> GenerationState:
        return self._state

    async def generate(self) -> GenerationState:
        """Submit the current surface text for continuation."""
        return await self.dispatch(Generate(self._surface.get_text()))

    async def retry(self) -> GenerationState:
        return await self.dispatch(Retry())

    async def cancel(self) -> GenerationState:
        return await self.dispatch(Cancel())

    async def acknowledge(self) -> GenerationState:
        """Return from success to idle."""
        return await self.dispatch(Continue())

    async def dispatch(self, event: GenerationEvent) -> GenerationState:
        previous = self._state
        self._state, effects = transition(previous, event, system_prompt=self._system_prompt)
        if self._state is previous:
            logger.info(
                "generation.event_ignored event=%s status=%s",
                type(event).__name__,
                previous.status,
            )
            return self._state
        if self._state.status != previous.status:
            logger.info(
                "generation.transition from=%s to=%s event=%s",
                previous.status,
                self._state.status,
                type(event).__name__,
            )
        if self._state.status == "failure" and self._state.cause is not None:
            logger.warning(
                "generation.failed code=%s message=%s",
                self._state.cause.code,
                self._state.error,
            )
        await self._run_effects(effects)
        return self._state

    async def _run_effects(self, effects: Sequence[GenerationEffect]) -> None:
        for effect in effects:
            if isinstance(effect, RecordSubmission):
                self._history.append("user", effect.text)
            elif isinstance(effect, InvokeProvider):
                await self._invoke(effect.messages)
            elif isinstance(effect, ApplyReply):
                self._surface.insert_text_at_end(effect.reply)
                self._history.append("ai", effect.reply)

    async def _invoke(self, messages: tuple[ChatMessage, ...]) -> None:
        try:
            response = await self._provider.complete(messages)
            reply = extract_reply_text(response)
        except Exception as exc:  # noqa: BLE001
            await self.dispatch(ProviderFailed(classify_failure(exc)))
            return
        await self.dispatch(ProviderSucceeded(reply))
