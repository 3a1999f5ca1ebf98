"""Wire persistence, history, stories, and the generation controller together."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from story_assist.adapters.http_completion_provider import HttpCompletionProvider
from story_assist.adapters.sqlite_kv_store import SQLiteKeyValueStore
from story_assist.config import RuntimeSettings
from story_assist.core.completion import DEFAULT_SYSTEM_PROMPT
from story_assist.core.generation import GenerationController
from story_assist.core.history_log import HistoryLog
from story_assist.core.preferences import ThemePreference
from story_assist.core.story_store import StoryStore
from story_assist.domain.models import GenerationState
from story_assist.domain.ports import CompletionProvider, EditingSurface, KeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class WritingWorkspace:
    """One writer session: a surface plus the collections and controller it drives."""

    surface: EditingSurface
    history: HistoryLog
    stories: StoryStore
    theme: ThemePreference
    controller: GenerationController

    async def continue_writing(self) -> GenerationState:
        """Acknowledge a finished success, then request the next continuation."""
        if self.controller.state.status == "success":
            await self.controller.acknowledge()
        return await self.controller.generate()


def open_workspace(
    settings: RuntimeSettings,
    surface: EditingSurface,
    *,
    provider: CompletionProvider | None = None,
    store: KeyValueStore | None = None,
) -> WritingWorkspace:
    """Build a workspace and load every persisted collection."""
    effective_store = store if store is not None else SQLiteKeyValueStore(db_path=settings.db_path)
    effective_provider = provider or HttpCompletionProvider(
        endpoint_url=settings.provider_url,
        model=settings.model,
        timeout_seconds=settings.provider_timeout_seconds,
    )
    history = HistoryLog(effective_store)
    stories = StoryStore(effective_store, surface)
    theme = ThemePreference(effective_store)
    history.load()
    stories.load_all()
    theme.load()
    controller = GenerationController(
        provider=effective_provider,
        surface=surface,
        history=history,
        system_prompt=settings.system_prompt or DEFAULT_SYSTEM_PROMPT,
    )
    logger.info(
        "workspace.opened db_path=%s stories=%s history=%s",
        settings.db_path,
        len(stories),
        len(history),
    )
    return WritingWorkspace(
        surface=surface,
        history=history,
        stories=stories,
        theme=theme,
        controller=controller,
    )
