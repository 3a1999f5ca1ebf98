"""Keyed collection of saved stories bound to one editing surface."""

from __future__ import annotations

import logging
from collections.abc import Callable

from story_assist.core.records import (
    CURRENT_STORY_KEY,
    STORIES_ADAPTER,
    STORIES_KEY,
    load_records,
    new_record_id,
    now_millis,
    save_records,
)
from story_assist.domain.models import Story
from story_assist.domain.ports import EditingSurface, KeyValueStore

MAX_TITLE_CHARS = 50
DEFAULT_TITLE = "Untitled Story"

logger = logging.getLogger(__name__)


def derive_title(content: str) -> str:
    """Use the first line of content, truncated, as the story title."""
    return content.split("\n", 1)[0][:MAX_TITLE_CHARS] or DEFAULT_TITLE


class StoryStore:
    """Save, load, and delete stories while tracking the current identity."""

    def __init__(
        self,
        store: KeyValueStore,
        surface: EditingSurface,
        *,
        key: str = STORIES_KEY,
        current_key: str = CURRENT_STORY_KEY,
        clock: Callable[[], int] = now_millis,
        id_factory: Callable[[], str] = new_record_id,
    ) -> None:
        self._store = store
        self._surface = surface
        self._key = key
        self._current_key = current_key
        self._clock = clock
        self._id_factory = id_factory
        self._stories: list[Story] = []
        self._current_id: str | None = None

    @property
    def stories(self) -> list[Story]:
        return list(self._stories)

    @property
    def current_id(self) -> str | None:
        return self._current_id

    def __len__(self) -> int:
        return len(self._stories)

    def get(self, story_id: str) -> Story | None:
        for story in self._stories:
            if story.story_id == story_id:
                return story
        return None

    def load_all(self) -> list[Story]:
        """Read the persisted collection and current identity, keeping the first story per id."""
        seen: set[str] = set()
        stories: list[Story] = []
        for story in load_records(self._store, self._key, STORIES_ADAPTER):
            if story.story_id in seen:
                logger.warning("stories.duplicate_id_dropped story_id=%s", story.story_id)
                continue
            seen.add(story.story_id)
            stories.append(story)
        self._stories = stories
        restored = self._store.get(self._current_key)
        if restored is not None and self.get(restored) is None:
            restored = None
        self._current_id = restored
        return self.stories

    def save(self, current_id: str | None, content: str) -> str | None:
        """Upsert a story and return the resulting current identity.

        Blank content is ignored and returns the unchanged current identity.
        """
        if not content.strip():
            return self._current_id
        title = derive_title(content)
        existing = self.get(current_id) if current_id is not None else None
        if existing is not None:
            existing.content = content
            existing.title = title
            story_id = existing.story_id
            logger.info("stories.updated story_id=%s", story_id)
        else:
            story_id = self._id_factory()
            story = Story(
                story_id=story_id,
                title=title,
                content=content,
                timestamp=self._clock(),
            )
            self._stories = [story, *self._stories]
            logger.info("stories.created story_id=%s", story_id)
        self._persist()
        self._bind(story_id)
        return story_id

    def save_current(self) -> str | None:
        """Save the surface text against the current identity."""
        return self.save(self._current_id, self._surface.get_text())

    def load(self, story_id: str) -> str | None:
        """Show a story on the surface and make it current."""
        story = self.get(story_id)
        if story is None:
            logger.warning("stories.load_missing story_id=%s", story_id)
            return None
        self._surface.set_text(story.content)
        self._bind(story.story_id)
        return story.content

    def new(self) -> None:
        """Unbind the surface from any story and clear it."""
        self._bind(None)
        self._surface.clear()

    def delete(self, story_id: str) -> None:
        remaining = [story for story in self._stories if story.story_id != story_id]
        if len(remaining) != len(self._stories):
            self._stories = remaining
            self._persist()
            logger.info("stories.deleted story_id=%s", story_id)
        if story_id == self._current_id:
            self.new()

    def _persist(self) -> None:
        save_records(self._store, self._key, STORIES_ADAPTER, self._stories)

    def _bind(self, story_id: str | None) -> None:
        """Set the current identity and persist it under its own key."""
        self._current_id = story_id
        if story_id is None:
            self._store.remove(self._current_key)
        else:
            self._store.set(self._current_key, story_id)
