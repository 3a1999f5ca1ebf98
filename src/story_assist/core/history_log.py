"""Bounded, newest-first log of submissions and provider replies."""

from __future__ import annotations

import logging
from collections.abc import Callable

from story_assist.core.records import (
    HISTORY_ADAPTER,
    HISTORY_KEY,
    load_records,
    new_record_id,
    now_millis,
    save_records,
)
from story_assist.domain.models import HistoryEntry, HistoryKind
from story_assist.domain.ports import KeyValueStore

MAX_HISTORY_ENTRIES = 50
MAX_ENTRY_CHARS = 200

logger = logging.getLogger(__name__)


class HistoryLog:
    """Keep at most 50 entries, newest first, persisted after every mutation."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = HISTORY_KEY,
        clock: Callable[[], int] = now_millis,
        id_factory: Callable[[], str] = new_record_id,
    ) -> None:
        self._store = store
        self._key = key
        self._clock = clock
        self._id_factory = id_factory
        self._entries: list[HistoryEntry] = []

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def load(self) -> list[HistoryEntry]:
        """Replace in-memory entries with the last persisted sequence."""
        self._entries = load_records(self._store, self._key, HISTORY_ADAPTER)[
            :MAX_HISTORY_ENTRIES
        ]
        return self.entries

    def append(self, kind: HistoryKind, content: str) -> HistoryEntry:
        """Insert a new entry at the head, evicting the tail past the bound."""
        entry = HistoryEntry(
            entry_id=self._id_factory(),
            kind=kind,
            content=content[:MAX_ENTRY_CHARS],
            timestamp=self._clock(),
        )
        self._entries = [entry, *self._entries][:MAX_HISTORY_ENTRIES]
        save_records(self._store, self._key, HISTORY_ADAPTER, self._entries)
        logger.debug("history.append kind=%s size=%s", kind, len(self._entries))
        return entry

    def clear(self) -> None:
        self._entries = []
        self._store.remove(self._key)
        logger.info("history.cleared")
