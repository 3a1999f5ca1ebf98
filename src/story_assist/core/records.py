"""JSON records for collections kept in the key/value persistence gateway."""

from __future__ import annotations

import logging
import time
from typing import TypeVar
from uuid import uuid4

from pydantic import TypeAdapter, ValidationError

from story_assist.domain.models import HistoryEntry, Story
from story_assist.domain.ports import KeyValueStore

HISTORY_KEY = "ai-history"
STORIES_KEY = "ai-stories"
THEME_KEY = "ai-theme"
CURRENT_STORY_KEY = "ai-current-story"

HISTORY_ADAPTER: TypeAdapter[list[HistoryEntry]] = TypeAdapter(list[HistoryEntry])
STORIES_ADAPTER: TypeAdapter[list[Story]] = TypeAdapter(list[Story])

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


def now_millis() -> int:
    return int(time.time() * 1000)


def new_record_id() -> str:
    return uuid4().hex


def load_records(
    store: KeyValueStore, key: str, adapter: TypeAdapter[list[RecordT]]
) -> list[RecordT]:
    """Read one collection, degrading to empty when absent or unparseable."""
    raw = store.get(key)
    if raw is None:
        return []
    try:
        return adapter.validate_json(raw)
    except ValidationError as exc:
        logger.warning(
            "records.parse_failed key=%s errors=%s", key, exc.error_count()
        )
        return []


def save_records(
    store: KeyValueStore, key: str, adapter: TypeAdapter[list[RecordT]], records: list[RecordT]
) -> None:
    store.set(key, adapter.dump_json(records).decode("utf-8"))
