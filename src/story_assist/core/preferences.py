"""Persisted presentation preferences."""

from __future__ import annotations

from typing import Final

from story_assist.core.records import THEME_KEY
from story_assist.domain.models import ThemeName
from story_assist.domain.ports import KeyValueStore

THEME_ORDER: Final[tuple[ThemeName, ...]] = ("light", "dark", "system")
DEFAULT_THEME: Final[ThemeName] = "system"


class ThemePreference:
    """Theme choice stored under its own key."""

    def __init__(self, store: KeyValueStore, *, key: str = THEME_KEY) -> None:
        self._store = store
        self._key = key
        self._theme: ThemeName = DEFAULT_THEME

    @property
    def theme(self) -> ThemeName:
        return self._theme

    def load(self) -> ThemeName:
        raw = self._store.get(self._key)
        self._theme = next((theme for theme in THEME_ORDER if theme == raw), DEFAULT_THEME)
        return self._theme

    def set(self, theme: ThemeName) -> None:
        if theme not in THEME_ORDER:
            raise ValueError(f"Unknown theme '{theme}'.")
        self._theme = theme
        self._store.set(self._key, theme)

    def cycle(self) -> ThemeName:
        """Advance light -> dark -> system -> light."""
        index = THEME_ORDER.index(self._theme)
        self.set(THEME_ORDER[(index + 1) % len(THEME_ORDER)])
        return self._theme
