"""Plain-text editing surfaces: an in-memory buffer and a draft file."""

from __future__ import annotations

from pathlib import Path

from story_assist.core.editing import join_continuation


class TextBuffer:
    """In-memory editing surface."""

    def __init__(self, text: str = "") -> None:
        self._text = text

    def get_text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        self._text = text

    def insert_text_at_end(self, text: str) -> None:
        self._text = join_continuation(self._text, text)

    def clear(self) -> None:
        self._text = ""


class FileTextSurface:
    """Editing surface backed by a UTF-8 draft file; a missing file reads as empty."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def get_text(self) -> str:
        if not self._path.exists():
            return ""
        return self._path.read_text(encoding="utf-8")

    def set_text(self, text: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(text, encoding="utf-8")

    def insert_text_at_end(self, text: str) -> None:
        self.set_text(join_continuation(self.get_text(), text))

    def clear(self) -> None:
        self.set_text("")
