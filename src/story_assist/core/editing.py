"""Text-joining rule shared by every editing surface."""

from __future__ import annotations


def join_continuation(existing: str, addition: str) -> str:
    """Append a continuation, separating it with a line break when needed."""
    if existing and not existing.endswith("\n"):
        return f"{existing}\n{addition}"
    return existing + addition
