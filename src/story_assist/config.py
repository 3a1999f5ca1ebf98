"""Environment-driven runtime settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DB_PATH = Path("work/local/story_assist.db")
DEFAULT_PROVIDER_URL = "http://127.0.0.1:3001/api/completions"
DEFAULT_UPSTREAM_URL = "https://api.groq.com/openai/v1/chat/completions"
DEFAULT_UPSTREAM_MODEL = "llama-3.3-70b-versatile"
DEFAULT_CORS_ORIGINS = ("http://127.0.0.1:5173", "http://localhost:5173")


def env(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip()


def int_env(name: str, default: int, *, minimum: int, maximum: int) -> int:
    raw = env(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(minimum, min(maximum, value))


def float_env(name: str, default: float, *, minimum: float, maximum: float) -> float:
    raw = env(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return max(minimum, min(maximum, value))


@dataclass(frozen=True)
class RuntimeSettings:
    """Settings for the local workspace, provider client, and relay."""

    db_path: Path = DEFAULT_DB_PATH
    provider_url: str = DEFAULT_PROVIDER_URL
    model: str | None = None
    provider_timeout_seconds: float | None = None
    system_prompt: str | None = None
    upstream_url: str = DEFAULT_UPSTREAM_URL
    upstream_model: str = DEFAULT_UPSTREAM_MODEL
    upstream_api_key: str = ""
    max_tokens: int = 512
    temperature: float = 0.7
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS


def load_settings() -> RuntimeSettings:
    """Resolve settings from STORY_ASSIST_* variables and GROQ_API_KEY."""
    timeout = float_env(
        "STORY_ASSIST_PROVIDER_TIMEOUT_SECONDS", 0.0, minimum=0.0, maximum=3600.0
    )
    raw_origins = env("STORY_ASSIST_CORS_ORIGINS")
    origins = (
        tuple(origin.strip() for origin in raw_origins.split(",") if origin.strip())
        if raw_origins
        else DEFAULT_CORS_ORIGINS
    )
    return RuntimeSettings(
        db_path=Path(env("STORY_ASSIST_DB_PATH") or DEFAULT_DB_PATH),
        provider_url=env("STORY_ASSIST_PROVIDER_URL") or DEFAULT_PROVIDER_URL,
        model=env("STORY_ASSIST_MODEL") or None,
        provider_timeout_seconds=timeout or None,
        system_prompt=env("STORY_ASSIST_SYSTEM_PROMPT") or None,
        upstream_url=env("STORY_ASSIST_UPSTREAM_URL") or DEFAULT_UPSTREAM_URL,
        upstream_model=env("STORY_ASSIST_UPSTREAM_MODEL") or DEFAULT_UPSTREAM_MODEL,
        upstream_api_key=env("GROQ_API_KEY"),
        max_tokens=int_env("STORY_ASSIST_MAX_TOKENS", 512, minimum=1, maximum=32_768),
        temperature=float_env("STORY_ASSIST_TEMPERATURE", 0.7, minimum=0.0, maximum=2.0),
        cors_origins=origins,
    )
