from __future__ import annotations

from pathlib import Path

import pytest

from story_assist.config import DEFAULT_PROVIDER_URL, load_settings


def test_load_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "STORY_ASSIST_DB_PATH",
        "STORY_ASSIST_PROVIDER_URL",
        "STORY_ASSIST_PROVIDER_TIMEOUT_SECONDS",
        "STORY_ASSIST_MAX_TOKENS",
        "STORY_ASSIST_CORS_ORIGINS",
        "GROQ_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.db_path == Path("work/local/story_assist.db")
    assert settings.provider_url == DEFAULT_PROVIDER_URL
    assert settings.provider_timeout_seconds is None
    assert settings.max_tokens == 512
    assert settings.upstream_api_key == ""


def test_load_settings_reads_and_clamps_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORY_ASSIST_DB_PATH", "/tmp/custom.db")
    monkeypatch.setenv("STORY_ASSIST_PROVIDER_TIMEOUT_SECONDS", "45")
    monkeypatch.setenv("STORY_ASSIST_MAX_TOKENS", "999999")
    monkeypatch.setenv("STORY_ASSIST_TEMPERATURE", "warm")
    monkeypatch.setenv("STORY_ASSIST_CORS_ORIGINS", "http://a.test, ,http://b.test")
    monkeypatch.setenv("GROQ_API_KEY", " key-123 ")

    settings = load_settings()

    assert settings.db_path == Path("/tmp/custom.db")
    assert settings.provider_timeout_seconds == 45.0
    assert settings.max_tokens == 32_768
    assert settings.temperature == 0.7
    assert settings.cors_origins == ("http://a.test", "http://b.test")
    assert settings.upstream_api_key == "key-123"
