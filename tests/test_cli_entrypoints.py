from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from story_assist.adapters.text_surfaces import TextBuffer
from story_assist.application.workspace import open_workspace
from story_assist.cli import relay as relay_cli
from story_assist.cli import write as write_cli
from story_assist.config import RuntimeSettings
from story_assist.domain.errors import NetworkError
from story_assist.domain.models import ChatMessage, CompletionResponse


class ScriptedProvider:
    def __init__(self, *outcomes: str | Exception) -> None:
        self.outcomes = list(outcomes)
        self.calls = 0

    async def complete(self, messages: Sequence[ChatMessage]) -> CompletionResponse:
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return CompletionResponse(payload={"choices": [{"message": {"content": outcome}}]})


@pytest.fixture
def quiet_cli(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    for module in ("story_assist.cli.write", "story_assist.cli.relay"):
        monkeypatch.setattr(f"{module}.configure_runtime_logging", lambda: None)
        monkeypatch.setattr(f"{module}.load_dotenv", lambda: False)


def _use_provider(monkeypatch: pytest.MonkeyPatch, provider: ScriptedProvider) -> None:
    def opener(settings: RuntimeSettings, surface: Any) -> Any:
        return open_workspace(settings, surface, provider=provider)

    monkeypatch.setattr("story_assist.cli.write.open_workspace", opener)


def test_relay_main_runs_uvicorn_factory(
    monkeypatch: pytest.MonkeyPatch, quiet_cli: None
) -> None:
    seen: dict[str, Any] = {}
    monkeypatch.setenv("GROQ_API_KEY", "key")
    monkeypatch.setattr(
        "story_assist.cli.relay.uvicorn.run",
        lambda target, **kwargs: seen.update(target=target, **kwargs),
    )

    relay_cli.main(["--port", "4000"])

    assert seen["target"] == "story_assist.api.relay:create_app"
    assert seen["factory"] is True
    assert seen["port"] == 4000
    assert seen["host"] == "127.0.0.1"
    assert seen["log_config"] is None


def test_relay_main_requires_api_key(monkeypatch: pytest.MonkeyPatch, quiet_cli: None) -> None:
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    with pytest.raises(SystemExit, match="GROQ_API_KEY"):
        relay_cli.main([])


def test_continue_appends_reply_to_draft(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    quiet_cli: None,
    capsys: pytest.CaptureFixture[str],
) -> None:
    draft = tmp_path / "draft.txt"
    draft.write_text("Once upon a time", encoding="utf-8")
    _use_provider(monkeypatch, ScriptedProvider("the hero arrived."))

    write_cli.main(["--file", str(draft), "--db-path", str(tmp_path / "a.db"), "continue"])

    assert draft.read_text(encoding="utf-8") == "Once upon a time\nthe hero arrived."
    assert "the hero arrived." in capsys.readouterr().out


def test_continue_failure_exits_nonzero(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    quiet_cli: None,
    capsys: pytest.CaptureFixture[str],
) -> None:
    draft = tmp_path / "draft.txt"
    _use_provider(monkeypatch, ScriptedProvider())

    with pytest.raises(SystemExit) as caught:
        write_cli.main(["--file", str(draft), "--db-path", str(tmp_path / "a.db"), "continue"])

    assert caught.value.code == 1
    assert "Please write something first!" in capsys.readouterr().out


def test_run_continue_interactive_retry(tmp_path: Path) -> None:
    provider = ScriptedProvider(NetworkError("offline"), "recovered")
    workspace = open_workspace(
        RuntimeSettings(db_path=tmp_path / "a.db"), TextBuffer("Once"), provider=provider
    )
    answers = iter(["y"])

    state = asyncio.run(
        write_cli.run_continue(workspace, interactive=True, ask=lambda prompt: next(answers))
    )

    assert state.status == "success"
    assert provider.calls == 2
    assert workspace.surface.get_text() == "Once\nrecovered"


def test_run_continue_declined_retry_cancels(tmp_path: Path) -> None:
    provider = ScriptedProvider(NetworkError("offline"))
    workspace = open_workspace(
        RuntimeSettings(db_path=tmp_path / "a.db"), TextBuffer("Once"), provider=provider
    )

    state = asyncio.run(write_cli.run_continue(workspace, interactive=True, ask=lambda _: "n"))

    assert state.status == "failure"
    assert workspace.controller.state.status == "idle"
    assert workspace.controller.state.error is None


def test_story_history_and_theme_commands(
    tmp_path: Path, quiet_cli: None, capsys: pytest.CaptureFixture[str]
) -> None:
    draft = tmp_path / "draft.txt"
    draft.write_text("Chapter One\nIt was raining.", encoding="utf-8")
    base = ["--file", str(draft), "--db-path", str(tmp_path / "a.db")]

    write_cli.main([*base, "stories", "save"])
    saved = capsys.readouterr().out
    story_id = saved.strip().rsplit(" ", 1)[-1]
    assert saved.startswith("Saved story:")

    write_cli.main([*base, "stories", "list"])
    assert "Chapter One" in capsys.readouterr().out

    draft.write_text("Chapter One\nIt stopped raining.", encoding="utf-8")
    write_cli.main([*base, "stories", "save", "--story-id", story_id])
    write_cli.main([*base, "stories", "new"])
    assert draft.read_text(encoding="utf-8") == ""
    write_cli.main([*base, "stories", "load", story_id])
    assert draft.read_text(encoding="utf-8") == "Chapter One\nIt stopped raining."

    write_cli.main([*base, "stories", "delete", story_id])
    capsys.readouterr()
    write_cli.main([*base, "stories", "list"])
    assert "No saved stories yet" in capsys.readouterr().out
    with pytest.raises(SystemExit, match="Story not found"):
        write_cli.main([*base, "stories", "load", story_id])

    write_cli.main([*base, "history", "show"])
    assert "No history yet" in capsys.readouterr().out
    write_cli.main([*base, "history", "clear"])
    write_cli.main([*base, "theme", "cycle"])
    assert "Theme: light" in capsys.readouterr().out


def test_loaded_story_is_updated_by_a_later_save(
    tmp_path: Path, quiet_cli: None, capsys: pytest.CaptureFixture[str]
) -> None:
    draft = tmp_path / "draft.txt"
    draft.write_text("Chapter One\nIt was raining.", encoding="utf-8")
    base = ["--file", str(draft), "--db-path", str(tmp_path / "a.db")]
    write_cli.main([*base, "stories", "save"])
    story_id = capsys.readouterr().out.strip().rsplit(" ", 1)[-1]
    write_cli.main([*base, "stories", "new"])

    write_cli.main([*base, "stories", "load", story_id])
    draft.write_text("Chapter One\nThe sun came out.", encoding="utf-8")
    write_cli.main([*base, "stories", "save"])
    assert capsys.readouterr().out.strip().endswith(f"Saved story: {story_id}")

    write_cli.main([*base, "stories", "list"])
    listed = capsys.readouterr().out.strip().splitlines()
    assert len(listed) == 1
    assert listed[0].startswith(story_id)


def test_deleting_the_loaded_story_empties_the_draft(
    tmp_path: Path, quiet_cli: None, capsys: pytest.CaptureFixture[str]
) -> None:
    draft = tmp_path / "draft.txt"
    draft.write_text("Chapter One\nIt was raining.", encoding="utf-8")
    base = ["--file", str(draft), "--db-path", str(tmp_path / "a.db")]
    write_cli.main([*base, "stories", "save"])
    story_id = capsys.readouterr().out.strip().rsplit(" ", 1)[-1]

    write_cli.main([*base, "stories", "load", story_id])
    write_cli.main([*base, "stories", "delete", story_id])

    assert draft.read_text(encoding="utf-8") == ""


def test_non_utf8_draft_exits_with_message(tmp_path: Path, quiet_cli: None) -> None:
    draft = tmp_path / "draft.txt"
    draft.write_bytes(b"\xff\xfe\xfa broken")
    base = ["--file", str(draft), "--db-path", str(tmp_path / "a.db")]

    with pytest.raises(SystemExit, match="not valid UTF-8"):
        write_cli.main([*base, "stories", "save"])
