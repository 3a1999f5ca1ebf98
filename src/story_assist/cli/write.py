"""CLI for continuing a draft file and managing saved stories and history."""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path

from dotenv import load_dotenv

from story_assist.adapters.observability import configure_runtime_logging
from story_assist.adapters.text_surfaces import FileTextSurface
from story_assist.application.workspace import WritingWorkspace, open_workspace
from story_assist.config import load_settings
from story_assist.domain.models import GenerationState


def build_arg_parser() -> argparse.ArgumentParser:
    """Define the draft file, database path, and subcommands."""
    parser = argparse.ArgumentParser(description="AI-assisted story continuation.")
    parser.add_argument("--file", default="draft.txt", help="Draft text file to edit.")
    parser.add_argument(
        "--db-path",
        default="",
        help="SQLite path for stories and history (default: work/local/story_assist.db).",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    cont = commands.add_parser("continue", help="Append an AI continuation to the draft.")
    cont.add_argument(
        "--interactive",
        action="store_true",
        help="Offer retry or cancel after a failed request.",
    )

    stories = commands.add_parser("stories", help="Manage saved stories.")
    story_actions = stories.add_subparsers(dest="action", required=True)
    story_actions.add_parser("list")
    save = story_actions.add_parser("save")
    save.add_argument(
        "--story-id",
        default="",
        help="Save against this story id instead of the current one.",
    )
    story_actions.add_parser("new")
    load = story_actions.add_parser("load")
    load.add_argument("story_id")
    delete = story_actions.add_parser("delete")
    delete.add_argument("story_id")

    history = commands.add_parser("history", help="Show or clear generation history.")
    history.add_argument("action", choices=["show", "clear"])

    theme = commands.add_parser("theme", help="Show or cycle the theme preference.")
    theme.add_argument("action", choices=["show", "cycle"])
    return parser


def _format_time(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC).strftime("%Y-%m-%d %H:%M")


async def run_continue(
    workspace: WritingWorkspace,
    *,
    interactive: bool,
    ask: Callable[[str], str] = input,
) -> GenerationState:
    """Generate once, letting the writer retry or cancel after failures."""
    controller = workspace.controller
    state = await workspace.continue_writing()
    while state.status == "failure":
        print(f"Generation failed: {state.error}")
        if interactive and ask("Retry? [y/N] ").strip().lower() in {"y", "yes"}:
            state = await controller.retry()
            continue
        await controller.cancel()
        return state
    if state.last_reply is not None:
        print(state.last_reply)
    return state


def _run_stories(workspace: WritingWorkspace, parsed: argparse.Namespace) -> None:
    stories = workspace.stories
    action = str(parsed.action)
    if action == "list":
        if not stories.stories:
            print("No saved stories yet")
        for story in stories.stories:
            print(f"{story.story_id}  {_format_time(story.timestamp)}  {story.title}")
    elif action == "save":
        explicit_id = str(parsed.story_id).strip()
        if explicit_id:
            current = stories.save(explicit_id, workspace.surface.get_text())
        else:
            current = stories.save_current()
        print(f"Saved story: {current}" if current else "Nothing to save")
    elif action == "load":
        if stories.load(str(parsed.story_id)) is None:
            raise SystemExit(f"Story not found: {parsed.story_id}")
        print(f"Loaded story {parsed.story_id}")
    elif action == "delete":
        stories.delete(str(parsed.story_id))
        print(f"Deleted story {parsed.story_id}")
    elif action == "new":
        stories.new()
        print("Started a new story")


def _run_history(workspace: WritingWorkspace, action: str) -> None:
    if action == "clear":
        workspace.history.clear()
        print("History cleared")
        return
    if not len(workspace.history):
        print("No history yet")
    for entry in workspace.history.entries:
        print(f"[{entry.kind}] {_format_time(entry.timestamp)}  {entry.content}")


def _run_command(workspace: WritingWorkspace, parsed: argparse.Namespace) -> None:
    command = str(parsed.command)
    if command == "continue":
        state = asyncio.run(run_continue(workspace, interactive=bool(parsed.interactive)))
        if state.status != "success":
            raise SystemExit(1)
    elif command == "stories":
        _run_stories(workspace, parsed)
    elif command == "history":
        _run_history(workspace, str(parsed.action))
    elif command == "theme":
        if str(parsed.action) == "cycle":
            workspace.theme.cycle()
        print(f"Theme: {workspace.theme.theme}")


def main(argv: list[str] | None = None) -> None:
    """Open the workspace on the draft file and run one command."""
    load_dotenv()
    configure_runtime_logging()
    parser = build_arg_parser()
    parsed = parser.parse_args(argv)

    settings = load_settings()
    db_path = str(parsed.db_path).strip()
    if db_path:
        settings = replace(settings, db_path=Path(db_path))
    surface = FileTextSurface(Path(str(parsed.file)))
    workspace = open_workspace(settings, surface)
    try:
        _run_command(workspace, parsed)
    except UnicodeDecodeError as exc:
        raise SystemExit(f"Draft file is not valid UTF-8: {surface.path}") from exc


if __name__ == "__main__":
    main()
