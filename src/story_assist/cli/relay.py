"""CLI entrypoint for serving the completion relay."""

from __future__ import annotations

import argparse

import uvicorn
from dotenv import load_dotenv

from story_assist.adapters.observability import configure_runtime_logging
from story_assist.config import load_settings


def build_arg_parser() -> argparse.ArgumentParser:
    """Create CLI args for the relay server process."""
    parser = argparse.ArgumentParser(description="Serve the story_assist completion relay.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=3001)
    parser.add_argument("--reload", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI flags, check the upstream key, and start uvicorn on the runtime logging config."""
    load_dotenv()
    configure_runtime_logging()
    parser = build_arg_parser()
    parsed = parser.parse_args(argv)
    if not load_settings().upstream_api_key:
        raise SystemExit("Set GROQ_API_KEY in .env")
    uvicorn.run(
        "story_assist.api.relay:create_app",
        factory=True,
        host=str(parsed.host),
        port=int(parsed.port),
        reload=bool(parsed.reload),
        log_config=None,
    )


if __name__ == "__main__":
    main()
