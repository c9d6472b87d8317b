from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .core.config import Settings
from .core.shuffle import seeded_shuffle
from .data.catalog import StaticCatalog
from .data.history_store import JsonHistoryStore
from .data.tmdb import TmdbCatalog
from .ui.presenters import RichPresenter


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flickpick", description="Pass-the-device group title picker")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    sub = parser.add_subparsers(dest="command")

    play = sub.add_parser("play", help="Run a session in this terminal (default)")
    play.add_argument("--history", type=Path, default=None, help="Session history file")

    serve = sub.add_parser("serve", help="Serve the session API over HTTP")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    history = sub.add_parser("history", help="Show titles recent sessions already showed")
    history.add_argument("--path", type=Path, default=None, help="Session history file")

    pool = sub.add_parser("pool", help="Print the built-in fallback titles in seeded order")
    pool.add_argument("--seed", default="preview", help="Shuffle seed")

    search = sub.add_parser("search", help="Look up movies and shows in the remote catalog")
    search.add_argument("query", help="Title to search for")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))
    settings = Settings.from_env()
    presenter = RichPresenter(no_color=args.no_color)
    command = args.command or "play"

    if command == "serve":  # pragma: no cover - runner
        from .web.app import main as serve

        serve(host=args.host, port=args.port)
        return

    if command == "history":
        store = JsonHistoryStore(args.path or settings.history_path)
        presenter.show_history(store.load_history())
        return

    if command == "pool":
        presenter.show_pool(seeded_shuffle(StaticCatalog().items(), args.seed))
        return

    if command == "search":
        if not settings.catalog_configured:
            presenter.show_notice("Set FLICKPICK_TMDB_API_KEY to search the remote catalog.")
            return
        results = asyncio.run(TmdbCatalog.from_settings(settings).search(args.query))
        if not results:
            presenter.show_notice(f"No titles found for '{args.query}'.")
            return
        presenter.show_pool(results)
        return

    from .engine_play import run_play
    from .web.app import build_engine

    path = getattr(args, "history", None)
    engine = build_engine(settings, history_store=JsonHistoryStore(path) if path else None)
    run_play(engine, presenter)


if __name__ == "__main__":
    main()
