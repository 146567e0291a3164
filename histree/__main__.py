"""Command-line entry point: ``histree`` or ``python -m histree``."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from histree.commands import count
from histree.data.sources import SessionSources
from histree.errors import HistreeError
from histree.utils.paths import get_export_dir

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="histree",
        description="Browse, search and export Claude Code and Codex session history.",
    )
    parser.add_argument(
        "--count-sessions", action="store_true",
        help="Print entry, session and project counts and exit",
    )
    parser.add_argument("--claude-dir", type=Path, help="Claude Code data directory (default: $CLAUDE_DATA_DIR or ~/.claude)")
    parser.add_argument("--codex-dir", type=Path, help="Codex data directory (default: $CODEX_HOME or ~/.codex)")
    parser.add_argument("--export-dir", type=Path, help="Where exports are written (default: $HISTREE_EXPORT_DIR or cwd)")
    parser.add_argument("--log-file", type=Path, help="Write logs to this file (default: $HISTREE_LOG_FILE)")
    return parser


def _configure_logging(log_file: Optional[Path], interactive: bool) -> None:
    level_name = os.environ.get("HISTREE_LOG_LEVEL", "INFO" if log_file else "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    if log_file is not None:
        logging.basicConfig(filename=str(log_file), level=level, format=LOG_FORMAT)
    elif interactive:
        # Anything written to stderr would corrupt the curses screen.
        logging.getLogger().addHandler(logging.NullHandler())
    else:
        logging.basicConfig(stream=sys.stderr, level=level, format=LOG_FORMAT)


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    log_file = args.log_file
    if log_file is None and os.environ.get("HISTREE_LOG_FILE"):
        log_file = Path(os.environ["HISTREE_LOG_FILE"])
    _configure_logging(log_file, interactive=not args.count_sessions)

    try:
        sources = SessionSources.discover(args.claude_dir, args.codex_dir)
        if args.count_sessions:
            count.run(sources, sys.stdout)
            return 0

        # Imported late so --count-sessions works where curses is unavailable.
        from histree.tui import app

        app.run(sources, args.export_dir or get_export_dir())
    except HistreeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
