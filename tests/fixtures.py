"""Helpers for building on-disk fixtures and in-memory session lists."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, List, Union

from histree.data.models import SessionListItem, SessionSource
from histree.state.tree import ProjectGroup

BASE_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def write_jsonl(path: Path, lines: Iterable[Union[dict, str]]) -> Path:
    """Write dicts as JSON lines; strings are written verbatim."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line if isinstance(line, str) else json.dumps(line))
            f.write("\n")
    return path


def list_item(
    session_id: str,
    project_path: str = "/work/alpha",
    message: str = "hello",
    hours_ago: float = 0,
    source: SessionSource = SessionSource.CLAUDE,
) -> SessionListItem:
    dt = BASE_TIME - timedelta(hours=hours_ago)
    return SessionListItem(
        session_id=session_id,
        source=source,
        project_name=project_path.rstrip("/").rsplit("/", 1)[-1],
        project_path=project_path,
        latest_user_message=message,
        formatted_time=dt.strftime("%Y-%m-%d %H:%M"),
        datetime=dt,
    )


def make_groups() -> List[ProjectGroup]:
    """Three projects with 2, 1 and 3 sessions, newest group first."""
    return [
        ProjectGroup("/work/alpha", "alpha", [
            list_item("a1", "/work/alpha", "fix login bug", 1),
            list_item("a2", "/work/alpha", "add tests", 30),
        ]),
        ProjectGroup("/work/beta", "beta", [
            list_item("b1", "/work/beta", "Refactor parser", 2),
        ]),
        ProjectGroup("/work/gamma", "gamma", [
            list_item("g1", "/work/gamma", "write docs", 3, SessionSource.CODEX),
            list_item("g2", "/work/gamma", "LOGIN page styling", 200),
            list_item("g3", "/work/gamma", "release notes", 900),
        ]),
    ]
