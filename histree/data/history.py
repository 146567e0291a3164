"""Parse the append-only history.jsonl logs of both tools into HistoryItem rows."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Type

from histree.data.models import HistoryItem, SessionSource, project_name
from histree.data.records import ClaudeHistoryRecord, CodexHistoryRecord, RecordT, parse_record

logger = logging.getLogger(__name__)

UNKNOWN_PROJECT = "unknown"
CODEX_FALLBACK_PROJECT = "Codex"


def iter_records(path: Path, schema: Type[RecordT]) -> Iterator[RecordT]:
    """Yield every valid record of a JSONL file.

    Blank lines are ignored. Malformed lines and records failing their validity
    check are skipped with a warning. An unreadable file yields nothing.
    """
    try:
        file = open(path, "rb")
    except OSError as exc:
        logger.warning("Cannot read %s: %s", path, exc)
        return

    with file:
        for lineno, raw in enumerate(file, start=1):
            raw = raw.strip()
            if not raw:
                continue
            try:
                # UnicodeDecodeError is a ValueError
                record = parse_record(raw.decode("utf-8"), schema)
            except ValueError as exc:
                logger.warning("Skipping malformed line %d of %s: %s", lineno, path, exc)
                continue
            if not record.is_valid():
                logger.warning("Skipping line %d of %s: missing required field", lineno, path)
                continue
            yield record


def read_claude_history(history_path: Path) -> List[HistoryItem]:
    """Read ~/.claude/history.jsonl, newest first."""
    items = [
        HistoryItem(
            session_id=record.session_id,
            project_path=record.project or UNKNOWN_PROJECT,
            display=record.display or "",
            timestamp_ms=record.timestamp or 0,
            source=SessionSource.CLAUDE,
        )
        for record in iter_records(history_path, ClaudeHistoryRecord)
    ]
    items.sort(key=lambda item: item.timestamp_ms, reverse=True)
    return items


def read_codex_history(history_path: Path, cwd_by_session: Optional[Dict[str, Optional[str]]] = None) -> List[HistoryItem]:
    """Read ~/.codex/history.jsonl, newest first.

    Codex history rows carry no project; it is looked up from the session
    index (the rollout's working directory), falling back to "Codex".
    """
    cwd_by_session = cwd_by_session or {}
    items = []
    for record in iter_records(history_path, CodexHistoryRecord):
        items.append(
            HistoryItem(
                session_id=record.session_id,
                project_path=cwd_by_session.get(record.session_id) or CODEX_FALLBACK_PROJECT,
                display=record.text or "",
                timestamp_ms=(record.ts or 0) * 1000,
                source=SessionSource.CODEX,
            )
        )
    items.sort(key=lambda item: item.timestamp_ms, reverse=True)
    return items


def latest_per_session(items: Iterable[HistoryItem]) -> List[HistoryItem]:
    """Reduce history rows to the newest row per (source, session id).

    ``items`` is re-sorted newest first; the first row seen for a key wins.
    """
    ordered = sorted(items, key=lambda item: item.timestamp_ms, reverse=True)
    seen = set()
    latest: List[HistoryItem] = []
    for item in ordered:
        if item.key in seen:
            continue
        seen.add(item.key)
        latest.append(item)
    return latest


@dataclass
class HistoryStats:
    """Totals reported by --count-sessions."""

    total_entries: int = 0
    unique_sessions: int = 0
    entries_by_project: List[Tuple[str, int]] = field(default_factory=list)

    @property
    def project_count(self) -> int:
        return len(self.entries_by_project)

    def top_projects(self, limit: int = 5) -> List[Tuple[str, int]]:
        """(project name, entry count) for the busiest projects, most entries first."""
        return [(project_name(path), count) for path, count in self.entries_by_project[:limit]]


def count_history(items: List[HistoryItem]) -> HistoryStats:
    counts = Counter(item.project_path for item in items)
    # most_common keeps first-seen order between ties
    return HistoryStats(
        total_entries=len(items),
        unique_sessions=len({item.key for item in items}),
        entries_by_project=counts.most_common(),
    )
