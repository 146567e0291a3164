"""Handler for --count-sessions.

Prints totals over both history logs without starting the TUI.
"""

from __future__ import annotations

from typing import List, TextIO

from histree.data.history import HistoryStats, count_history
from histree.data.sources import SessionSources

TOP_PROJECTS = 5


def format_stats(stats: HistoryStats) -> List[str]:
    lines = [
        f"Total entries: {stats.total_entries}",
        f"Unique sessions: {stats.unique_sessions}",
        "",
        f"Projects: {stats.project_count}",
    ]
    for name, count in stats.top_projects(TOP_PROJECTS):
        lines.append(f"  {name} ({count} entries)")
    if stats.project_count > TOP_PROJECTS:
        lines.append(f"  ... and {stats.project_count - TOP_PROJECTS} more")
    return lines


def run(sources: SessionSources, out: TextIO) -> None:
    """Print entry, session and project counts to ``out``."""
    stats = count_history(sources.load_history())
    for line in format_stats(stats):
        print(line, file=out)
