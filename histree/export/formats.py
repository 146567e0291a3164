"""Render a loaded session as Markdown or JSON."""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any, Dict, List

from histree.data.models import Session


class ExportFormat(Enum):
    MARKDOWN = "markdown"
    JSON = "json"

    @property
    def extension(self) -> str:
        return "md" if self is ExportFormat.MARKDOWN else "json"

    @property
    def display_name(self) -> str:
        return "Markdown" if self is ExportFormat.MARKDOWN else "JSON"

    def next(self) -> "ExportFormat":
        return ExportFormat.JSON if self is ExportFormat.MARKDOWN else ExportFormat.MARKDOWN


def to_markdown(session: Session) -> str:
    """Transcript with a metadata header. Entries without display text are skipped."""
    lines = [f"# Session: {session.project_name}", "", f"- **Project**: {session.project}"]

    if session.started_at is not None:
        started = session.started_at.strftime("%Y-%m-%d %H:%M")
        if session.ended_at is not None:
            lines.append(f"- **Date**: {started} - {session.ended_at.strftime('%H:%M')}")
        else:
            lines.append(f"- **Date**: {started}")

    lines.append(f"- **Messages**: {session.message_count}")
    if session.slug:
        lines.append(f"- **Slug**: {session.slug}")
    lines.extend(["", "---", ""])

    for entry in session.entries:
        if entry.is_user:
            heading = "## User"
        elif entry.is_assistant:
            heading = "## Assistant"
        else:
            continue
        text = entry.display_text()
        if not text:
            continue
        lines.extend([heading, "", text, "", "---", ""])

    return "\n".join(lines) + "\n"


def to_dict(session: Session) -> Dict[str, Any]:
    messages: List[Dict[str, Any]] = [
        {
            "role": "user" if entry.is_user else "assistant",
            "content": entry.display_text(),
            "timestamp": entry.timestamp,
        }
        for entry in session.entries
        if entry.is_user or entry.is_assistant
    ]
    return {
        "id": session.id,
        "project": session.project,
        "project_name": session.project_name,
        "slug": session.slug,
        "started_at": session.started_at.isoformat() if session.started_at else None,
        "ended_at": session.ended_at.isoformat() if session.ended_at else None,
        "message_count": session.message_count,
        "messages": messages,
    }


def to_json(session: Session) -> str:
    return json.dumps(to_dict(session), indent=2, ensure_ascii=False)


def render(session: Session, fmt: ExportFormat) -> str:
    if fmt is ExportFormat.JSON:
        return to_json(session)
    return to_markdown(session)


_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def _safe_name(name: str) -> str:
    return _UNSAFE_CHARS.sub("_", name)


def generate_filename(session: Session, fmt: ExportFormat) -> str:
    """``<project>_<YYYYmmdd_HHMM>_<id[:8]>.<ext>``, date ``unknown`` when the session has none."""
    date_str = session.started_at.strftime("%Y%m%d_%H%M") if session.started_at else "unknown"
    return f"{_safe_name(session.project_name)}_{date_str}_{session.id[:8]}.{fmt.extension}"
