"""Formatting helpers for timestamps and text display."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


def ms_to_datetime(timestamp_ms: Optional[int]) -> datetime:
    """Convert Unix milliseconds timestamp to an aware UTC datetime (epoch when missing)."""
    if timestamp_ms is None:
        return EPOCH
    try:
        return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return EPOCH


def parse_iso_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp such as '2025-12-27T03:47:49.992Z'. None if unparseable."""
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_datetime(dt: datetime) -> str:
    """Format datetime as 'YYYY-MM-DD HH:MM'."""
    return dt.strftime("%Y-%m-%d %H:%M")


def format_local(dt: Optional[datetime]) -> str:
    """Format an aware datetime in local time, or '-' when missing."""
    if dt is None:
        return "-"
    return format_datetime(dt.astimezone())


def format_tokens(count: int) -> str:
    """Format a token count with thousands separators: 1234567 -> '1,234,567'."""
    return f"{count:,}"


def truncate(text: str, max_length: int) -> str:
    """Truncate text to max_length, appending '…' if truncated."""
    if max_length <= 0:
        return ""
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"


def first_line(text: str) -> str:
    """Return the first non-empty line of text, stripped."""
    for line in text.splitlines():
        line = line.strip()
        if line:
            return line
    return ""
