"""Per-session JSONL reading for Claude Code transcripts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from histree.data.history import iter_records
from histree.data.models import (
    ContentBlock,
    Entry,
    ImageBlock,
    Message,
    Role,
    Session,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
    Usage,
)
from histree.data.records import ClaudeTranscriptRecord
from histree.errors import SessionNotFoundError

logger = logging.getLogger(__name__)


def _optional_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def parse_usage(raw: Any) -> Optional[Usage]:
    """Build a Usage from an Anthropic-style usage dict. None when no counter is present."""
    if not isinstance(raw, dict):
        return None
    usage = Usage(
        input_tokens=_optional_int(raw.get("input_tokens")),
        output_tokens=_optional_int(raw.get("output_tokens")),
        cache_creation_input_tokens=_optional_int(raw.get("cache_creation_input_tokens")),
        cache_read_input_tokens=_optional_int(raw.get("cache_read_input_tokens")),
    )
    return usage if usage.has_data() else None


def parse_content_block(raw: Any) -> Optional[ContentBlock]:
    """Convert one content item. Unknown or malformed block types are dropped."""
    if not isinstance(raw, dict):
        return None
    block_type = raw.get("type")
    if block_type == "text" and isinstance(raw.get("text"), str):
        return TextBlock(text=raw["text"])
    if block_type == "tool_use":
        return ToolUseBlock(id=str(raw.get("id", "")), name=str(raw.get("name", "")), input=raw.get("input"))
    if block_type == "tool_result":
        return ToolResultBlock(
            tool_use_id=str(raw.get("tool_use_id", "")),
            content=raw.get("content"),
            is_error=bool(raw.get("is_error", False)),
        )
    if block_type == "image":
        source = raw.get("source") if isinstance(raw.get("source"), dict) else {}
        return ImageBlock(media_type=source.get("media_type"), data=source.get("data"))
    if block_type == "thinking" and isinstance(raw.get("thinking"), str):
        return ThinkingBlock(thinking=raw["thinking"])
    return None


def parse_message(raw: Optional[Dict[str, Any]]) -> Optional[Message]:
    """Convert the ``message`` object of a transcript line. None if it has no usable role/content."""
    if not raw:
        return None
    role = raw.get("role")
    content = raw.get("content")
    if not isinstance(role, str):
        return None
    if isinstance(content, list):
        blocks = [block for block in (parse_content_block(item) for item in content) if block is not None]
        parsed_content: Any = blocks
    elif isinstance(content, str):
        parsed_content = content
    else:
        return None
    model = raw.get("model") if isinstance(raw.get("model"), str) else None
    return Message(role=role, content=parsed_content, model=model, usage=parse_usage(raw.get("usage")))


def entry_from_record(record: ClaudeTranscriptRecord) -> Entry:
    return Entry(
        role=Role.from_tag(record.entry_type),
        message=parse_message(record.message),
        timestamp=record.timestamp,
        is_sidechain=bool(record.is_sidechain),
        is_meta=bool(record.is_meta),
        slug=record.slug,
    )


def read_claude_entries(path: Path) -> List[Entry]:
    """Read every entry of a transcript, in file order."""
    return [entry_from_record(record) for record in iter_records(path, ClaudeTranscriptRecord)]


def load_claude_session(path: Path, session_id: str, project: str) -> Session:
    """Read a Claude Code transcript into a Session.

    Raises SessionNotFoundError if the file vanished after indexing.
    """
    if not path.is_file():
        raise SessionNotFoundError(f"Session file not found: {path}")
    entries = read_claude_entries(path)
    logger.debug("Loaded %d entries from %s", len(entries), path)
    return Session.from_entries(session_id, project, entries)
