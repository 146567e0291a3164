"""Codex rollout files (~/.codex/sessions/**/*.jsonl).

Codex lines have no single stable envelope, so each file is rebuilt in two
passes: one forward fold that turns classified lines into entries (tracking
the current model and the last assistant entry), then a backfill of missing
model names.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from histree.data.history import iter_records
from histree.data.models import Entry, Message, Role, Session, TextBlock, Usage
from histree.data.records import CodexLine, CodexLineRecord, classify_codex_line
from histree.errors import SessionNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class CodexSessionInfo:
    session_id: str
    path: Path
    cwd: Optional[str] = None


@dataclass
class _ScanState:
    """Accumulator threaded through the forward fold."""

    session_id: Optional[str] = None
    cwd: Optional[str] = None
    current_model: Optional[str] = None
    last_assistant: Optional[int] = None
    entries: List[Entry] = field(default_factory=list)


def iter_codex_lines(path: Path) -> Iterator[CodexLine]:
    for record in iter_records(path, CodexLineRecord):
        yield classify_codex_line(record)


def _text_items(content: Any) -> List[TextBlock]:
    if not isinstance(content, list):
        return []
    blocks = []
    for item in content:
        if isinstance(item, dict) and isinstance(item.get("text"), str):
            blocks.append(TextBlock(text=item["text"]))
    return blocks


def usage_from_token_count(payload: Dict[str, Any]) -> Optional[Usage]:
    """Usage from an event_msg/token_count payload; per-turn usage preferred over totals."""
    info = payload.get("info")
    if not isinstance(info, dict):
        return None
    raw = info.get("last_token_usage") or info.get("total_token_usage")
    if not isinstance(raw, dict):
        return None

    def count(key: str) -> Optional[int]:
        value = raw.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return int(value)

    input_tokens = count("input_tokens")
    cached = count("cached_input_tokens")
    if input_tokens is not None and cached is not None:
        input_tokens = max(input_tokens - cached, 0)
    usage = Usage(
        input_tokens=input_tokens,
        output_tokens=count("output_tokens"),
        cache_read_input_tokens=cached,
    )
    return usage if usage.has_data() else None


def _apply_line(state: _ScanState, line: CodexLine) -> _ScanState:
    payload = line.payload

    if line.line_type == "session_meta":
        if state.session_id is None and isinstance(payload.get("id"), str):
            state.session_id = payload["id"]
            cwd = payload.get("cwd")
            state.cwd = cwd if isinstance(cwd, str) else None

    elif line.line_type == "turn_context":
        model = payload.get("model")
        if isinstance(model, str) and model:
            state.current_model = model

    elif line.line_type == "response_item":
        role = payload.get("role")
        if payload.get("type") != "message" or role not in ("user", "assistant"):
            return state
        blocks = _text_items(payload.get("content"))
        if not blocks:
            return state
        message = Message(
            role=role,
            content=blocks,
            model=state.current_model if role == "assistant" else None,
        )
        # Entries whose text cleans down to nothing are dropped, not hidden.
        if not message.all_text_content():
            return state
        state.entries.append(Entry(role=Role.from_tag(role), message=message, timestamp=line.timestamp))
        if role == "assistant":
            state.last_assistant = len(state.entries) - 1

    elif line.line_type == "event_msg":
        if payload.get("type") != "token_count" or state.last_assistant is None:
            return state
        message = state.entries[state.last_assistant].message
        if message is not None and message.usage is None:
            message.usage = usage_from_token_count(payload)

    return state


def backfill_models(entries: List[Entry]) -> None:
    """Fill missing assistant model names forward, then backward."""
    assistants = [
        entry.message for entry in entries if entry.is_assistant and entry.message is not None
    ]

    last_model: Optional[str] = None
    for message in assistants:
        if message.model:
            last_model = message.model
        elif last_model:
            message.model = last_model

    next_model: Optional[str] = None
    for message in reversed(assistants):
        if message.model:
            next_model = message.model
        elif next_model:
            message.model = next_model


def scan_codex_file(path: Path) -> _ScanState:
    state = _ScanState()
    for line in iter_codex_lines(path):
        state = _apply_line(state, line)
    backfill_models(state.entries)
    return state


def load_codex_session(path: Path, session_id: str, project: str) -> Session:
    """Read a Codex rollout into a Session.

    Raises SessionNotFoundError if the file vanished after indexing.
    """
    if not path.is_file():
        raise SessionNotFoundError(f"Codex session file not found: {path}")
    state = scan_codex_file(path)
    logger.debug("Loaded %d entries from %s", len(state.entries), path)
    return Session.from_entries(session_id, project, state.entries)


def session_info_from_file(path: Path) -> Optional[CodexSessionInfo]:
    """Session id and cwd from the first session_meta line of a rollout."""
    for line in iter_codex_lines(path):
        if line.line_type != "session_meta":
            continue
        session_id = line.payload.get("id")
        if isinstance(session_id, str) and session_id:
            cwd = line.payload.get("cwd")
            return CodexSessionInfo(session_id=session_id, path=path, cwd=cwd if isinstance(cwd, str) else None)
    logger.warning("No session_meta line in %s", path)
    return None


def collect_jsonl_files(directory: Path) -> List[Path]:
    if not directory.is_dir():
        return []
    files: List[Path] = []

    def _on_error(exc: OSError) -> None:
        logger.warning("Cannot scan %s: %s", exc.filename, exc)

    for dirpath, _dirnames, filenames in os.walk(directory, onerror=_on_error):
        for name in filenames:
            if name.endswith(".jsonl"):
                files.append(Path(dirpath) / name)
    files.sort()
    return files


def build_codex_index(sessions_dir: Path) -> Dict[str, CodexSessionInfo]:
    """Map session id -> rollout file for every rollout under sessions_dir."""
    index: Dict[str, CodexSessionInfo] = {}
    for path in collect_jsonl_files(sessions_dir):
        info = session_info_from_file(path)
        if info is not None:
            index[info.session_id] = info
    return index
