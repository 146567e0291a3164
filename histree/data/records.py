"""Schemas for raw JSONL lines.

Every field is optional so that schema drift in either tool never turns into
a parse failure. Each record exposes one validity predicate that ingestion
evaluates exactly once; nothing downstream looks at raw optionality again.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

RecordT = TypeVar("RecordT", bound=BaseModel)

# Line types that carry no conversational content.
SKIPPED_TRANSCRIPT_TYPES = frozenset({"file-history-snapshot"})


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ClaudeHistoryRecord(_Record):
    """One line of ~/.claude/history.jsonl."""

    display: Optional[str] = None
    pasted_contents: Dict[str, Any] = Field(default_factory=dict, alias="pastedContents")
    timestamp: Optional[int] = Field(None, description="Unix milliseconds.")
    project: Optional[str] = None
    session_id: Optional[str] = Field(None, alias="sessionId")

    def is_valid(self) -> bool:
        return bool(self.session_id)


class CodexHistoryRecord(_Record):
    """One line of ~/.codex/history.jsonl."""

    session_id: Optional[str] = None
    ts: Optional[int] = Field(None, description="Unix seconds.")
    text: Optional[str] = None

    def is_valid(self) -> bool:
        return bool(self.session_id)


class ClaudeTranscriptRecord(_Record):
    """One line of ~/.claude/projects/<slug>/<session>.jsonl."""

    entry_type: Optional[str] = Field(None, alias="type")
    message: Optional[Dict[str, Any]] = None
    timestamp: Optional[str] = None
    is_sidechain: Optional[bool] = Field(None, alias="isSidechain")
    is_meta: Optional[bool] = Field(None, alias="isMeta")
    slug: Optional[str] = None
    session_id: Optional[str] = Field(None, alias="sessionId")
    cwd: Optional[str] = None
    uuid: Optional[str] = None

    def is_valid(self) -> bool:
        return bool(self.entry_type) and self.entry_type not in SKIPPED_TRANSCRIPT_TYPES


class CodexLineRecord(BaseModel):
    """One line of a Codex rollout file under ~/.codex/sessions/.

    Extra keys are kept because older rollouts put session metadata at the
    top level instead of under ``payload``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    timestamp: Optional[str] = None
    line_type: Optional[str] = Field(None, alias="type")
    payload: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class CodexLine:
    """Canonical (timestamp, line-type, payload) triple for a Codex line."""

    timestamp: Optional[str]
    line_type: str
    payload: Dict[str, Any]


def classify_codex_line(record: CodexLineRecord) -> CodexLine:
    """Normalize a Codex record into a CodexLine.

    An explicit ``type`` wins. Without one, a payload carrying an ``id`` is
    taken to be session metadata; anything else is ``unknown``.
    """
    if record.payload is not None:
        payload = record.payload
    else:
        payload = dict(record.model_extra or {})

    if record.line_type:
        line_type = record.line_type
    elif "id" in payload:
        line_type = "session_meta"
    else:
        line_type = "unknown"
    return CodexLine(timestamp=record.timestamp, line_type=line_type, payload=payload)


def parse_record(line: str, schema: Type[RecordT]) -> RecordT:
    """Decode one JSON line into ``schema``.

    Raises ValueError when the line is not a JSON object matching the schema.
    """
    data = json.loads(line)
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc
