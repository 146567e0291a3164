"""Data models for Claude Code and Codex sessions.

Raw JSONL lines are validated in ``records.py``; everything here is the
normalized form the rest of the application works with.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterator, List, Optional, Tuple, Union

from histree.utils.formatting import parse_iso_timestamp

_STRIPPED_TAGS = (
    ("<command-name>", "</command-name>"),
    ("<command-message>", "</command-message>"),
)


class SessionSource(str, Enum):
    CLAUDE = "claude"
    CODEX = "codex"


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    OTHER = "other"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> "Role":
        if tag == "user":
            return cls.USER
        if tag == "assistant":
            return cls.ASSISTANT
        return cls.OTHER


@dataclass
class TextBlock:
    text: str


@dataclass
class ToolUseBlock:
    id: str
    name: str
    input: Any = None


@dataclass
class ToolResultBlock:
    tool_use_id: str
    content: Any = None
    is_error: bool = False


@dataclass
class ImageBlock:
    media_type: Optional[str] = None
    data: Optional[str] = None


@dataclass
class ThinkingBlock:
    thinking: str


ContentBlock = Union[TextBlock, ToolUseBlock, ToolResultBlock, ImageBlock, ThinkingBlock]


@dataclass
class Usage:
    """Token accounting for one message. All four counters are independently optional."""

    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    cache_creation_input_tokens: Optional[int] = None
    cache_read_input_tokens: Optional[int] = None

    def has_data(self) -> bool:
        return any(
            value is not None
            for value in (
                self.input_tokens,
                self.output_tokens,
                self.cache_creation_input_tokens,
                self.cache_read_input_tokens,
            )
        )

    def total_input_tokens(self) -> int:
        return (
            (self.input_tokens or 0)
            + (self.cache_creation_input_tokens or 0)
            + (self.cache_read_input_tokens or 0)
        )

    def total_output_tokens(self) -> int:
        return self.output_tokens or 0


def clean_text(text: str) -> str:
    """Remove <command-name>/<command-message> tag pairs and surrounding whitespace."""
    result = text
    for open_tag, close_tag in _STRIPPED_TAGS:
        while True:
            start = result.find(open_tag)
            end = result.find(close_tag, start + len(open_tag))
            if start == -1 or end == -1:
                break
            result = result[:start] + result[end + len(close_tag):]
    return result.strip()


@dataclass
class Message:
    role: str
    content: Union[str, List[ContentBlock]]
    model: Optional[str] = None
    usage: Optional[Usage] = None

    def text_content(self) -> Optional[str]:
        """First text block, cleaned. None when the message has no text at all."""
        if isinstance(self.content, str):
            return clean_text(self.content)
        for block in self.content:
            if isinstance(block, TextBlock):
                return clean_text(block.text)
        return None

    def all_text_content(self) -> str:
        if isinstance(self.content, str):
            return clean_text(self.content)
        return "\n".join(clean_text(block.text) for block in self.content if isinstance(block, TextBlock))


@dataclass
class Entry:
    """One transcript line in normalized form. Entries keep file order."""

    role: Role
    message: Optional[Message] = None
    timestamp: Optional[str] = None
    is_sidechain: bool = False
    is_meta: bool = False
    slug: Optional[str] = None

    @property
    def datetime(self) -> Optional[datetime]:
        return parse_iso_timestamp(self.timestamp)

    @property
    def is_user(self) -> bool:
        return self.role is Role.USER and not self.is_meta

    @property
    def is_assistant(self) -> bool:
        return self.role is Role.ASSISTANT

    def display_text(self) -> Optional[str]:
        if self.message is None:
            return None
        return self.message.text_content()


@dataclass
class Session:
    """A full transcript, built on demand when a session is opened."""

    id: str
    project: str
    entries: List[Entry] = field(default_factory=list)
    slug: Optional[str] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None

    @classmethod
    def from_entries(cls, session_id: str, project: str, entries: List[Entry]) -> "Session":
        slug = next((entry.slug for entry in entries if entry.slug), None)
        timestamps = [dt for dt in (entry.datetime for entry in entries) if dt is not None]
        return cls(
            id=session_id,
            project=project,
            entries=entries,
            slug=slug,
            started_at=min(timestamps) if timestamps else None,
            ended_at=max(timestamps) if timestamps else None,
        )

    @property
    def project_name(self) -> str:
        return project_name(self.project)

    @property
    def message_count(self) -> int:
        return sum(1 for entry in self.entries if entry.is_user or entry.is_assistant)

    def user_messages(self) -> Iterator[Entry]:
        return (entry for entry in self.entries if entry.is_user)

    def assistant_messages(self) -> Iterator[Entry]:
        return (entry for entry in self.entries if entry.is_assistant)

    def first_user_message(self) -> Optional[Entry]:
        return next(self.user_messages(), None)

    def displayable_entries(self) -> List[Entry]:
        """User/assistant entries that have text to show, in file order."""
        return [
            entry
            for entry in self.entries
            if (entry.is_user or entry.is_assistant) and entry.display_text()
        ]


@dataclass
class HistoryItem:
    """One row of a history.jsonl log, from either source."""

    session_id: str
    project_path: str
    display: str
    timestamp_ms: int
    source: SessionSource

    @property
    def key(self) -> Tuple[SessionSource, str]:
        return (self.source, self.session_id)


@dataclass
class SessionListItem:
    """Summary of one session as shown in the project tree."""

    session_id: str
    source: SessionSource
    project_name: str
    project_path: str
    latest_user_message: str
    formatted_time: str
    datetime: datetime


def project_name(project_path: str) -> str:
    """Last path component: '/Users/foo/bar' -> 'bar'."""
    stripped = project_path.rstrip("/")
    if not stripped:
        return project_path
    return stripped.rsplit("/", 1)[-1]
