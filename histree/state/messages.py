"""Messages fed to update(), and the commands update() hands back to the host.

Messages are plain frozen dataclasses. Anything the host must do outside the
reducer (read a transcript, write an export, re-read the logs) is returned
as a command; its outcome comes back later as an ordinary message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Union

from histree.data.models import Session, SessionListItem
from histree.export.formats import ExportFormat
from histree.state.tree import ProjectGroup


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Lifecycle

@dataclass(frozen=True)
class Initialized:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Noop:
    pass


@dataclass(frozen=True)
class Resize:
    """Visible row counts of the tree pane and the detail pane."""

    list_height: int
    detail_height: int


@dataclass(frozen=True)
class Reload:
    pass


@dataclass(frozen=True)
class IndexLoaded:
    groups: List[ProjectGroup]


# Navigation

@dataclass(frozen=True)
class SelectRow:
    index: int


@dataclass(frozen=True)
class MoveUp:
    pass


@dataclass(frozen=True)
class MoveDown:
    pass


@dataclass(frozen=True)
class PageUp:
    pass


@dataclass(frozen=True)
class PageDown:
    pass


@dataclass(frozen=True)
class JumpTop:
    pass


@dataclass(frozen=True)
class JumpBottom:
    pass


@dataclass(frozen=True)
class EnterDetail:
    pass


@dataclass(frozen=True)
class BackToList:
    pass


@dataclass(frozen=True)
class ScrollUp:
    amount: int = 1


@dataclass(frozen=True)
class ScrollDown:
    amount: int = 1


@dataclass(frozen=True)
class SessionLoaded:
    session: Session


@dataclass(frozen=True)
class SessionLoadFailed:
    reason: str


@dataclass(frozen=True)
class ToggleCurrency:
    pass


# Search

@dataclass(frozen=True)
class StartSearch:
    pass


@dataclass(frozen=True)
class CancelSearch:
    pass


@dataclass(frozen=True)
class SearchInput:
    char: str


@dataclass(frozen=True)
class SearchBackspace:
    pass


@dataclass(frozen=True)
class ConfirmSearch:
    pass


@dataclass(frozen=True)
class ToggleCaseSensitive:
    pass


# Filter

@dataclass(frozen=True)
class StartFilter:
    pass


@dataclass(frozen=True)
class CancelFilter:
    pass


@dataclass(frozen=True)
class ApplyFilter:
    now: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ClearFilter:
    pass


@dataclass(frozen=True)
class FilterNextField:
    pass


@dataclass(frozen=True)
class FilterDatePresetNext:
    pass


@dataclass(frozen=True)
class FilterDatePresetPrev:
    pass


@dataclass(frozen=True)
class FilterProjectInput:
    char: str


@dataclass(frozen=True)
class FilterProjectBackspace:
    pass


# Help

@dataclass(frozen=True)
class ShowHelp:
    pass


@dataclass(frozen=True)
class CloseHelp:
    pass


# Export

@dataclass(frozen=True)
class StartExport:
    pass


@dataclass(frozen=True)
class SelectExportFormat:
    format: ExportFormat


@dataclass(frozen=True)
class ToggleExportFormat:
    pass


@dataclass(frozen=True)
class ConfirmExport:
    pass


@dataclass(frozen=True)
class CancelExport:
    pass


@dataclass(frozen=True)
class ExportCompleted:
    path: Path


@dataclass(frozen=True)
class ExportFailed:
    reason: str


# Errors

@dataclass(frozen=True)
class ShowError:
    message: str


@dataclass(frozen=True)
class ClearError:
    pass


# Tree

@dataclass(frozen=True)
class ToggleProject:
    project_path: str


@dataclass(frozen=True)
class ExpandCurrentProject:
    pass


@dataclass(frozen=True)
class CollapseCurrentProject:
    pass


@dataclass(frozen=True)
class ExpandAll:
    pass


@dataclass(frozen=True)
class CollapseAll:
    pass


# Commands

@dataclass(frozen=True)
class LoadSession:
    item: SessionListItem


@dataclass(frozen=True)
class RunExport:
    session: Session
    format: ExportFormat
    directory: Path


@dataclass(frozen=True)
class ReloadIndex:
    pass


Command = Union[LoadSession, RunExport, ReloadIndex]
