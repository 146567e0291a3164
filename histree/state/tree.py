"""Project grouping and the flattened project/session tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import AbstractSet, Dict, Iterable, List, Optional, Sequence

from histree.data.history import latest_per_session
from histree.data.models import HistoryItem, SessionListItem, project_name
from histree.utils.formatting import format_local, ms_to_datetime


@dataclass
class ProjectGroup:
    project_path: str
    project_name: str
    sessions: List[SessionListItem] = field(default_factory=list)

    @property
    def latest(self) -> Optional[SessionListItem]:
        return self.sessions[0] if self.sessions else None


class TreeNodeKind(Enum):
    PROJECT = "project"
    SESSION = "session"


@dataclass
class TreeItem:
    """One rendered row of the tree."""

    kind: TreeNodeKind
    project_path: str
    project_name: str
    session: Optional[SessionListItem] = None
    child_count: int = 0
    latest_datetime: Optional[datetime] = None
    formatted_time: str = ""

    @classmethod
    def project(cls, group: ProjectGroup) -> "TreeItem":
        latest = group.latest
        return cls(
            kind=TreeNodeKind.PROJECT,
            project_path=group.project_path,
            project_name=group.project_name,
            child_count=len(group.sessions),
            latest_datetime=latest.datetime if latest else None,
            formatted_time=latest.formatted_time if latest else "",
        )

    @classmethod
    def for_session(cls, item: SessionListItem) -> "TreeItem":
        return cls(
            kind=TreeNodeKind.SESSION,
            project_path=item.project_path,
            project_name=item.project_name,
            session=item,
            latest_datetime=item.datetime,
            formatted_time=item.formatted_time,
        )

    @property
    def is_project(self) -> bool:
        return self.kind is TreeNodeKind.PROJECT


def to_list_item(item: HistoryItem) -> SessionListItem:
    dt = ms_to_datetime(item.timestamp_ms)
    return SessionListItem(
        session_id=item.session_id,
        source=item.source,
        project_name=project_name(item.project_path),
        project_path=item.project_path,
        latest_user_message=item.display,
        formatted_time=format_local(dt),
        datetime=dt,
    )


def build_project_groups(items: Iterable[HistoryItem]) -> List[ProjectGroup]:
    """Group history rows into projects.

    Only the newest row per (source, session id) survives. Sessions are newest
    first within a group and groups are ordered by their newest session.
    """
    groups: Dict[str, ProjectGroup] = {}
    for item in latest_per_session(items):
        group = groups.get(item.project_path)
        if group is None:
            group = groups[item.project_path] = ProjectGroup(item.project_path, project_name(item.project_path))
        group.sessions.append(to_list_item(item))

    # Rows arrive newest first, so each group's sessions are already ordered
    # and dict insertion order is already newest-group-first.
    return list(groups.values())


def flatten_sessions(groups: Sequence[ProjectGroup]) -> List[SessionListItem]:
    return [session for group in groups for session in group.sessions]


def flatten_tree(groups: Sequence[ProjectGroup], expanded: AbstractSet[str]) -> List[TreeItem]:
    rows: List[TreeItem] = []
    for group in groups:
        rows.append(TreeItem.project(group))
        if group.project_path in expanded:
            rows.extend(TreeItem.for_session(session) for session in group.sessions)
    return rows


def filter_project_groups(
    groups: Sequence[ProjectGroup],
    sessions: Sequence[SessionListItem],
    indices: Iterable[int],
) -> List[ProjectGroup]:
    """Subset of ``groups`` holding only the sessions at ``indices``, group order kept."""
    matched: Dict[str, List[SessionListItem]] = {}
    for index in indices:
        session = sessions[index]
        matched.setdefault(session.project_path, []).append(session)
    return [
        ProjectGroup(group.project_path, group.project_name, matched[group.project_path])
        for group in groups
        if group.project_path in matched
    ]


def clamp_index(index: int, length: int) -> int:
    if length <= 0:
        return 0
    return min(max(index, 0), length - 1)
