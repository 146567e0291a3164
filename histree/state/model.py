"""Application state for the TUI.

``Model`` holds everything the views render. Its methods are the small,
reusable state transitions; ``update.py`` decides which of them a message
triggers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Set

from histree.data.billing import Currency
from histree.data.models import Entry, Session, SessionListItem
from histree.export.formats import ExportFormat
from histree.search import DATE_PRESETS, FilterCriteria, FilterField, SearchQuery, search_and_filter
from histree.state.tree import (
    ProjectGroup,
    TreeItem,
    clamp_index,
    filter_project_groups,
    flatten_sessions,
    flatten_tree,
)


class ViewMode(Enum):
    SESSION_LIST = "session_list"
    SESSION_DETAIL = "session_detail"
    SEARCH = "search"
    FILTER = "filter"
    HELP = "help"
    EXPORT = "export"

    @property
    def is_list(self) -> bool:
        return self in (ViewMode.SESSION_LIST, ViewMode.SEARCH, ViewMode.FILTER)


class ExportState(Enum):
    SELECTING = "selecting"
    EXPORTING = "exporting"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class ExportStatus:
    state: ExportState
    path: Optional[Path] = None
    error: Optional[str] = None

    @classmethod
    def selecting(cls) -> "ExportStatus":
        return cls(ExportState.SELECTING)

    @classmethod
    def exporting(cls) -> "ExportStatus":
        return cls(ExportState.EXPORTING)

    @classmethod
    def success(cls, path: Path) -> "ExportStatus":
        return cls(ExportState.SUCCESS, path=path)

    @classmethod
    def failed(cls, reason: str) -> "ExportStatus":
        return cls(ExportState.ERROR, error=reason)


def _scroll_into_view(cursor: int, offset: int, height: int) -> int:
    """Smallest change to ``offset`` that keeps ``cursor`` inside a window of ``height`` rows."""
    height = max(height, 1)
    if cursor < offset:
        return cursor
    if cursor >= offset + height:
        return cursor - height + 1
    return offset


@dataclass
class Model:
    sessions: List[SessionListItem] = field(default_factory=list)
    project_groups: List[ProjectGroup] = field(default_factory=list)
    filtered_project_groups: List[ProjectGroup] = field(default_factory=list)
    expanded_projects: Set[str] = field(default_factory=set)
    expanded_before_filter: Optional[Set[str]] = None
    tree_items: List[TreeItem] = field(default_factory=list)

    selected_index: int = 0
    list_offset: int = 0
    list_height: int = 20

    should_quit: bool = False
    view_mode: ViewMode = ViewMode.SESSION_LIST
    previous_view_mode: ViewMode = ViewMode.SESSION_LIST

    current_session: Optional[Session] = None
    detail_cursor: int = 0
    detail_offset: int = 0
    detail_height: int = 20
    preview: Optional[SessionListItem] = None

    search_query: SearchQuery = SearchQuery()
    filter_criteria: FilterCriteria = FilterCriteria()
    filtered_indices: List[int] = field(default_factory=list)
    is_filtered: bool = False
    filter_field: FilterField = FilterField.DATE_RANGE
    filter_project_input: str = ""
    date_preset_index: int = 0
    applied_preset_index: int = 0

    export_format: ExportFormat = ExportFormat.MARKDOWN
    export_status: Optional[ExportStatus] = None
    export_dir: Path = field(default_factory=Path.cwd)
    pending_export: bool = False

    error_message: Optional[str] = None
    currency: Currency = Currency.USD

    # Index

    def set_project_groups(self, groups: List[ProjectGroup]) -> None:
        self.project_groups = list(groups)
        self.sessions = flatten_sessions(self.project_groups)
        self.filtered_project_groups = []
        self.rebuild_tree()

    def active_project_groups(self) -> List[ProjectGroup]:
        return self.filtered_project_groups if self.is_filtered else self.project_groups

    def total_session_count(self) -> int:
        return len(self.sessions)

    def visible_session_count(self) -> int:
        return len(self.filtered_indices) if self.is_filtered else len(self.sessions)

    # Tree

    def rebuild_tree(self) -> None:
        self.tree_items = flatten_tree(self.active_project_groups(), self.expanded_projects)
        self.selected_index = clamp_index(self.selected_index, len(self.tree_items))
        self._scroll_list()

    def selected_tree_item(self) -> Optional[TreeItem]:
        if 0 <= self.selected_index < len(self.tree_items):
            return self.tree_items[self.selected_index]
        return None

    def selected_session(self) -> Optional[SessionListItem]:
        """The session under the cursor; None on a project row."""
        item = self.selected_tree_item()
        if item is None or item.is_project:
            return None
        return item.session

    def toggle_project(self, project_path: str) -> None:
        if project_path in self.expanded_projects:
            self.expanded_projects.discard(project_path)
        else:
            self.expanded_projects.add(project_path)
        self.rebuild_tree()

    def expand_current_project(self) -> None:
        item = self.selected_tree_item()
        if item is not None and item.is_project and item.project_path not in self.expanded_projects:
            self.expanded_projects.add(item.project_path)
            self.rebuild_tree()

    def collapse_current_project(self) -> None:
        item = self.selected_tree_item()
        if item is None or item.project_path not in self.expanded_projects:
            return
        if not item.is_project:
            # Move up to the parent row before its children disappear.
            self.selected_index = self._project_row(item.project_path)
        self.expanded_projects.discard(item.project_path)
        self.rebuild_tree()

    def expand_all(self) -> None:
        self.expanded_projects.update(group.project_path for group in self.active_project_groups())
        self.rebuild_tree()

    def collapse_all(self) -> None:
        item = self.selected_tree_item()
        self.expanded_projects.clear()
        self.rebuild_tree()
        self.selected_index = self._project_row(item.project_path) if item is not None else 0
        self._scroll_list()

    def _project_row(self, project_path: str) -> int:
        for index, row in enumerate(self.tree_items):
            if row.is_project and row.project_path == project_path:
                return index
        return 0

    # List cursor

    def select(self, index: int) -> None:
        self.selected_index = clamp_index(index, len(self.tree_items))
        self._scroll_list()

    def move_selection(self, delta: int) -> None:
        self.select(self.selected_index + delta)

    def _scroll_list(self) -> None:
        self.list_offset = _scroll_into_view(self.selected_index, self.list_offset, self.list_height)

    def update_preview(self) -> None:
        item = self.selected_tree_item()
        if item is None:
            self.preview = None
        elif item.is_project:
            group = next((g for g in self.active_project_groups() if g.project_path == item.project_path), None)
            self.preview = group.latest if group is not None else None
        else:
            self.preview = item.session

    # Search and filter

    def apply_search(self) -> None:
        self.filtered_indices = search_and_filter(self.sessions, self.search_query, self.filter_criteria)
        was_filtered = self.is_filtered
        self.is_filtered = not self.search_query.is_empty() or self.filter_criteria.is_set()
        if self.is_filtered:
            self.filtered_project_groups = filter_project_groups(
                self.project_groups, self.sessions, self.filtered_indices
            )
        else:
            self.filtered_project_groups = []
        self._sync_expanded_for_filter(was_filtered)
        self.selected_index = 0
        self.list_offset = 0
        self.rebuild_tree()
        self.update_preview()

    def apply_filter(self, now: datetime) -> None:
        preset = DATE_PRESETS[self.date_preset_index]
        self.filter_criteria = FilterCriteria(
            date_range=preset.to_range(now),
            project=self.filter_project_input or None,
        )
        self.applied_preset_index = self.date_preset_index
        self.apply_search()

    def clear_search_filter(self) -> None:
        self.search_query = SearchQuery(case_sensitive=self.search_query.case_sensitive)
        self.filter_criteria = FilterCriteria()
        self.filtered_indices = []
        self.is_filtered = False
        self.filtered_project_groups = []
        self.filter_project_input = ""
        self.date_preset_index = 0
        self.applied_preset_index = 0
        self._restore_expanded()
        self.selected_index = 0
        self.list_offset = 0
        self.rebuild_tree()
        self.update_preview()

    def _sync_expanded_for_filter(self, was_filtered: bool) -> None:
        # Matches are shown expanded; the user's own expansion is checkpointed
        # on entering a filter and restored when it is cleared.
        if self.is_filtered:
            if not was_filtered:
                self.expanded_before_filter = set(self.expanded_projects)
            self.expanded_projects = {group.project_path for group in self.filtered_project_groups}
        elif was_filtered:
            self._restore_expanded()

    def _restore_expanded(self) -> None:
        if self.expanded_before_filter is not None:
            self.expanded_projects = self.expanded_before_filter
            self.expanded_before_filter = None

    # Detail view

    def detail_entries(self) -> List[Entry]:
        if self.current_session is None:
            return []
        return self.current_session.displayable_entries()

    def reset_detail(self) -> None:
        self.detail_cursor = 0
        self.detail_offset = 0

    def move_detail_cursor(self, delta: int) -> None:
        self.detail_cursor = clamp_index(self.detail_cursor + delta, len(self.detail_entries()))
        self.detail_offset = _scroll_into_view(self.detail_cursor, self.detail_offset, self.detail_height)

    def selected_entry(self) -> Optional[Entry]:
        entries = self.detail_entries()
        if 0 <= self.detail_cursor < len(entries):
            return entries[self.detail_cursor]
        return None

    # Export

    def export_state(self) -> Optional[ExportState]:
        return self.export_status.state if self.export_status is not None else None

    def open_export_dialog(self, return_to: ViewMode) -> None:
        self.previous_view_mode = return_to
        self.view_mode = ViewMode.EXPORT
        self.export_status = ExportStatus.selecting()
