"""Left pane renderer for the TUI.

Draws the scrollable project/session tree occupying the left ~60% of the
terminal. Project rows show an expand marker, the project name and its
session count; session rows are indented under their project and show the
source, time, short session ID and the latest prompt. The highlighted row
uses the accent color.
"""

from __future__ import annotations

import curses
from typing import AbstractSet, List, Tuple

from histree.data.models import SessionSource
from histree.state.tree import TreeItem
from histree.tui.drawing import PAIR_ACCENT, PAIR_CODEX, PAIR_NORMAL, clear_rows, draw_line
from histree.utils.formatting import first_line, truncate

_EXPANDED = "▼"
_COLLAPSED = "▶"
_SOURCE_TAGS = {SessionSource.CLAUDE: "CC", SessionSource.CODEX: "CX"}


def _project_line(item: TreeItem, expanded: bool) -> str:
    marker = _EXPANDED if expanded else _COLLAPSED
    return f"{marker} {item.project_name} ({item.child_count})"


def _session_columns(item: TreeItem) -> Tuple[str, str, str, str]:
    session = item.session
    if session is None:
        return "", "", "", ""
    return (
        _SOURCE_TAGS[session.source],
        session.formatted_time,
        session.session_id[:8],
        first_line(session.latest_user_message),
    )


def draw(stdscr: curses.window, rows: List[TreeItem], cursor: int,
         scroll_offset: int, expanded: AbstractSet[str],
         x: int, y: int, width: int, height: int,
         title: str = "Sessions") -> None:
    """Render the tree in the left pane area.

    Args:
        stdscr: The curses window to draw on.
        rows: Flattened tree rows.
        cursor: Index of the highlighted row.
        scroll_offset: First visible row index.
        expanded: Project paths currently expanded.
        x: Starting column of the pane.
        y: Starting row of the pane.
        width: Width of the pane in columns.
        height: Height of the pane in rows, header included.
        title: Header text.
    """
    header_attr = curses.color_pair(PAIR_ACCENT) | curses.A_BOLD
    draw_line(stdscr, y, x, f" {title}", width, header_attr)

    # Header takes 1 row; data rows fill the rest
    data_height = height - 1
    visible = rows[scroll_offset:scroll_offset + data_height]

    time_width = max((len(row.formatted_time) for row in visible), default=0)
    for row_idx, item in enumerate(visible):
        screen_y = y + 1 + row_idx
        is_cursor = scroll_offset + row_idx == cursor
        attr = curses.color_pair(PAIR_ACCENT) if is_cursor else curses.color_pair(PAIR_NORMAL)

        if item.is_project:
            label = _project_line(item, item.project_path in expanded)
            name_width = max(10, width - time_width - 3)
            line = f"{truncate(label, name_width):<{name_width}}  {item.formatted_time}"
            draw_line(stdscr, screen_y, x, line, width, attr | curses.A_BOLD)
            continue

        tag, when, sid, prompt = _session_columns(item)
        prefix = f"    {tag} "
        rest = f" {when:<{time_width}}  {sid:<8}  "
        prompt_width = max(10, width - len(prefix) - len(rest))
        draw_line(stdscr, screen_y, x, prefix + rest + truncate(prompt, prompt_width), width, attr)
        if not is_cursor and item.session is not None and item.session.source is SessionSource.CODEX:
            # Recolor just the source tag.
            draw_line(stdscr, screen_y, x + 4, tag, len(tag), curses.color_pair(PAIR_CODEX))

    clear_rows(stdscr, y + 1 + len(visible), x, width, y + height)
