"""Right pane renderer for the TUI.

Draws a preview of the highlighted session: project path, source, session
ID, time and the latest prompt. On a project row the project's newest
session is previewed. Updates reactively when the cursor moves.
"""

from __future__ import annotations

import curses
from typing import Optional

from histree.data.models import SessionListItem, SessionSource
from histree.tui.drawing import PAIR_ACCENT, PAIR_NORMAL, draw_line, wrap

_SOURCE_NAMES = {SessionSource.CLAUDE: "Claude Code", SessionSource.CODEX: "Codex"}


def draw(stdscr: curses.window, preview: Optional[SessionListItem],
         x: int, y: int, width: int, height: int) -> None:
    """Render the preview pane.

    Args:
        stdscr: The curses window to draw on.
        preview: The session to preview, or None when the tree is empty.
        x: Starting column of the pane.
        y: Starting row of the pane.
        width: Width of the pane in columns.
        height: Height of the pane in rows.
    """
    attr = curses.color_pair(PAIR_NORMAL)
    label_attr = attr | curses.A_BOLD
    content_width = width - 2  # 1-char padding on each side
    col = x + 1
    row = y
    max_row = y + height

    def _line(text: str = "", line_attr: int = attr) -> None:
        """Draw one line and advance the row counter."""
        nonlocal row
        if row >= max_row:
            return
        draw_line(stdscr, row, col, text, content_width, line_attr)
        row += 1

    draw_line(stdscr, row, x, " Preview", width, curses.color_pair(PAIR_ACCENT) | curses.A_BOLD)
    row += 1

    if preview is None:
        _line()
        _line("  (no session selected)")
    else:
        _line("Project:", label_attr)
        for part in wrap(preview.project_path, content_width - 2):
            _line(f"  {part}")
        _line()
        _line("Source:", label_attr)
        _line(f"  {_SOURCE_NAMES[preview.source]}")
        _line()
        _line("Session ID:", label_attr)
        _line(f"  {preview.session_id}")
        _line()
        _line("Last active:", label_attr)
        _line(f"  {preview.formatted_time}")
        _line()
        _line("Latest prompt:", label_attr)
        for part in wrap(preview.latest_user_message, content_width - 2):
            _line(f"  {part}")

    while row < max_row:
        _line()
