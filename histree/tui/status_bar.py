"""Status bar renderer for the TUI.

Draws a single line at the bottom showing the current view, available
keybindings and the session counts. An error message, when present,
replaces the hints and is drawn on the error color.
"""

from __future__ import annotations

import curses
from typing import Optional

from histree.state.model import ViewMode
from histree.tui.drawing import PAIR_ACCENT, PAIR_ERROR, draw_line

# Key hint strings per view
_HINTS = {
    ViewMode.SESSION_LIST: "↑/↓ Navigate  |  Enter: Open  |  /: Search  |  f: Filter  |  e: Export  |  ?: Help  |  q: Quit",
    ViewMode.SESSION_DETAIL: "↑/↓ Messages  |  $: Currency  |  e: Export  |  ?: Help  |  Esc: Back",
    ViewMode.SEARCH: "Type to search  |  Enter: Done  |  Esc: Cancel",
    ViewMode.FILTER: "Tab: Field  |  j/k: Date range  |  Enter: Apply  |  c: Clear  |  Esc: Cancel",
    ViewMode.HELP: "Esc / ?: Close help",
    ViewMode.EXPORT: "Tab: Format  |  Enter: Export  |  Esc: Close",
}


def draw(stdscr: curses.window, mode: ViewMode, width: int, y: int,
         counts: str = "", error: Optional[str] = None) -> None:
    """Render the status bar at the given row.

    Args:
        stdscr: The curses window to draw on.
        mode: Current view mode.
        width: Terminal width in columns.
        y: Row number where the status bar should be drawn.
        counts: Right-aligned summary such as "12/40 sessions".
        error: Error message; replaces the hints when set.
    """
    if error is not None:
        draw_line(stdscr, y, 0, f" {error}", width, curses.color_pair(PAIR_ERROR) | curses.A_BOLD)
        return

    text = f" {mode.name.replace('_', ' ')}  |  {_HINTS[mode]}"
    if counts and len(text) + len(counts) + 2 <= width:
        text = text.ljust(width - len(counts) - 1) + counts
    draw_line(stdscr, y, 0, text, width, curses.color_pair(PAIR_ACCENT) | curses.A_BOLD)
