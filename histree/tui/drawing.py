"""Color pairs and low-level drawing helpers shared by the renderers."""

from __future__ import annotations

import curses
import textwrap
from typing import List

# Accent colors (R, G, B)
_ACCENT_COLOR = (202, 124, 94)
_CODEX_COLOR = (16, 163, 127)
_ERROR_COLOR = (155, 28, 28)

# Color pair IDs
PAIR_ACCENT = 1
PAIR_NORMAL = 2
PAIR_DIVIDER = 3
PAIR_USER = 4
PAIR_ASSISTANT = 5
PAIR_ERROR = 6
PAIR_CODEX = 7


def init_colors() -> None:
    """Initialize curses color pairs using true-color if available."""
    curses.start_color()
    curses.use_default_colors()

    if curses.can_change_color():
        # curses uses 0-1000 scale
        def _set(color_id: int, r: int, g: int, b: int) -> None:
            curses.init_color(color_id, r * 1000 // 255, g * 1000 // 255, b * 1000 // 255)

        _set(20, *_ACCENT_COLOR)
        _set(21, *_CODEX_COLOR)
        _set(22, 255, 255, 255)
        _set(23, *_ERROR_COLOR)

        curses.init_pair(PAIR_ACCENT, 22, 20)
        curses.init_pair(PAIR_DIVIDER, 20, -1)
        curses.init_pair(PAIR_ERROR, 22, 23)
        curses.init_pair(PAIR_CODEX, 21, -1)
    else:
        curses.init_pair(PAIR_ACCENT, curses.COLOR_WHITE, curses.COLOR_RED)
        curses.init_pair(PAIR_DIVIDER, curses.COLOR_RED, -1)
        curses.init_pair(PAIR_ERROR, curses.COLOR_WHITE, curses.COLOR_RED)
        curses.init_pair(PAIR_CODEX, curses.COLOR_GREEN, -1)

    curses.init_pair(PAIR_NORMAL, -1, -1)
    curses.init_pair(PAIR_USER, curses.COLOR_CYAN, -1)
    curses.init_pair(PAIR_ASSISTANT, curses.COLOR_GREEN, -1)


def draw_line(stdscr: curses.window, row: int, col: int, text: str, width: int, attr: int) -> None:
    """Draw one line padded or cut to exactly ``width`` columns."""
    if width <= 0:
        return
    try:
        stdscr.addstr(row, col, text[:width].ljust(width), attr)
    except curses.error:
        # Writing to the very last cell can raise on some terminals
        pass


def clear_rows(stdscr: curses.window, row: int, col: int, width: int, until: int) -> None:
    attr = curses.color_pair(PAIR_NORMAL)
    for y in range(row, until):
        draw_line(stdscr, y, col, "", width, attr)


def wrap(text: str, width: int) -> List[str]:
    """Wrap text to ``width`` columns, keeping blank lines."""
    if width <= 0:
        return []
    lines: List[str] = []
    for paragraph in text.splitlines() or [""]:
        lines.extend(textwrap.wrap(paragraph, width, replace_whitespace=False, drop_whitespace=True) or [""])
    return lines


def draw_box(stdscr: curses.window, y: int, x: int, height: int, width: int, title: str = "") -> None:
    """Clear a rectangle and draw a border around it."""
    attr = curses.color_pair(PAIR_DIVIDER)
    normal = curses.color_pair(PAIR_NORMAL)
    for row in range(y, y + height):
        draw_line(stdscr, row, x, "", width, normal)
    try:
        win = stdscr.derwin(height, width, y, x)
        win.attron(attr)
        win.box()
        win.attroff(attr)
    except curses.error:
        return
    if title:
        draw_line(stdscr, y, x + 2, f" {title} ", min(len(title) + 2, width - 4), attr | curses.A_BOLD)
