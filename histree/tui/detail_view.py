"""Full-screen transcript view for a loaded session."""

from __future__ import annotations

import curses
from typing import List, Optional, Tuple

from histree.data.billing import (
    Currency,
    estimate_cost_usd,
    format_cost,
    format_cost_summary,
    summarize_cost,
    summarize_usage,
)
from histree.data.models import Entry, Session
from histree.tui.drawing import PAIR_ACCENT, PAIR_ASSISTANT, PAIR_NORMAL, PAIR_USER, clear_rows, draw_line, wrap
from histree.utils.formatting import format_local, format_tokens

HEADER_HEIGHT = 5


def _header_lines(session: Session, currency: Currency) -> List[str]:
    usage = summarize_usage(session)
    cost = summarize_cost(session)
    tokens = "-"
    if usage.has_data:
        tokens = (
            f"{format_tokens(usage.total_tokens)}"
            f" (in {format_tokens(usage.input_tokens)} / out {format_tokens(usage.output_tokens)})"
        )
    when = format_local(session.started_at)
    if session.ended_at is not None:
        when += f" - {format_local(session.ended_at)}"
    return [
        f"Project: {session.project}",
        f"Session: {session.id}" + (f"  ({session.slug})" if session.slug else ""),
        f"Time:    {when}",
        f"Messages: {session.message_count}   Tokens: {tokens}   "
        f"Cost: {format_cost_summary(cost, currency)} ({currency.label})",
    ]


def _entry_title(entry: Entry, currency: Currency) -> Tuple[str, int]:
    role = "User" if entry.is_user else "Assistant"
    pair = PAIR_USER if entry.is_user else PAIR_ASSISTANT
    parts = [role, format_local(entry.datetime)]
    message = entry.message
    if entry.is_assistant and message is not None:
        if message.model:
            parts.append(message.model)
        if message.usage is not None and message.usage.has_data():
            parts.append(
                f"in {format_tokens(message.usage.total_input_tokens())}"
                f" / out {format_tokens(message.usage.total_output_tokens())}"
            )
            parts.append(format_cost(estimate_cost_usd(message.model, message.usage), currency))
    return "  ".join(parts), pair


def _entry_lines(entry: Entry, width: int) -> List[str]:
    return wrap(entry.display_text() or "", width)


def _first_visible(entries: List[Entry], cursor: int, offset: int, width: int, height: int) -> int:
    """Advance ``offset`` until the message under the cursor starts inside the view."""
    start = min(offset, cursor)
    while start < cursor:
        used = sum(len(_entry_lines(entry, width)) + 2 for entry in entries[start:cursor])
        if used < height:
            break
        start += 1
    return start


def draw(stdscr: curses.window, session: Optional[Session], entries: List[Entry],
         cursor: int, offset: int, currency: Currency,
         x: int, y: int, width: int, height: int) -> None:
    """Render the header and the scrollable message list.

    Args:
        stdscr: The curses window to draw on.
        session: Loaded session, or None while it is still loading.
        entries: Displayable entries of ``session``.
        cursor: Index of the highlighted message.
        offset: First message the view would like to show.
        currency: Currency for cost figures.
        x, y, width, height: Area to draw in.
    """
    normal = curses.color_pair(PAIR_NORMAL)
    draw_line(stdscr, y, x, " Session", width, curses.color_pair(PAIR_ACCENT) | curses.A_BOLD)
    if session is None:
        draw_line(stdscr, y + 2, x, "  Loading…", width, normal)
        clear_rows(stdscr, y + 3, x, width, y + height)
        return

    row = y + 1
    for line in _header_lines(session, currency):
        draw_line(stdscr, row, x + 1, line, width - 2, normal | curses.A_BOLD)
        row += 1

    max_row = y + height
    body_width = width - 4
    if not entries:
        draw_line(stdscr, row + 1, x, "  (no messages)", width, normal)
        clear_rows(stdscr, row + 2, x, width, max_row)
        return

    start = _first_visible(entries, cursor, offset, body_width, max_row - row)
    for index in range(start, len(entries)):
        if row >= max_row:
            break
        entry = entries[index]
        title, pair = _entry_title(entry, currency)
        marker = "▌" if index == cursor else " "
        title_attr = curses.color_pair(pair) | curses.A_BOLD
        if index == cursor:
            title_attr |= curses.A_REVERSE
        draw_line(stdscr, row, x, f"{marker} {title}", width, title_attr)
        row += 1
        for line in _entry_lines(entry, body_width):
            if row >= max_row:
                break
            draw_line(stdscr, row, x, f"{marker}   {line}", width, normal)
            row += 1
        if row < max_row:
            draw_line(stdscr, row, x, "", width, normal)
            row += 1

    clear_rows(stdscr, row, x, width, max_row)
