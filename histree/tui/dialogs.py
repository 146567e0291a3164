"""Overlays drawn on top of the main view: search bar, filter panel, help and export dialog."""

from __future__ import annotations

import curses

from histree.export import ExportFormat
from histree.search import DATE_PRESETS, FilterField
from histree.state.model import ExportState, Model, ViewMode
from histree.tui.drawing import PAIR_ACCENT, PAIR_ASSISTANT, PAIR_ERROR, PAIR_NORMAL, draw_box, draw_line, wrap
from histree.tui.keys import HELP_SECTIONS

_SPINNER = "|/-\\"


def _centered(max_y: int, max_x: int, height: int, width: int):
    height = min(height, max_y)
    width = min(width, max_x)
    return (max_y - height) // 2, (max_x - width) // 2, height, width


def draw_search_bar(stdscr: curses.window, model: Model, y: int, width: int) -> None:
    """One-line search prompt; shown while typing and while a query is active."""
    query = model.search_query
    case = "Aa" if query.case_sensitive else "aa"
    cursor = "_" if model.view_mode is ViewMode.SEARCH else ""
    attr = curses.color_pair(PAIR_NORMAL)
    if model.view_mode is ViewMode.SEARCH:
        attr |= curses.A_BOLD
    draw_line(stdscr, y, 0, f" / {query.text}{cursor}   [{case}]", width, attr)


def draw_filter_panel(stdscr: curses.window, model: Model, max_y: int, max_x: int) -> None:
    y, x, height, width = _centered(max_y, max_x, len(DATE_PRESETS) + 7, 46)
    draw_box(stdscr, y, x, height, width, "Filter")
    inner = width - 4
    normal = curses.color_pair(PAIR_NORMAL)
    focus = curses.color_pair(PAIR_ACCENT) | curses.A_BOLD

    date_focus = model.filter_field is FilterField.DATE_RANGE
    draw_line(stdscr, y + 1, x + 2, "Date range", inner, focus if date_focus else normal | curses.A_BOLD)
    for index, preset in enumerate(DATE_PRESETS):
        mark = "(•)" if index == model.date_preset_index else "( )"
        draw_line(stdscr, y + 2 + index, x + 2, f"  {mark} {preset.value}", inner, normal)

    row = y + 3 + len(DATE_PRESETS)
    draw_line(stdscr, row, x + 2, "Project", inner, normal | curses.A_BOLD if date_focus else focus)
    cursor = "_" if not date_focus else ""
    draw_line(stdscr, row + 1, x + 2, f"  > {model.filter_project_input}{cursor}", inner, normal)


def draw_help(stdscr: curses.window, max_y: int, max_x: int) -> None:
    lines = []
    for title, bindings in HELP_SECTIONS:
        lines.append((title, ""))
        lines.extend(bindings)
        lines.append(("", ""))
    y, x, height, width = _centered(max_y, max_x, len(lines) + 2, 60)
    draw_box(stdscr, y, x, height, width, "Help")
    normal = curses.color_pair(PAIR_NORMAL)
    for offset, (key, action) in enumerate(lines[: height - 2]):
        if action:
            text, attr = f"  {key:<20} {action}", normal
        else:
            text, attr = key, normal | curses.A_BOLD
        draw_line(stdscr, y + 1 + offset, x + 2, text, width - 4, attr)


def draw_export_dialog(stdscr: curses.window, model: Model, max_y: int, max_x: int, tick: int = 0) -> None:
    y, x, height, width = _centered(max_y, max_x, 9, 56)
    draw_box(stdscr, y, x, height, width, "Export")
    inner = width - 4
    normal = curses.color_pair(PAIR_NORMAL)
    state = model.export_state()

    session = model.current_session
    name = session.project_name if session is not None else "-"
    draw_line(stdscr, y + 1, x + 2, f"Session: {name}", inner, normal | curses.A_BOLD)

    if state is ExportState.SELECTING:
        for index, fmt in enumerate(ExportFormat):
            mark = "(•)" if fmt is model.export_format else "( )"
            draw_line(stdscr, y + 3 + index, x + 2, f"  {mark} {fmt.display_name} (.{fmt.extension})", inner, normal)
        draw_line(stdscr, y + 6, x + 2, f"To: {model.export_dir}", inner, normal)
    elif state is ExportState.EXPORTING:
        spinner = _SPINNER[tick % len(_SPINNER)]
        draw_line(stdscr, y + 3, x + 2, f"{spinner} Exporting as {model.export_format.display_name}…", inner, normal)
    elif state is ExportState.SUCCESS:
        draw_line(stdscr, y + 3, x + 2, "Exported to:", inner, curses.color_pair(PAIR_ASSISTANT) | curses.A_BOLD)
        for offset, part in enumerate(wrap(str(model.export_status.path), inner)[:3]):
            draw_line(stdscr, y + 4 + offset, x + 2, part, inner, normal)
    elif state is ExportState.ERROR:
        draw_line(stdscr, y + 3, x + 2, "Export failed:", inner, curses.color_pair(PAIR_ERROR) | curses.A_BOLD)
        for offset, part in enumerate(wrap(model.export_status.error or "", inner)[:3]):
            draw_line(stdscr, y + 4 + offset, x + 2, part, inner, normal)
