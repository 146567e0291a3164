"""Key bindings: translate a curses key code into a message for the current view."""

from __future__ import annotations

import curses
from typing import Optional

from histree.search import FilterField
from histree.state import messages as m
from histree.state.model import ExportState, Model, ViewMode

KEY_ESCAPE = 27
KEY_TAB = ord("\t")
KEY_CTRL_C = 3
_ENTER_KEYS = (curses.KEY_ENTER, ord("\n"), ord("\r"))
_BACKSPACE_KEYS = (curses.KEY_BACKSPACE, 127, 8)
_UP_KEYS = (curses.KEY_UP, ord("k"))
_DOWN_KEYS = (curses.KEY_DOWN, ord("j"))

# Shown by the help overlay, in display order.
HELP_SECTIONS = (
    ("Session list", (
        ("j / k, arrows", "Move"),
        ("Enter", "Open session / toggle project"),
        ("l / h, arrows", "Expand / collapse project"),
        ("E / C", "Expand all / collapse all"),
        ("g / G", "Top / bottom"),
        ("PgUp / PgDn", "Page"),
        ("/", "Search"),
        ("i", "Toggle case-sensitive search"),
        ("f", "Filter"),
        ("e", "Export"),
        ("r", "Reload"),
        ("Esc", "Clear search and filter, or quit"),
        ("q", "Quit"),
    )),
    ("Session detail", (
        ("j / k, arrows", "Previous / next message"),
        ("PgUp / PgDn, g / G", "Page / top / bottom"),
        ("$", "Toggle USD / JPY"),
        ("e", "Export"),
        ("Esc / q", "Back to list"),
    )),
    ("Filter", (
        ("Tab", "Switch field"),
        ("j / k", "Change date range"),
        ("c", "Clear search and filter"),
        ("Enter / Esc", "Apply / cancel"),
    )),
)


def _printable(key: int) -> Optional[str]:
    if 32 <= key < 127:
        return chr(key)
    return None


def _list_key(key: int) -> object:
    if key == ord("q"):
        return m.Quit()
    if key == KEY_ESCAPE:
        return m.ClearFilter()
    if key in _UP_KEYS:
        return m.MoveUp()
    if key in _DOWN_KEYS:
        return m.MoveDown()
    if key in _ENTER_KEYS:
        return m.EnterDetail()
    if key in (curses.KEY_RIGHT, ord("l")):
        return m.ExpandCurrentProject()
    if key in (curses.KEY_LEFT, ord("h")):
        return m.CollapseCurrentProject()
    bindings = {
        ord("E"): m.ExpandAll,
        ord("C"): m.CollapseAll,
        ord("g"): m.JumpTop,
        curses.KEY_HOME: m.JumpTop,
        ord("G"): m.JumpBottom,
        curses.KEY_END: m.JumpBottom,
        curses.KEY_PPAGE: m.PageUp,
        curses.KEY_NPAGE: m.PageDown,
        ord("/"): m.StartSearch,
        ord("i"): m.ToggleCaseSensitive,
        ord("f"): m.StartFilter,
        ord("e"): m.StartExport,
        ord("r"): m.Reload,
        ord("?"): m.ShowHelp,
    }
    factory = bindings.get(key)
    return factory() if factory is not None else m.Noop()


def _detail_key(key: int) -> object:
    if key in (KEY_ESCAPE, ord("q")):
        return m.BackToList()
    if key in _UP_KEYS:
        return m.ScrollUp()
    if key in _DOWN_KEYS:
        return m.ScrollDown()
    bindings = {
        curses.KEY_PPAGE: m.PageUp,
        curses.KEY_NPAGE: m.PageDown,
        ord("g"): m.JumpTop,
        curses.KEY_HOME: m.JumpTop,
        ord("G"): m.JumpBottom,
        curses.KEY_END: m.JumpBottom,
        ord("$"): m.ToggleCurrency,
        ord("e"): m.StartExport,
        ord("?"): m.ShowHelp,
    }
    factory = bindings.get(key)
    return factory() if factory is not None else m.Noop()


def _search_key(key: int) -> object:
    if key == KEY_ESCAPE:
        return m.CancelSearch()
    if key in _ENTER_KEYS:
        return m.ConfirmSearch()
    if key in _BACKSPACE_KEYS:
        return m.SearchBackspace()
    char = _printable(key)
    return m.SearchInput(char) if char is not None else m.Noop()


def _filter_key(key: int, model: Model) -> object:
    if key == KEY_TAB:
        return m.FilterNextField()
    if key in _ENTER_KEYS:
        return m.ApplyFilter()
    if key == KEY_ESCAPE:
        return m.CancelFilter()

    if model.filter_field is FilterField.DATE_RANGE:
        if key in _DOWN_KEYS:
            return m.FilterDatePresetNext()
        if key in _UP_KEYS:
            return m.FilterDatePresetPrev()
        if key == ord("c"):
            return m.ClearFilter()
        return m.Noop()

    if key in _BACKSPACE_KEYS:
        return m.FilterProjectBackspace()
    char = _printable(key)
    return m.FilterProjectInput(char) if char is not None else m.Noop()


def _help_key(key: int) -> object:
    if key in (KEY_ESCAPE, ord("q"), ord("?")):
        return m.CloseHelp()
    return m.Noop()


def _export_key(key: int, model: Model) -> object:
    if key in (KEY_ESCAPE, ord("q")):
        return m.CancelExport()
    if model.export_state() is not ExportState.SELECTING:
        # Past the selection step only dismissal is accepted.
        return m.Noop()
    if key in (KEY_TAB, ord("j"), ord("k"), curses.KEY_LEFT, curses.KEY_RIGHT, curses.KEY_UP, curses.KEY_DOWN):
        return m.ToggleExportFormat()
    if key in _ENTER_KEYS:
        return m.ConfirmExport()
    return m.Noop()


def key_to_message(key: int, model: Model) -> object:
    if key == KEY_CTRL_C:
        return m.Quit()
    mode = model.view_mode
    if mode is ViewMode.SESSION_LIST:
        return _list_key(key)
    if mode is ViewMode.SESSION_DETAIL:
        return _detail_key(key)
    if mode is ViewMode.SEARCH:
        return _search_key(key)
    if mode is ViewMode.FILTER:
        return _filter_key(key, model)
    if mode is ViewMode.HELP:
        return _help_key(key)
    return _export_key(key, model)
