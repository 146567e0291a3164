"""Main TUI application loop.

Manages curses setup/teardown, feeds key presses through the reducer,
runs the commands it returns and renders the model. Coordinates the tree
pane, preview pane, detail view, overlays and status bar renderers.
"""

from __future__ import annotations

import curses
import logging
import queue
import threading
from pathlib import Path
from typing import Optional

from histree.data.sources import SessionSources
from histree.errors import TerminalError
from histree.state import messages as m
from histree.state.model import ExportState, Model, ViewMode
from histree.state.update import update
from histree.tui import detail_view, dialogs, left_pane, right_pane, status_bar
from histree.tui.drawing import PAIR_DIVIDER, PAIR_NORMAL, draw_line, init_colors
from histree.tui.effects import load_index, load_session, run_export
from histree.tui.keys import key_to_message

logger = logging.getLogger(__name__)

_IDLE_TIMEOUT_MS = 100
_EXPORT_TIMEOUT_MS = 16

# ASCII art banner (small figlet font)
_BANNER = [
    " _    _    _                 ",
    "| |_ (_)__| |_ _ _ ___ ___   ",
    "| ' \\| (_-<  _| '_/ -_) -_)  ",
    "|_||_|_/__/\\__|_| \\___\\___|  ",
]
_BANNER_HEIGHT = len(_BANNER) + 1  # +1 for blank line after banner


class _App:
    """Owns the model and runs the commands ``update`` hands back."""

    def __init__(self, sources: SessionSources, export_dir: Path) -> None:
        self.sources = sources
        self.model = Model(export_dir=export_dir)
        # Results of background work, drained on the UI thread.
        self.results: "queue.Queue[object]" = queue.Queue()
        self.tick = 0

    def dispatch(self, msg: object) -> None:
        self.model, command = update(self.model, msg)
        if command is not None:
            self.execute(command)

    def execute(self, command: m.Command) -> None:
        if isinstance(command, m.LoadSession):
            self.dispatch(load_session(self.sources, command.item))
        elif isinstance(command, m.RunExport):
            worker = threading.Thread(
                target=self._export_worker,
                args=(command,),
                name="histree-export",
                daemon=True,
            )
            worker.start()
        elif isinstance(command, m.ReloadIndex):
            self.dispatch(load_index(self.sources))

    def _export_worker(self, command: m.RunExport) -> None:
        self.results.put(run_export(command.session, command.format, command.directory))

    def drain_results(self) -> None:
        while True:
            try:
                msg = self.results.get_nowait()
            except queue.Empty:
                return
            self.dispatch(msg)

    def exporting(self) -> bool:
        return self.model.export_state() is ExportState.EXPORTING


class _Layout:
    """Screen geometry for one frame."""

    def __init__(self, model: Model, max_y: int, max_x: int) -> None:
        self.max_y = max_y
        self.max_x = max_x
        self.status_y = max_y - 1
        self.show_banner = max_y > _BANNER_HEIGHT + 12
        top = _BANNER_HEIGHT if self.show_banner else 0
        base = _base_mode(model)
        self.show_search = base.is_list and (
            base is ViewMode.SEARCH or not model.search_query.is_empty()
        )
        self.search_y = top
        self.content_y = top + (1 if self.show_search else 0)
        self.pane_height = max(self.status_y - self.content_y, 2)

        # Pane widths: left ~60%, divider 1 col, right ~40%
        self.show_right = max_x >= 60
        self.left_width = max(20, int(max_x * 0.6)) if self.show_right else max_x
        self.right_x = self.left_width + 1
        self.right_width = max_x - self.right_x

        # The detail view uses the whole screen above the status bar.
        self.detail_height = max(self.status_y - detail_view.HEADER_HEIGHT, 1)

    @property
    def list_height(self) -> int:
        # Header row takes 1 line
        return max(self.pane_height - 1, 1)


def _base_mode(model: Model) -> ViewMode:
    """The view drawn underneath an overlay."""
    if model.view_mode in (ViewMode.HELP, ViewMode.EXPORT):
        return model.previous_view_mode
    return model.view_mode


def _draw_banner(stdscr: curses.window, max_x: int) -> None:
    """Draw the ASCII art banner left-aligned at the top of the screen."""
    attr = curses.color_pair(PAIR_DIVIDER) | curses.A_BOLD
    for i, line in enumerate(_BANNER):
        draw_line(stdscr, i, 0, line, min(len(line), max_x - 1), attr)


def _draw_divider(stdscr: curses.window, col: int, y: int, height: int) -> None:
    """Draw a vertical divider line between the two panes."""
    for row in range(height):
        try:
            stdscr.addstr(y + row, col, "│", curses.color_pair(PAIR_DIVIDER))
        except curses.error:
            pass


def _counts(model: Model) -> str:
    total = model.total_session_count()
    if model.is_filtered:
        return f"{model.visible_session_count()}/{total} sessions "
    return f"{total} sessions "


def _render(stdscr: curses.window, app: _App, layout: _Layout) -> None:
    """Perform a full render of the TUI."""
    model = app.model
    stdscr.erase()

    if layout.max_y < 6 or layout.max_x < 30:
        draw_line(stdscr, 0, 0, "Terminal too small", layout.max_x - 1, curses.color_pair(PAIR_NORMAL))
        stdscr.noutrefresh()
        curses.doupdate()
        return

    base = _base_mode(model)
    if base is ViewMode.SESSION_DETAIL:
        detail_view.draw(
            stdscr, model.current_session, model.detail_entries(),
            model.detail_cursor, model.detail_offset, model.currency,
            x=0, y=0, width=layout.max_x, height=layout.status_y,
        )
    else:
        if layout.show_banner:
            _draw_banner(stdscr, layout.max_x)
        if layout.show_search:
            dialogs.draw_search_bar(stdscr, model, layout.search_y, layout.max_x)

        if not model.tree_items:
            text = "No sessions match." if model.is_filtered else "No Claude Code or Codex sessions found."
            row = layout.content_y + layout.pane_height // 2
            draw_line(stdscr, row, max(0, (layout.max_x - len(text)) // 2), text, len(text),
                      curses.color_pair(PAIR_NORMAL))
        else:
            left_pane.draw(
                stdscr, model.tree_items, model.selected_index, model.list_offset,
                model.expanded_projects,
                x=0, y=layout.content_y, width=layout.left_width, height=layout.pane_height,
                title=f"Projects ({len(model.active_project_groups())})",
            )
            if layout.show_right:
                _draw_divider(stdscr, layout.left_width, layout.content_y, layout.pane_height)
                right_pane.draw(
                    stdscr, model.preview,
                    x=layout.right_x, y=layout.content_y,
                    width=layout.right_width, height=layout.pane_height,
                )

        if model.view_mode is ViewMode.FILTER:
            dialogs.draw_filter_panel(stdscr, model, layout.status_y, layout.max_x)

    if model.view_mode is ViewMode.HELP:
        dialogs.draw_help(stdscr, layout.status_y, layout.max_x)
    elif model.view_mode is ViewMode.EXPORT:
        dialogs.draw_export_dialog(stdscr, model, layout.status_y, layout.max_x, app.tick)

    status_bar.draw(stdscr, model.view_mode, layout.max_x, layout.status_y,
                    counts=_counts(model), error=model.error_message)

    stdscr.noutrefresh()
    curses.doupdate()


def _sync_size(app: _App, layout: _Layout) -> None:
    model = app.model
    if (model.list_height, model.detail_height) != (layout.list_height, layout.detail_height):
        app.dispatch(m.Resize(list_height=layout.list_height, detail_height=layout.detail_height))


def _main(stdscr: curses.window, sources: SessionSources, export_dir: Path) -> None:
    """Curses main function, runs inside curses.wrapper."""
    try:
        curses.curs_set(0)  # hide cursor
    except curses.error:
        pass
    curses.set_escdelay(25)
    stdscr.keypad(True)
    init_colors()

    app = _App(sources, export_dir)
    app.dispatch(load_index(sources))
    app.dispatch(m.Initialized())

    while not app.model.should_quit:
        app.drain_results()
        max_y, max_x = stdscr.getmaxyx()
        layout = _Layout(app.model, max_y, max_x)
        _sync_size(app, layout)
        _render(stdscr, app, layout)

        stdscr.timeout(_EXPORT_TIMEOUT_MS if app.exporting() else _IDLE_TIMEOUT_MS)
        try:
            key = stdscr.getch()
        except curses.error:
            continue
        except KeyboardInterrupt:
            break

        if key == -1:
            # Timeout: advance the spinner and re-render (handles resize)
            app.tick += 1
            continue

        if key == curses.KEY_RESIZE:
            stdscr.clear()
            continue

        # Clear transient messages on any keypress
        if app.model.error_message is not None:
            app.dispatch(m.ClearError())

        app.dispatch(key_to_message(key, app.model))


def run(sources: SessionSources, export_dir: Optional[Path] = None) -> None:
    """Entry point for the TUI. Sets up curses and runs the main loop.

    Raises:
        TerminalError: the terminal could not be initialized or restored.
    """
    try:
        curses.wrapper(_main, sources, export_dir or Path.cwd())
    except curses.error as e:
        raise TerminalError(str(e)) from e
