"""The reducer: ``update(model, msg) -> (model, command)``.

``update`` never touches the filesystem. When a message needs I/O the
handler returns a command for the host to run; the result comes back as a
later message (``SessionLoaded``, ``ExportCompleted``, ``IndexLoaded``...).
Messages that make no sense in the current state are ignored.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Tuple, Type

from histree.search import DATE_PRESETS, SearchQuery
from histree.state import messages as m
from histree.state.model import ExportState, ExportStatus, Model, ViewMode

logger = logging.getLogger(__name__)

Handler = Callable[[Model, object], Optional[m.Command]]

_HANDLERS: Dict[Type, Handler] = {}


def _handles(*message_types: Type) -> Callable[[Handler], Handler]:
    def register(func: Handler) -> Handler:
        for message_type in message_types:
            _HANDLERS[message_type] = func
        return func

    return register


def update(model: Model, msg: object) -> Tuple[Model, Optional[m.Command]]:
    handler = _HANDLERS.get(type(msg))
    if handler is None:
        logger.debug("Ignoring unknown message %r", msg)
        return model, None
    return model, handler(model, msg)


# Lifecycle


@_handles(m.Initialized)
def _initialized(model: Model, msg: m.Initialized) -> None:
    model.update_preview()


@_handles(m.Quit)
def _quit(model: Model, msg: m.Quit) -> None:
    model.should_quit = True


@_handles(m.Noop)
def _noop(model: Model, msg: m.Noop) -> None:
    return None


@_handles(m.Resize)
def _resize(model: Model, msg: m.Resize) -> None:
    model.list_height = max(msg.list_height, 1)
    model.detail_height = max(msg.detail_height, 1)
    model.select(model.selected_index)
    model.move_detail_cursor(0)


@_handles(m.Reload)
def _reload(model: Model, msg: m.Reload) -> m.Command:
    return m.ReloadIndex()


@_handles(m.IndexLoaded)
def _index_loaded(model: Model, msg: m.IndexLoaded) -> None:
    model.current_session = None
    model.pending_export = False
    model.export_status = None
    model.reset_detail()
    if not model.view_mode.is_list and model.view_mode is not ViewMode.HELP:
        model.view_mode = ViewMode.SESSION_LIST
    if not model.previous_view_mode.is_list:
        model.previous_view_mode = ViewMode.SESSION_LIST

    model.set_project_groups(msg.groups)
    if model.is_filtered:
        model.apply_search()
    else:
        model.update_preview()


# Navigation


@_handles(m.SelectRow)
def _select_row(model: Model, msg: m.SelectRow) -> None:
    if 0 <= msg.index < len(model.tree_items):
        model.select(msg.index)
        model.update_preview()


@_handles(m.MoveUp)
def _move_up(model: Model, msg: m.MoveUp) -> None:
    model.move_selection(-1)
    model.update_preview()


@_handles(m.MoveDown)
def _move_down(model: Model, msg: m.MoveDown) -> None:
    model.move_selection(1)
    model.update_preview()


@_handles(m.PageUp, m.PageDown)
def _page(model: Model, msg: object) -> None:
    sign = -1 if isinstance(msg, m.PageUp) else 1
    if model.view_mode is ViewMode.SESSION_DETAIL:
        model.move_detail_cursor(sign * model.detail_height)
    else:
        model.move_selection(sign * model.list_height)
        model.update_preview()


@_handles(m.JumpTop, m.JumpBottom)
def _jump(model: Model, msg: object) -> None:
    bottom = isinstance(msg, m.JumpBottom)
    if model.view_mode is ViewMode.SESSION_DETAIL:
        model.move_detail_cursor(len(model.detail_entries()) if bottom else -model.detail_cursor)
    else:
        model.select(len(model.tree_items) - 1 if bottom else 0)
        model.update_preview()


@_handles(m.EnterDetail)
def _enter_detail(model: Model, msg: m.EnterDetail) -> Optional[m.Command]:
    item = model.selected_tree_item()
    if item is None:
        return None
    if item.is_project:
        model.toggle_project(item.project_path)
        model.update_preview()
        return None
    model.view_mode = ViewMode.SESSION_DETAIL
    model.current_session = None
    model.reset_detail()
    return m.LoadSession(item.session)


@_handles(m.BackToList)
def _back_to_list(model: Model, msg: m.BackToList) -> None:
    model.view_mode = ViewMode.SESSION_LIST
    model.current_session = None
    model.reset_detail()


@_handles(m.ScrollUp)
def _scroll_up(model: Model, msg: m.ScrollUp) -> None:
    model.move_detail_cursor(-msg.amount)


@_handles(m.ScrollDown)
def _scroll_down(model: Model, msg: m.ScrollDown) -> None:
    model.move_detail_cursor(msg.amount)


@_handles(m.SessionLoaded)
def _session_loaded(model: Model, msg: m.SessionLoaded) -> None:
    model.current_session = msg.session
    model.reset_detail()
    if model.pending_export:
        model.pending_export = False
        model.open_export_dialog(return_to=model.view_mode)


@_handles(m.SessionLoadFailed)
def _session_load_failed(model: Model, msg: m.SessionLoadFailed) -> None:
    model.current_session = None
    if model.pending_export:
        model.pending_export = False
        model.error_message = f"Failed to load session: {msg.reason}"
        return
    model.view_mode = ViewMode.SESSION_LIST
    model.error_message = msg.reason


@_handles(m.ToggleCurrency)
def _toggle_currency(model: Model, msg: m.ToggleCurrency) -> None:
    model.currency = model.currency.toggle()


# Search


@_handles(m.StartSearch)
def _start_search(model: Model, msg: m.StartSearch) -> None:
    model.view_mode = ViewMode.SEARCH


@_handles(m.CancelSearch)
def _cancel_search(model: Model, msg: m.CancelSearch) -> None:
    model.view_mode = ViewMode.SESSION_LIST
    model.search_query = SearchQuery(case_sensitive=model.search_query.case_sensitive)
    model.apply_search()


@_handles(m.SearchInput)
def _search_input(model: Model, msg: m.SearchInput) -> None:
    model.search_query = model.search_query.with_text(model.search_query.text + msg.char)
    model.apply_search()


@_handles(m.SearchBackspace)
def _search_backspace(model: Model, msg: m.SearchBackspace) -> None:
    if model.search_query.text:
        model.search_query = model.search_query.with_text(model.search_query.text[:-1])
        model.apply_search()


@_handles(m.ConfirmSearch)
def _confirm_search(model: Model, msg: m.ConfirmSearch) -> None:
    model.view_mode = ViewMode.SESSION_LIST


@_handles(m.ToggleCaseSensitive)
def _toggle_case(model: Model, msg: m.ToggleCaseSensitive) -> None:
    query = model.search_query
    model.search_query = SearchQuery(text=query.text, case_sensitive=not query.case_sensitive)
    if not query.is_empty():
        model.apply_search()


# Filter


@_handles(m.StartFilter)
def _start_filter(model: Model, msg: m.StartFilter) -> None:
    model.view_mode = ViewMode.FILTER
    model.filter_project_input = model.filter_criteria.project or ""
    model.date_preset_index = model.applied_preset_index


@_handles(m.CancelFilter)
def _cancel_filter(model: Model, msg: m.CancelFilter) -> None:
    model.view_mode = ViewMode.SESSION_LIST
    model.date_preset_index = model.applied_preset_index


@_handles(m.ApplyFilter)
def _apply_filter(model: Model, msg: m.ApplyFilter) -> None:
    model.view_mode = ViewMode.SESSION_LIST
    model.apply_filter(msg.now)


@_handles(m.ClearFilter)
def _clear_filter(model: Model, msg: m.ClearFilter) -> None:
    if model.view_mode is ViewMode.FILTER:
        model.view_mode = ViewMode.SESSION_LIST
        model.clear_search_filter()
    elif model.is_filtered or not model.search_query.is_empty():
        model.clear_search_filter()
    else:
        model.should_quit = True


@_handles(m.FilterNextField)
def _filter_next_field(model: Model, msg: m.FilterNextField) -> None:
    model.filter_field = model.filter_field.next()


@_handles(m.FilterDatePresetNext)
def _preset_next(model: Model, msg: m.FilterDatePresetNext) -> None:
    model.date_preset_index = min(model.date_preset_index + 1, len(DATE_PRESETS) - 1)


@_handles(m.FilterDatePresetPrev)
def _preset_prev(model: Model, msg: m.FilterDatePresetPrev) -> None:
    model.date_preset_index = max(model.date_preset_index - 1, 0)


@_handles(m.FilterProjectInput)
def _filter_project_input(model: Model, msg: m.FilterProjectInput) -> None:
    model.filter_project_input += msg.char


@_handles(m.FilterProjectBackspace)
def _filter_project_backspace(model: Model, msg: m.FilterProjectBackspace) -> None:
    model.filter_project_input = model.filter_project_input[:-1]


# Help


@_handles(m.ShowHelp)
def _show_help(model: Model, msg: m.ShowHelp) -> None:
    # previous_view_mode holds a single mode; help never stacks on an overlay.
    if not (model.view_mode.is_list or model.view_mode is ViewMode.SESSION_DETAIL):
        return
    model.previous_view_mode = model.view_mode
    model.view_mode = ViewMode.HELP


@_handles(m.CloseHelp)
def _close_help(model: Model, msg: m.CloseHelp) -> None:
    if model.view_mode is ViewMode.HELP:
        model.view_mode = model.previous_view_mode


# Export


@_handles(m.StartExport)
def _start_export(model: Model, msg: m.StartExport) -> Optional[m.Command]:
    if model.view_mode is ViewMode.SESSION_DETAIL:
        if model.current_session is not None:
            model.open_export_dialog(return_to=ViewMode.SESSION_DETAIL)
        return None
    if not model.view_mode.is_list:
        return None

    item = model.selected_session()
    if item is None:
        model.error_message = "Select a session to export"
        return None
    # Load first; the dialog opens on SessionLoaded.
    model.pending_export = True
    model.view_mode = ViewMode.SESSION_LIST
    return m.LoadSession(item)


@_handles(m.SelectExportFormat)
def _select_export_format(model: Model, msg: m.SelectExportFormat) -> None:
    if model.export_state() is ExportState.SELECTING:
        model.export_format = msg.format


@_handles(m.ToggleExportFormat)
def _toggle_export_format(model: Model, msg: m.ToggleExportFormat) -> None:
    if model.export_state() is ExportState.SELECTING:
        model.export_format = model.export_format.next()


@_handles(m.ConfirmExport)
def _confirm_export(model: Model, msg: m.ConfirmExport) -> Optional[m.Command]:
    if model.export_state() is not ExportState.SELECTING or model.current_session is None:
        return None
    model.export_status = ExportStatus.exporting()
    return m.RunExport(session=model.current_session, format=model.export_format, directory=model.export_dir)


@_handles(m.CancelExport)
def _cancel_export(model: Model, msg: m.CancelExport) -> None:
    if model.view_mode is not ViewMode.EXPORT:
        return
    model.view_mode = model.previous_view_mode
    model.export_status = None
    if model.view_mode.is_list:
        model.current_session = None


@_handles(m.ExportCompleted)
def _export_completed(model: Model, msg: m.ExportCompleted) -> None:
    if model.export_state() is ExportState.EXPORTING:
        model.export_status = ExportStatus.success(msg.path)


@_handles(m.ExportFailed)
def _export_failed(model: Model, msg: m.ExportFailed) -> None:
    if model.export_state() is ExportState.EXPORTING:
        model.export_status = ExportStatus.failed(msg.reason)


# Errors


@_handles(m.ShowError)
def _show_error(model: Model, msg: m.ShowError) -> None:
    model.error_message = msg.message


@_handles(m.ClearError)
def _clear_error(model: Model, msg: m.ClearError) -> None:
    model.error_message = None


# Tree


@_handles(m.ToggleProject)
def _toggle_project(model: Model, msg: m.ToggleProject) -> None:
    model.toggle_project(msg.project_path)
    model.update_preview()


@_handles(m.ExpandCurrentProject)
def _expand_current(model: Model, msg: m.ExpandCurrentProject) -> None:
    model.expand_current_project()
    model.update_preview()


@_handles(m.CollapseCurrentProject)
def _collapse_current(model: Model, msg: m.CollapseCurrentProject) -> None:
    model.collapse_current_project()
    model.update_preview()


@_handles(m.ExpandAll)
def _expand_all(model: Model, msg: m.ExpandAll) -> None:
    model.expand_all()
    model.update_preview()


@_handles(m.CollapseAll)
def _collapse_all(model: Model, msg: m.CollapseAll) -> None:
    model.collapse_all()
    model.update_preview()
