"""Run the commands the reducer emits and turn their outcomes into messages.

These are plain functions so they can be exercised without a terminal;
``app.py`` decides which thread they run on.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from histree.data.models import Session, SessionListItem
from histree.data.sources import SessionSources
from histree.errors import ExportError, HistreeError
from histree.export import ExportFormat, export_session
from histree.state.messages import (
    ExportCompleted,
    ExportFailed,
    IndexLoaded,
    SessionLoaded,
    SessionLoadFailed,
)
from histree.state.tree import build_project_groups

logger = logging.getLogger(__name__)


def load_index(sources: SessionSources) -> IndexLoaded:
    return IndexLoaded(groups=build_project_groups(sources.load_history()))


def load_session(sources: SessionSources, item: SessionListItem) -> Union[SessionLoaded, SessionLoadFailed]:
    try:
        session = sources.load_session(item)
    except HistreeError as e:
        logger.warning("Could not load session %s: %s", item.session_id, e)
        return SessionLoadFailed(reason=e.user_message())
    except OSError as e:
        logger.warning("Could not read session %s: %s", item.session_id, e)
        return SessionLoadFailed(reason=f"Could not read session {item.session_id}: {e}")
    return SessionLoaded(session=session)


def run_export(session: Session, fmt: ExportFormat, directory: Path) -> Union[ExportCompleted, ExportFailed]:
    """Export one session. Failures come back as ExportFailed, never as an exception."""
    try:
        path = export_session(session, fmt, directory)
    except ExportError as e:
        logger.warning("Export of %s failed: %s", session.id, e)
        return ExportFailed(reason=str(e))
    except (OSError, ValueError) as e:
        logger.exception("Export of %s failed", session.id)
        return ExportFailed(reason=f"Export failed: {e}")
    return ExportCompleted(path=path)
