"""Write an export to disk without overwriting anything."""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from histree.data.models import Session
from histree.errors import ExportError
from histree.export.formats import ExportFormat, generate_filename, render

logger = logging.getLogger(__name__)

MAX_SUFFIX = 999
CREATE_ATTEMPTS = 5


def unique_path(base: Path) -> Path:
    """Return ``base`` or the first free ``<stem>_<n><suffix>`` sibling.

    After ``MAX_SUFFIX`` taken names, fall back to a Unix-seconds suffix.
    """
    if not base.exists():
        return base

    for n in range(1, MAX_SUFFIX + 1):
        candidate = base.with_name(f"{base.stem}_{n}{base.suffix}")
        if not candidate.exists():
            return candidate

    return base.with_name(f"{base.stem}_{int(time.time())}{base.suffix}")


def write_to_file(content: str, filename: str, directory: Path) -> Path:
    """Write ``content`` under ``directory`` and return the absolute path written.

    Raises:
        ExportError: directory missing or not writable, or the write failed.
    """
    if not directory.is_dir():
        raise ExportError(f"Export directory does not exist: {directory}")
    if not os.access(directory, os.W_OK):
        raise ExportError(f"Export directory is not writable: {directory}")

    for _ in range(CREATE_ATTEMPTS):
        path = unique_path(directory / filename)
        try:
            # "x" never truncates an existing file
            with open(path, "x", encoding="utf-8") as f:
                f.write(content)
        except FileExistsError:
            logger.debug("%s appeared before it could be created, retrying", path)
            continue
        except OSError as e:
            raise ExportError(f"Could not write {path}: {e}") from e
        return path.resolve()
    raise ExportError(f"Could not find a free file name for {filename} in {directory}")


def export_session(session: Session, fmt: ExportFormat, directory: Path) -> Path:
    """Render and write one session. Raises ExportError."""
    path = write_to_file(render(session, fmt), generate_filename(session, fmt), directory)
    logger.info("Exported %s to %s", session.id, path)
    return path
