"""Session export: Markdown/JSON rendering and collision-safe writing."""

from histree.export.formats import ExportFormat, generate_filename, render, to_json, to_markdown
from histree.export.writer import export_session, unique_path, write_to_file

__all__ = [
    "ExportFormat",
    "export_session",
    "generate_filename",
    "render",
    "to_json",
    "to_markdown",
    "unique_path",
    "write_to_file",
]
