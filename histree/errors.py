"""Exception types shared by the data, export and TUI layers."""

from __future__ import annotations


class HistreeError(Exception):
    """Base class for all histree errors."""

    prefix = "Error"

    def user_message(self) -> str:
        """Return a one-line message suitable for the status bar or stderr."""
        return f"{self.prefix}: {self}"


class ConfigError(HistreeError):
    """No usable base directory was found. Fatal before the UI starts."""

    prefix = "Configuration error"


class SessionNotFoundError(HistreeError):
    """A transcript file referenced by the index no longer exists."""

    prefix = "Session not found"


class ExportError(HistreeError):
    """Export directory missing, read-only, or the write failed."""

    prefix = "Export failed"


class TerminalError(HistreeError):
    """Curses setup or teardown failed."""

    prefix = "Terminal error"
