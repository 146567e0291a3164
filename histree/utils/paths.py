"""Path utilities for locating Claude Code and Codex data files.

Two directory-naming schemes are involved:

* the reversible form, where ``%``, ``/``, ``.``, ``_`` and ``-`` become
  two-character percent tokens, and
* the lossy form Claude Code uses for ``projects/<slug>/``, where ``/``, ``.``
  and ``_`` all collapse to ``-``. Decoding it is best effort and only used
  as a grouping/display key.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from histree.errors import ConfigError

DEFAULT_CLAUDE_DIR = Path.home() / ".claude"
DEFAULT_CODEX_DIR = Path.home() / ".codex"
HISTORY_FILE = "history.jsonl"

_ENCODE_TABLE = {
    "%": "%25",
    "/": "%2F",
    ".": "%2E",
    "_": "%5F",
    "-": "%2D",
}
_DECODE_TABLE = {token: char for char, token in _ENCODE_TABLE.items()}
_DECODE_PATTERN = re.compile("|".join(re.escape(token) for token in _DECODE_TABLE))


def get_claude_dir() -> Path:
    """Return Claude data dir. Honors CLAUDE_DATA_DIR env var, defaults to ~/.claude/."""
    env = os.environ.get("CLAUDE_DATA_DIR")
    if env:
        return Path(env)
    return DEFAULT_CLAUDE_DIR


def get_codex_dir() -> Path:
    """Return Codex data dir. Honors CODEX_HOME env var, defaults to ~/.codex/."""
    env = os.environ.get("CODEX_HOME")
    if env:
        return Path(env)
    return DEFAULT_CODEX_DIR


def get_export_dir() -> Path:
    """Return the export target. Honors HISTREE_EXPORT_DIR, defaults to the cwd."""
    env = os.environ.get("HISTREE_EXPORT_DIR")
    if env:
        return Path(env)
    return Path.cwd()


def encode_project_path(path: str) -> str:
    """Percent-encode '/', '.', '_', '-' and '%' so the result can be decoded exactly."""
    return "".join(_ENCODE_TABLE.get(char, char) for char in path)


def decode_project_path(encoded: str) -> str:
    """Inverse of encode_project_path()."""
    return _DECODE_PATTERN.sub(lambda match: _DECODE_TABLE[match.group(0)], encoded)


def encode_project_path_for_fs(path: str) -> str:
    """Convert '/Users/foo/my_app.v2' to '-Users-foo-my-app-v2' (Claude Code's directory naming)."""
    return path.replace("/", "-").replace(".", "-").replace("_", "-")


def decode_project_path_from_fs(encoded: str) -> str:
    """Best-effort inverse of encode_project_path_for_fs(). '.' and '_' come back as '/'."""
    if encoded.startswith("-"):
        return "/" + encoded[1:].replace("-", "/")
    return encoded.replace("-", "/")


@dataclass(frozen=True)
class ClaudePaths:
    """Locations inside a Claude Code data directory."""

    base_dir: Path
    history_file: Path
    projects_dir: Path

    @classmethod
    def from_base_dir(cls, base_dir: Path) -> "ClaudePaths":
        if not base_dir.is_dir():
            raise ConfigError(f"Claude directory not found: {base_dir}")
        return cls(
            base_dir=base_dir,
            history_file=base_dir / HISTORY_FILE,
            projects_dir=base_dir / "projects",
        )

    def history_exists(self) -> bool:
        return self.history_file.is_file()

    def session_file(self, project_path: str, session_id: str) -> Path:
        """Return path: <claude_dir>/projects/<slug>/<session_id>.jsonl"""
        slug = encode_project_path_for_fs(project_path)
        return self.projects_dir / slug / f"{session_id}.jsonl"


@dataclass(frozen=True)
class CodexPaths:
    """Locations inside a Codex data directory."""

    base_dir: Path
    history_file: Path
    sessions_dir: Path

    @classmethod
    def from_base_dir(cls, base_dir: Path) -> "CodexPaths":
        if not base_dir.is_dir():
            raise ConfigError(f"Codex directory not found: {base_dir}")
        return cls(
            base_dir=base_dir,
            history_file=base_dir / HISTORY_FILE,
            sessions_dir=base_dir / "sessions",
        )

    def history_exists(self) -> bool:
        return self.history_file.is_file()


def resolve_paths(
    claude_dir: Optional[Path] = None,
    codex_dir: Optional[Path] = None,
) -> Tuple[Optional[ClaudePaths], Optional[CodexPaths]]:
    """Resolve both sources. Either may be absent; both absent is a ConfigError."""
    claude_base = claude_dir if claude_dir is not None else get_claude_dir()
    codex_base = codex_dir if codex_dir is not None else get_codex_dir()

    claude = ClaudePaths.from_base_dir(claude_base) if claude_base.is_dir() else None
    codex = CodexPaths.from_base_dir(codex_base) if codex_base.is_dir() else None

    if claude is None and codex is None:
        raise ConfigError(f"Neither {claude_base} nor {codex_base} exists. Is Claude Code or Codex installed?")
    return claude, codex
