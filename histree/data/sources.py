"""Both log trees behind one object: history ingestion and session loading."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from histree.data.codex import CodexSessionInfo, build_codex_index, load_codex_session
from histree.data.history import read_claude_history, read_codex_history
from histree.data.models import HistoryItem, Session, SessionListItem, SessionSource
from histree.data.session import load_claude_session
from histree.errors import SessionNotFoundError
from histree.utils.paths import ClaudePaths, CodexPaths, resolve_paths

logger = logging.getLogger(__name__)


class SessionSources:
    """Read-only access to the Claude Code and Codex data directories.

    Either source may be missing. Ingestion is synchronous and never raises
    for individual bad lines or files.
    """

    def __init__(self, claude: Optional[ClaudePaths] = None, codex: Optional[CodexPaths] = None) -> None:
        self.claude = claude
        self.codex = codex
        self.codex_index: Dict[str, CodexSessionInfo] = {}

    @classmethod
    def discover(cls, claude_dir: Optional[Path] = None, codex_dir: Optional[Path] = None) -> "SessionSources":
        """Resolve base directories. Raises ConfigError when neither exists."""
        claude, codex = resolve_paths(claude_dir, codex_dir)
        return cls(claude=claude, codex=codex)

    def load_history(self) -> List[HistoryItem]:
        """All history rows of both sources, newest first. Rebuilds the Codex index."""
        items: List[HistoryItem] = []

        if self.claude is not None and self.claude.history_exists():
            items.extend(read_claude_history(self.claude.history_file))

        self.codex_index = {}
        if self.codex is not None:
            self.codex_index = build_codex_index(self.codex.sessions_dir)
            if self.codex.history_exists():
                cwd_by_session = {sid: info.cwd for sid, info in self.codex_index.items()}
                items.extend(read_codex_history(self.codex.history_file, cwd_by_session))

        items.sort(key=lambda item: item.timestamp_ms, reverse=True)
        logger.info("Loaded %d history entries (%d codex rollouts indexed)", len(items), len(self.codex_index))
        return items

    def session_path(self, item: SessionListItem) -> Path:
        if item.source is SessionSource.CLAUDE:
            if self.claude is None:
                raise SessionNotFoundError(f"Claude data directory is not available for {item.session_id}")
            return self.claude.session_file(item.project_path, item.session_id)
        info = self.codex_index.get(item.session_id)
        if info is None:
            raise SessionNotFoundError(f"Codex session not found: {item.session_id}")
        return info.path

    def load_session(self, item: SessionListItem) -> Session:
        """Read one session's transcript. Raises SessionNotFoundError."""
        path = self.session_path(item)
        if item.source is SessionSource.CLAUDE:
            return load_claude_session(path, item.session_id, item.project_path)
        return load_codex_session(path, item.session_id, item.project_path)
