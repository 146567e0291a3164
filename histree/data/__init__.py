"""Data layer: history ingestion, transcript loading and cost accounting."""

from histree.data.billing import Currency, estimate_cost_usd, summarize_cost, summarize_usage
from histree.data.history import count_history, latest_per_session, read_claude_history, read_codex_history
from histree.data.models import Entry, HistoryItem, Role, Session, SessionListItem, SessionSource, Usage
from histree.data.sources import SessionSources

__all__ = [
    "Currency",
    "Entry",
    "HistoryItem",
    "Role",
    "Session",
    "SessionListItem",
    "SessionSource",
    "SessionSources",
    "Usage",
    "count_history",
    "estimate_cost_usd",
    "latest_per_session",
    "read_claude_history",
    "read_codex_history",
    "summarize_cost",
    "summarize_usage",
]
