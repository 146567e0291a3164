"""Search and filter for the session list."""

from histree.search.criteria import DATE_PRESETS, DatePreset, DateRange, FilterCriteria, FilterField, SearchQuery
from histree.search.engine import filter_sessions, search, search_and_filter

__all__ = [
    "DATE_PRESETS",
    "DatePreset",
    "DateRange",
    "FilterCriteria",
    "FilterField",
    "SearchQuery",
    "filter_sessions",
    "search",
    "search_and_filter",
]
