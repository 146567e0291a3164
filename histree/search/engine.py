"""Pure search/filter functions over the flat session list.

All three return indices into ``sessions`` in their original order and are
called on every keystroke, so each is a single linear pass.
"""

from __future__ import annotations

from typing import List, Sequence

from histree.data.models import SessionListItem
from histree.search.criteria import FilterCriteria, SearchQuery


def _matches_query(session: SessionListItem, query: SearchQuery) -> bool:
    return query.matches(session.project_name) or query.matches(session.latest_user_message)


def _matches_criteria(session: SessionListItem, criteria: FilterCriteria) -> bool:
    if criteria.date_range.is_set() and not criteria.date_range.contains(session.datetime):
        return False
    return criteria.matches_project(session.project_name)


def search(sessions: Sequence[SessionListItem], query: SearchQuery) -> List[int]:
    if query.is_empty():
        return list(range(len(sessions)))
    return [i for i, session in enumerate(sessions) if _matches_query(session, query)]


def filter_sessions(sessions: Sequence[SessionListItem], criteria: FilterCriteria) -> List[int]:
    if not criteria.is_set():
        return list(range(len(sessions)))
    return [i for i, session in enumerate(sessions) if _matches_criteria(session, criteria)]


def search_and_filter(
    sessions: Sequence[SessionListItem],
    query: SearchQuery,
    criteria: FilterCriteria,
) -> List[int]:
    check_query = not query.is_empty()
    check_criteria = criteria.is_set()
    return [
        i
        for i, session in enumerate(sessions)
        if (not check_query or _matches_query(session, query))
        and (not check_criteria or _matches_criteria(session, criteria))
    ]
