"""Immutable search and filter value objects."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class SearchQuery:
    text: str = ""
    case_sensitive: bool = False

    def is_empty(self) -> bool:
        return not self.text

    def matches(self, target: str) -> bool:
        if not self.text:
            return True
        if self.case_sensitive:
            return self.text in target
        return self.text.lower() in target.lower()

    def with_text(self, text: str) -> "SearchQuery":
        return replace(self, text=text)


@dataclass(frozen=True)
class DateRange:
    """Inclusive range; an unset bound is unbounded."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def is_set(self) -> bool:
        return self.start is not None or self.end is not None

    def contains(self, dt: datetime) -> bool:
        if self.start is not None and dt < self.start:
            return False
        if self.end is not None and dt > self.end:
            return False
        return True


class DatePreset(Enum):
    ALL = "All"
    TODAY = "Today"
    LAST_WEEK = "Last 7 days"
    LAST_MONTH = "Last 30 days"

    def to_range(self, now: datetime) -> DateRange:
        if self is DatePreset.TODAY:
            midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
            return DateRange(start=midnight, end=now)
        if self is DatePreset.LAST_WEEK:
            return DateRange(start=now - timedelta(days=7), end=now)
        if self is DatePreset.LAST_MONTH:
            return DateRange(start=now - timedelta(days=30), end=now)
        return DateRange()


DATE_PRESETS = tuple(DatePreset)


@dataclass(frozen=True)
class FilterCriteria:
    date_range: DateRange = DateRange()
    project: Optional[str] = None

    def is_set(self) -> bool:
        return self.date_range.is_set() or bool(self.project)

    def matches_project(self, name: str) -> bool:
        if not self.project:
            return True
        return self.project.lower() in name.lower()


class FilterField(Enum):
    DATE_RANGE = "date_range"
    PROJECT = "project"

    def next(self) -> "FilterField":
        return FilterField.PROJECT if self is FilterField.DATE_RANGE else FilterField.DATE_RANGE
