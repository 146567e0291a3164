import unittest
from datetime import timedelta

from histree.search import (
    DatePreset,
    DateRange,
    FilterCriteria,
    SearchQuery,
    filter_sessions,
    search,
    search_and_filter,
)
from histree.state.tree import flatten_sessions
from tests.fixtures import BASE_TIME, make_groups


class SearchTestCase(unittest.TestCase):
    def setUp(self):
        # a1 a2 b1 g1 g2 g3
        self.sessions = flatten_sessions(make_groups())


class TestSearch(SearchTestCase):
    def test_empty_query_matches_everything(self):
        self.assertEqual(search(self.sessions, SearchQuery()), list(range(6)))

    def test_case_insensitive_by_default(self):
        self.assertEqual(search(self.sessions, SearchQuery("login")), [0, 4])

    def test_case_sensitive(self):
        self.assertEqual(search(self.sessions, SearchQuery("LOGIN", case_sensitive=True)), [4])

    def test_matches_project_name(self):
        self.assertEqual(search(self.sessions, SearchQuery("BETA")), [2])


class TestFilter(SearchTestCase):
    def test_unset_criteria_matches_everything(self):
        self.assertEqual(filter_sessions(self.sessions, FilterCriteria()), list(range(6)))

    def test_date_range_is_inclusive(self):
        exactly_two_hours = BASE_TIME - timedelta(hours=2)
        criteria = FilterCriteria(date_range=DateRange(start=exactly_two_hours))
        self.assertEqual(filter_sessions(self.sessions, criteria), [0, 2])

    def test_project_substring(self):
        self.assertEqual(filter_sessions(self.sessions, FilterCriteria(project="GAM")), [3, 4, 5])

    def test_search_and_filter_is_an_intersection(self):
        criteria = FilterCriteria(project="alpha")
        self.assertEqual(search_and_filter(self.sessions, SearchQuery("login"), criteria), [0])
        self.assertEqual(search_and_filter(self.sessions, SearchQuery(), criteria), [0, 1])


class TestDatePresets(unittest.TestCase):
    def test_today_starts_at_midnight(self):
        now = BASE_TIME
        date_range = DatePreset.TODAY.to_range(now)
        self.assertEqual(date_range.start, now.replace(hour=0, minute=0))
        self.assertEqual(date_range.end, now)

    def test_all_is_unbounded(self):
        self.assertFalse(DatePreset.ALL.to_range(BASE_TIME).is_set())

    def test_last_week(self):
        date_range = DatePreset.LAST_WEEK.to_range(BASE_TIME)
        self.assertTrue(date_range.contains(BASE_TIME - timedelta(days=7)))
        self.assertFalse(date_range.contains(BASE_TIME - timedelta(days=7, seconds=1)))


if __name__ == "__main__":
    unittest.main()
