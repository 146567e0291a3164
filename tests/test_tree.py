import unittest

from histree.data.models import HistoryItem, SessionSource
from histree.state.tree import (
    TreeNodeKind,
    build_project_groups,
    clamp_index,
    filter_project_groups,
    flatten_sessions,
    flatten_tree,
)
from tests.fixtures import make_groups


def _row(sid, ts, project, display="", source=SessionSource.CLAUDE):
    return HistoryItem(session_id=sid, project_path=project, display=display, timestamp_ms=ts, source=source)


class TestBuildProjectGroups(unittest.TestCase):
    def test_groups_ordered_by_newest_session(self):
        groups = build_project_groups([
            _row("a1", 100, "/p/alpha"),
            _row("b1", 300, "/p/beta"),
            _row("a2", 200, "/p/alpha"),
            _row("a1", 400, "/p/alpha", "latest prompt"),
        ])
        self.assertEqual([g.project_path for g in groups], ["/p/alpha", "/p/beta"])
        self.assertEqual([s.session_id for s in groups[0].sessions], ["a1", "a2"])
        self.assertEqual(groups[0].sessions[0].latest_user_message, "latest prompt")

    def test_session_appears_once(self):
        groups = build_project_groups([_row("x", 1, "/p/a"), _row("x", 2, "/p/b")])
        self.assertEqual(sum(len(g.sessions) for g in groups), 1)
        self.assertEqual(groups[0].project_path, "/p/b")


class TestFlattenTree(unittest.TestCase):
    def setUp(self):
        self.groups = make_groups()

    def test_collapsed_shows_only_projects(self):
        rows = flatten_tree(self.groups, set())
        self.assertEqual(len(rows), 3)
        self.assertTrue(all(row.kind is TreeNodeKind.PROJECT for row in rows))
        self.assertEqual(rows[2].child_count, 3)

    def test_row_count_is_projects_plus_expanded_sessions(self):
        rows = flatten_tree(self.groups, {"/work/alpha", "/work/gamma"})
        self.assertEqual(len(rows), 3 + 2 + 3)
        self.assertEqual([row.kind for row in rows[:4]], [
            TreeNodeKind.PROJECT, TreeNodeKind.SESSION, TreeNodeKind.SESSION, TreeNodeKind.PROJECT,
        ])
        self.assertEqual(rows[1].session.session_id, "a1")


class TestFilterProjectGroups(unittest.TestCase):
    def test_keeps_group_order_and_drops_empty_groups(self):
        groups = make_groups()
        sessions = flatten_sessions(groups)
        filtered = filter_project_groups(groups, sessions, [5, 0])
        self.assertEqual([g.project_name for g in filtered], ["alpha", "gamma"])
        self.assertEqual([s.session_id for s in filtered[1].sessions], ["g3"])


class TestClampIndex(unittest.TestCase):
    def test_clamp(self):
        self.assertEqual(clamp_index(5, 3), 2)
        self.assertEqual(clamp_index(-1, 3), 0)
        self.assertEqual(clamp_index(4, 0), 0)


if __name__ == "__main__":
    unittest.main()
