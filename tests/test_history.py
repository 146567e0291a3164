import tempfile
import unittest
from pathlib import Path

from histree.commands.count import format_stats
from histree.data.history import (
    count_history,
    latest_per_session,
    read_claude_history,
    read_codex_history,
)
from histree.data.models import HistoryItem, SessionSource
from tests.fixtures import write_jsonl


def _item(sid, ts, project="/p/a", source=SessionSource.CLAUDE):
    return HistoryItem(session_id=sid, project_path=project, display=sid, timestamp_ms=ts, source=source)


class TestReadClaudeHistory(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "history.jsonl"

    def tearDown(self):
        self._tmp.cleanup()

    def test_bad_lines_are_skipped(self):
        write_jsonl(self.path, [
            {"display": "hi", "timestamp": 1000, "project": "/p/a", "sessionId": "s1"},
            "not json",
            "",
            "[1, 2]",
            {"display": "no session id", "timestamp": 2000},
            {"sessionId": "s2", "timestamp": "yesterday"},
            {"sessionId": "s3", "timestamp": 3000},
        ])
        with self.assertLogs("histree.data.history", level="WARNING") as logs:
            items = read_claude_history(self.path)

        self.assertEqual([item.session_id for item in items], ["s3", "s1"])
        self.assertEqual(items[0].project_path, "unknown")
        self.assertEqual(items[1].display, "hi")
        self.assertEqual(len(logs.records), 4)

    def test_invalid_utf8_line_is_skipped(self):
        with open(self.path, "wb") as f:
            f.write(b'{"sessionId": "s1", "timestamp": 1000}\n')
            f.write(b"\xff\xfe garbage\n")
            f.write(b'{"sessionId": "s2", "timestamp": 2000}\n')
        with self.assertLogs("histree.data.history", level="WARNING") as logs:
            items = read_claude_history(self.path)

        self.assertEqual([item.session_id for item in items], ["s2", "s1"])
        self.assertIn("line 2", logs.output[0])

    def test_missing_file_yields_nothing(self):
        with self.assertLogs("histree.data.history", level="WARNING"):
            self.assertEqual(read_claude_history(self.path), [])


class TestReadCodexHistory(unittest.TestCase):
    def test_project_comes_from_session_index(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = write_jsonl(Path(tmp) / "history.jsonl", [
                {"session_id": "c1", "ts": 10, "text": "hello"},
                {"session_id": "c2", "ts": 5},
            ])
            items = read_codex_history(path, {"c1": "/w/proj"})

        self.assertEqual([item.session_id for item in items], ["c1", "c2"])
        self.assertEqual(items[0].project_path, "/w/proj")
        self.assertEqual(items[0].timestamp_ms, 10000)
        self.assertEqual(items[1].project_path, "Codex")
        self.assertEqual(items[1].display, "")
        self.assertTrue(all(item.source is SessionSource.CODEX for item in items))


class TestLatestPerSession(unittest.TestCase):
    def test_newest_row_wins(self):
        items = [_item("s1", 100), _item("s1", 300), _item("s2", 200)]
        latest = latest_per_session(items)
        self.assertEqual([(i.session_id, i.timestamp_ms) for i in latest], [("s1", 300), ("s2", 200)])

    def test_same_id_in_two_sources_is_two_sessions(self):
        items = [_item("x", 100), _item("x", 200, source=SessionSource.CODEX)]
        self.assertEqual(len(latest_per_session(items)), 2)


class TestCountHistory(unittest.TestCase):
    def test_counts(self):
        items = [_item("s1", 1, "/p/a"), _item("s1", 2, "/p/a"), _item("s2", 3, "/p/b")]
        stats = count_history(items)
        self.assertEqual(stats.total_entries, 3)
        self.assertEqual(stats.unique_sessions, 2)
        self.assertEqual(stats.project_count, 2)
        self.assertEqual(stats.top_projects(), [("a", 2), ("b", 1)])

    def test_report_lists_five_projects_and_the_rest(self):
        items = [_item(f"s{n}", n, f"/p/proj{n}") for n in range(7)]
        lines = format_stats(count_history(items))
        self.assertEqual(lines[0], "Total entries: 7")
        self.assertEqual(lines[1], "Unique sessions: 7")
        self.assertEqual(lines[3], "Projects: 7")
        self.assertEqual(len([line for line in lines if line.endswith("entries)")]), 5)
        self.assertEqual(lines[-1], "  ... and 2 more")


if __name__ == "__main__":
    unittest.main()
