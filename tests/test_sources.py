import tempfile
import unittest
from pathlib import Path

from histree.data.models import SessionSource
from histree.data.sources import SessionSources
from histree.errors import SessionNotFoundError
from histree.state.tree import build_project_groups, to_list_item
from tests.fixtures import write_jsonl


class TestSessionSources(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        root = Path(self._tmp.name)
        claude_dir = root / "claude"
        codex_dir = root / "codex"

        write_jsonl(claude_dir / "history.jsonl", [
            {"display": "first", "timestamp": 1_700_000_000_000, "project": "/work/my_app", "sessionId": "cl-1"},
            {"display": "second", "timestamp": 1_700_000_100_000, "project": "/work/my_app", "sessionId": "cl-1"},
        ])
        write_jsonl(claude_dir / "projects" / "-work-my-app" / "cl-1.jsonl", [
            {"type": "user", "timestamp": "2023-11-14T22:13:20Z", "message": {"role": "user", "content": "first"}},
        ])
        write_jsonl(codex_dir / "history.jsonl", [
            {"session_id": "cx-1", "ts": 1_700_000_200, "text": "codex prompt"},
            {"session_id": "cx-orphan", "ts": 1_699_000_000, "text": "no rollout"},
        ])
        write_jsonl(codex_dir / "sessions" / "2023" / "11" / "14" / "rollout.jsonl", [
            {"type": "session_meta", "payload": {"id": "cx-1", "cwd": "/work/service"}},
            {
                "type": "response_item",
                "payload": {"type": "message", "role": "user", "content": [{"type": "input_text", "text": "codex prompt"}]},
            },
        ])
        self.sources = SessionSources.discover(claude_dir, codex_dir)

    def tearDown(self):
        self._tmp.cleanup()

    def test_history_from_both_sources_newest_first(self):
        items = self.sources.load_history()
        self.assertEqual([i.session_id for i in items], ["cx-1", "cl-1", "cl-1", "cx-orphan"])
        self.assertEqual(items[0].project_path, "/work/service")
        self.assertEqual(items[-1].project_path, "Codex")

    def test_groups_keep_latest_prompt(self):
        groups = build_project_groups(self.sources.load_history())
        self.assertEqual([g.project_name for g in groups], ["service", "my_app", "Codex"])
        self.assertEqual(groups[1].sessions[0].latest_user_message, "second")

    def test_load_sessions_from_each_source(self):
        items = [to_list_item(item) for item in self.sources.load_history()]
        codex = self.sources.load_session(items[0])
        claude = self.sources.load_session(items[1])
        self.assertEqual(codex.entries[0].display_text(), "codex prompt")
        self.assertEqual(claude.entries[0].display_text(), "first")
        self.assertIs(items[0].source, SessionSource.CODEX)

    def test_unindexed_codex_session(self):
        items = [to_list_item(item) for item in self.sources.load_history()]
        with self.assertRaises(SessionNotFoundError):
            self.sources.load_session(items[-1])


if __name__ == "__main__":
    unittest.main()
