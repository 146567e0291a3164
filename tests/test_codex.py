import tempfile
import unittest
from pathlib import Path

from histree.data.codex import backfill_models, build_codex_index, load_codex_session
from histree.data.models import Entry, Message, Role, TextBlock
from histree.data.records import CodexLineRecord, classify_codex_line
from tests.fixtures import write_jsonl

ROLLOUT = [
    {"timestamp": "2025-02-01T09:00:00Z", "type": "session_meta", "payload": {"id": "cx-1", "cwd": "/work/app"}},
    {
        "timestamp": "2025-02-01T09:00:01Z",
        "type": "response_item",
        "payload": {"type": "message", "role": "user", "content": [{"type": "input_text", "text": "Fix the bug"}]},
    },
    {
        "timestamp": "2025-02-01T09:00:02Z",
        "type": "response_item",
        "payload": {"type": "message", "role": "assistant", "content": [{"type": "output_text", "text": "Looking"}]},
    },
    {"type": "turn_context", "payload": {"model": "gpt-5"}},
    {
        "type": "event_msg",
        "payload": {
            "type": "token_count",
            "info": {"last_token_usage": {"input_tokens": 100, "cached_input_tokens": 40, "output_tokens": 10}},
        },
    },
    {
        "type": "event_msg",
        "payload": {"type": "token_count", "info": {"last_token_usage": {"input_tokens": 999, "output_tokens": 999}}},
    },
    {
        "timestamp": "2025-02-01T09:05:00Z",
        "type": "response_item",
        "payload": {"type": "message", "role": "assistant", "content": [{"type": "output_text", "text": "Done"}]},
    },
    {
        "type": "response_item",
        "payload": {"type": "message", "role": "developer", "content": [{"type": "input_text", "text": "rules"}]},
    },
    {"type": "response_item", "payload": {"type": "function_call", "name": "shell"}},
    {
        "type": "response_item",
        "payload": {
            "type": "message",
            "role": "user",
            "content": [{"type": "input_text", "text": "<command-name>/x</command-name>"}],
        },
    },
    "{broken",
]


def _assistant(model=None):
    return Entry(role=Role.ASSISTANT, message=Message(role="assistant", content=[TextBlock("x")], model=model))


class TestClassifyCodexLine(unittest.TestCase):
    def test_explicit_type_wins(self):
        line = classify_codex_line(CodexLineRecord.model_validate({"type": "event_msg", "payload": {"id": "x"}}))
        self.assertEqual(line.line_type, "event_msg")

    def test_untyped_line_with_id_is_session_meta(self):
        line = classify_codex_line(CodexLineRecord.model_validate({"id": "legacy", "cwd": "/w"}))
        self.assertEqual(line.line_type, "session_meta")
        self.assertEqual(line.payload["cwd"], "/w")

    def test_untyped_line_without_id_is_unknown(self):
        line = classify_codex_line(CodexLineRecord.model_validate({"record_type": "state"}))
        self.assertEqual(line.line_type, "unknown")


class TestLoadCodexSession(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = write_jsonl(Path(self._tmp.name) / "rollout.jsonl", ROLLOUT)
        with self.assertLogs("histree.data.history", level="WARNING"):
            self.session = load_codex_session(self.path, "cx-1", "/work/app")

    def tearDown(self):
        self._tmp.cleanup()

    def test_only_user_and_assistant_text_messages_become_entries(self):
        texts = [entry.display_text() for entry in self.session.entries]
        self.assertEqual(texts, ["Fix the bug", "Looking", "Done"])

    def test_first_token_count_attaches_to_last_assistant(self):
        usage = self.session.entries[1].message.usage
        self.assertEqual(usage.input_tokens, 60)
        self.assertEqual(usage.cache_read_input_tokens, 40)
        self.assertEqual(usage.output_tokens, 10)
        self.assertIsNone(self.session.entries[2].message.usage)

    def test_models_are_backfilled(self):
        models = [entry.message.model for entry in self.session.entries if entry.is_assistant]
        self.assertEqual(models, ["gpt-5", "gpt-5"])


class TestBackfillModels(unittest.TestCase):
    def test_forward_then_backward(self):
        entries = [_assistant(), _assistant("a"), _assistant(), _assistant("b"), _assistant()]
        backfill_models(entries)
        self.assertEqual([e.message.model for e in entries], ["a", "a", "a", "b", "b"])

    def test_no_models_anywhere(self):
        entries = [_assistant(), _assistant()]
        backfill_models(entries)
        self.assertEqual([e.message.model for e in entries], [None, None])


class TestBuildCodexIndex(unittest.TestCase):
    def test_indexes_nested_rollouts(self):
        with tempfile.TemporaryDirectory() as tmp:
            sessions = Path(tmp) / "sessions"
            write_jsonl(sessions / "2025" / "02" / "01" / "rollout-a.jsonl", ROLLOUT[:2])
            write_jsonl(sessions / "2025" / "02" / "02" / "rollout-b.jsonl", [ROLLOUT[1]])
            (sessions / "notes.txt").write_text("ignored")

            with self.assertLogs("histree.data.codex", level="WARNING"):
                index = build_codex_index(sessions)

        self.assertEqual(list(index), ["cx-1"])
        self.assertEqual(index["cx-1"].cwd, "/work/app")
        self.assertEqual(index["cx-1"].path.name, "rollout-a.jsonl")

    def test_missing_directory(self):
        self.assertEqual(build_codex_index(Path("/nonexistent/histree/sessions")), {})


if __name__ == "__main__":
    unittest.main()
