import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from histree.data.models import TextBlock, ThinkingBlock, clean_text
from histree.data.session import load_claude_session, parse_content_block
from histree.errors import SessionNotFoundError
from tests.fixtures import write_jsonl

TRANSCRIPT = [
    {"type": "file-history-snapshot", "snapshot": {"files": []}},
    {
        "type": "user",
        "timestamp": "2025-01-01T10:00:00Z",
        "slug": "happy-otter",
        "message": {"role": "user", "content": "<command-name>/init</command-name>Hello"},
    },
    {
        "type": "assistant",
        "timestamp": "2025-01-01T10:05:00.123Z",
        "message": {
            "role": "assistant",
            "model": "claude-opus-4-5-20251101",
            "content": [
                {"type": "thinking", "thinking": "hmm"},
                {"type": "text", "text": "Hi there"},
                {"type": "something-new"},
            ],
            "usage": {"input_tokens": 10, "output_tokens": 20, "cache_read_input_tokens": 5},
        },
    },
    {"type": "user", "isMeta": True, "message": {"role": "user", "content": "caveat"}},
    {
        "type": "user",
        "timestamp": "2025-01-01T10:06:00Z",
        "message": {"role": "user", "content": [{"type": "tool_result", "tool_use_id": "t1", "content": "ok"}]},
    },
]


class TestLoadClaudeSession(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = write_jsonl(Path(self._tmp.name) / "sid.jsonl", TRANSCRIPT)
        self.session = load_claude_session(self.path, "sid", "/work/alpha")

    def tearDown(self):
        self._tmp.cleanup()

    def test_snapshot_lines_are_skipped(self):
        self.assertEqual(len(self.session.entries), 4)

    def test_metadata(self):
        self.assertEqual(self.session.slug, "happy-otter")
        self.assertEqual(self.session.project_name, "alpha")
        self.assertEqual(self.session.started_at, datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc))
        self.assertEqual(self.session.ended_at, datetime(2025, 1, 1, 10, 6, tzinfo=timezone.utc))

    def test_message_count_excludes_meta_entries(self):
        self.assertEqual(self.session.message_count, 3)
        self.assertEqual(self.session.first_user_message().display_text(), "Hello")

    def test_unknown_blocks_are_dropped(self):
        assistant = self.session.entries[1].message
        self.assertIsInstance(assistant.content[0], ThinkingBlock)
        self.assertIsInstance(assistant.content[1], TextBlock)
        self.assertEqual(len(assistant.content), 2)
        self.assertEqual(assistant.usage.total_input_tokens(), 15)

    def test_display_text_is_cleaned(self):
        texts = [entry.display_text() for entry in self.session.displayable_entries()]
        self.assertEqual(texts, ["Hello", "Hi there"])

    def test_missing_file(self):
        with self.assertRaises(SessionNotFoundError):
            load_claude_session(Path(self._tmp.name) / "gone.jsonl", "gone", "/work/alpha")


class TestContentHelpers(unittest.TestCase):
    def test_clean_text_strips_both_tag_pairs(self):
        text = "<command-message>running</command-message> <command-name>/review</command-name>  do it  "
        self.assertEqual(clean_text(text), "do it")

    def test_clean_text_keeps_unclosed_tag(self):
        self.assertEqual(clean_text("<command-name>oops"), "<command-name>oops")

    def test_parse_content_block_ignores_non_dicts(self):
        self.assertIsNone(parse_content_block("text"))
        self.assertIsNone(parse_content_block({"type": "text", "text": 5}))


if __name__ == "__main__":
    unittest.main()
