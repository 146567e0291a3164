import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from histree.__main__ import main
from tests.fixtures import write_jsonl


class TestCountSessions(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_prints_counts(self):
        claude = self.root / "claude"
        write_jsonl(claude / "history.jsonl", [
            {"display": "one", "timestamp": 1000, "project": "/p/alpha", "sessionId": "s1"},
            {"display": "two", "timestamp": 2000, "project": "/p/alpha", "sessionId": "s1"},
            {"display": "three", "timestamp": 3000, "project": "/p/beta", "sessionId": "s2"},
        ])
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(["--count-sessions", "--claude-dir", str(claude), "--codex-dir", str(self.root / "none")])
        self.assertEqual(code, 0)
        lines = out.getvalue().splitlines()
        self.assertEqual(lines[:2], ["Total entries: 3", "Unique sessions: 2"])
        self.assertIn("Projects: 2", lines)
        self.assertIn("  alpha (2 entries)", lines)

    def test_missing_directories_fail(self):
        err = io.StringIO()
        with redirect_stderr(err):
            code = main([
                "--count-sessions",
                "--claude-dir", str(self.root / "a"),
                "--codex-dir", str(self.root / "b"),
            ])
        self.assertEqual(code, 1)
        self.assertTrue(err.getvalue().startswith("Error: "))


if __name__ == "__main__":
    unittest.main()
