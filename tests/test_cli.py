import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from cli import main as cli_main
from docrag.config import Config
from docrag.pipeline import RagPipeline
from docrag.store import SearchHit

from tests.fakes import FakeEmbedder, FakeRunner, FakeStore


def _run(argv, pipeline=None):
    out, err = io.StringIO(), io.StringIO()
    args = cli_main.build_parser().parse_args(argv)
    with mock.patch.object(cli_main, "build_pipeline", return_value=pipeline) as bp, \
            mock.patch.object(cli_main, "load_config", return_value=Config()), \
            redirect_stdout(out), redirect_stderr(err):
        code = args.func(args)
    return code, out.getvalue(), err.getvalue(), bp


class TestCli(unittest.TestCase):
    def setUp(self):
        self.store = FakeStore(hits=[SearchHit(id="notes.txt_chunk_1", score=0.8, text="Stacks are LIFO.")])
        self.pipe = RagPipeline(Config(), FakeEmbedder(), self.store, FakeRunner())

    def test_add_text_file(self):
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "notes.txt"
            p.write_text("A stack is LIFO.\n\nA queue is FIFO.", encoding="utf-8")
            code, out, _, _ = _run(["add", str(p)], self.pipe)
            self.assertTrue(p.exists())
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual(data["action"], "ingest")
        self.assertEqual(data["totalChunks"], 1)
        self.assertIn("notes.txt_chunk_1", self.store.records)

    def test_add_remove_flag_deletes_file(self):
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "upload.md"
            p.write_text("# Title\n\nBody.", encoding="utf-8")
            code, _, _, _ = _run(["add", str(p), "--name", "guide.md", "--remove"], self.pipe)
            self.assertEqual(code, 0)
            self.assertFalse(p.exists())
        self.assertIn("guide.md_chunk_1", self.store.records)

    def test_add_rejects_bad_input(self):
        code, _, err, bp = _run(["add", "/nonexistent/file.txt"], self.pipe)
        self.assertEqual(code, 2)
        self.assertIn("file not found", err)
        bp.assert_not_called()

        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "image.png"
            p.write_bytes(b"\x89PNG")
            code, _, err, bp = _run(["add", str(p)], self.pipe)
        self.assertEqual(code, 2)
        self.assertIn("Unsupported file type", json.loads(err)["error"])
        bp.assert_not_called()

    def test_add_too_large_exits_2(self):
        pipe = RagPipeline(Config(max_file_size=8), FakeEmbedder(), self.store, None)
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "notes.txt"
            p.write_text("more than eight bytes", encoding="utf-8")
            code, _, err, _ = _run(["add", str(p)], pipe)
            self.assertTrue(p.exists())
        self.assertEqual(code, 2)
        self.assertIn("too large", json.loads(err)["error"])
        self.assertEqual(self.store.records, {})

    def test_ask(self):
        code, out, _, bp = _run(["ask", "What is a stack?"], self.pipe)
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual(data["answer"], "Stacks are LIFO (Source 1).")
        self.assertEqual(data["sources"][0]["id"], "notes.txt_chunk_1")
        self.assertEqual(data["tokensUsed"], 42)
        bp.assert_called_once()
        self.assertTrue(bp.call_args.kwargs["with_generator"])

    def test_ask_too_short(self):
        code, _, err, bp = _run(["ask", "hm"], self.pipe)
        self.assertEqual(code, 2)
        self.assertIn("too short", err)
        bp.assert_not_called()

    def test_search_and_delete(self):
        code, out, _, _ = _run(["search", "stack", "--k", "2"], self.pipe)
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out)["results"][0]["score"], 0.8)

        code, out, _, _ = _run(["delete", "--id", "a", "b"], self.pipe)
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out)["deleted"], 2)
        self.assertEqual(self.store.deleted, ["a", "b"])

    def test_store_failure_exits_1(self):
        pipe = RagPipeline(Config(), FakeEmbedder(), FakeStore(fail_at=1), None)
        code, _, err, _ = _run(["upsert", "--id", "x", "--text", "hello"], pipe)
        self.assertEqual(code, 1)
        self.assertEqual(json.loads(err)["action"], "upsert")

    def test_stats(self):
        code, out, _, _ = _run(["stats"], self.pipe)
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out)["collection"]["status"], "green")


if __name__ == "__main__":
    unittest.main()
