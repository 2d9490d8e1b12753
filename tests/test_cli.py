import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from posindex.cli import main
from posindex.storage import load_index


class TestCli(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.index_path = str(Path(self._tmp.name) / "docs.json")

    def tearDown(self):
        self._tmp.cleanup()

    def run_cli(self, *argv) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            try:
                code = main(list(argv))
            except SystemExit as e:
                code = e.code
        return code, out.getvalue(), err.getvalue()

    def index_scenario(self) -> None:
        for doc_id, text in (
            ("1", "here is some content"),
            ("2", "here is some more content"),
            ("3", "here is even more content"),
        ):
            code, _, _ = self.run_cli("index", self.index_path, doc_id, text)
            self.assertEqual(code, 0)

    def test_index_creates_file(self):
        code, out, _ = self.run_cli("index", self.index_path, "1", "hello world")
        self.assertEqual(code, 0)
        self.assertIn("Indexed document 1", out)
        self.assertEqual(load_index(self.index_path).search("hello"), [1])

    def test_search_scenario(self):
        self.index_scenario()
        for query, expected in (
            ("is some", "[1, 2]"),
            ("here", "[1, 2, 3]"),
            ("more content", "[2, 3]"),
            ("zzz", "[]"),
            ("", "[]"),
        ):
            code, out, _ = self.run_cli("search", self.index_path, query)
            self.assertEqual(code, 0)
            self.assertEqual(out.strip(), expected, query)

    def test_reindex_through_cli(self):
        self.index_scenario()
        self.run_cli("index", self.index_path, "1", "brand new")
        _, out, _ = self.run_cli("search", self.index_path, "some")
        self.assertEqual(out.strip(), "[2]")

    def test_index_html(self):
        code, _, _ = self.run_cli(
            "index", self.index_path, "4", "<p>Hello <i>there</i></p>", "--html"
        )
        self.assertEqual(code, 0)
        _, out, _ = self.run_cli("search", self.index_path, "hello there")
        self.assertEqual(out.strip(), "[4]")

    def test_term_list_size(self):
        self.run_cli("index", self.index_path, "1", "ab cde ab")
        code, out, _ = self.run_cli("term_list_size", self.index_path)
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "5")

    def test_posting_list_sizes(self):
        self.run_cli("index", self.index_path, "1", "b a b")
        code, out, _ = self.run_cli("posting_list_sizes", self.index_path)
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "[24, 32]")

    def test_top_posting_lists(self):
        self.index_scenario()
        code, out, _ = self.run_cli("top_posting_lists", self.index_path, "-n", "2")
        self.assertEqual(code, 0)
        lines = out.strip().splitlines()
        self.assertEqual(lines[0], "Top 2 posting lists:")
        self.assertEqual(len(lines), 3)
        self.assertTrue(lines[1].startswith("content: "))

    def test_missing_index_for_read_commands(self):
        for command in (
            ["search", self.index_path, "x"],
            ["term_list_size", self.index_path],
            ["posting_list_sizes", self.index_path],
            ["top_posting_lists", self.index_path],
        ):
            with self.subTest(command=command[0]):
                code, out, err = self.run_cli(*command)
                self.assertEqual(code, 1)
                self.assertEqual(out, "")
                self.assertIn("Error", err)
        self.assertFalse(Path(self.index_path).exists())

    def test_malformed_index_file(self):
        Path(self.index_path).write_text("{not json", encoding="utf-8")
        code, _, err = self.run_cli("search", self.index_path, "x")
        self.assertEqual(code, 1)
        self.assertIn("Error", err)
        code, _, _ = self.run_cli("index", self.index_path, "1", "text")
        self.assertEqual(code, 1)
        self.assertEqual(Path(self.index_path).read_text(encoding="utf-8"), "{not json")

    def test_invalid_document_id(self):
        for bad in ("abc", "-3", "1.5"):
            with self.subTest(doc_id=bad):
                code, _, _ = self.run_cli("index", self.index_path, bad, "text")
                self.assertNotEqual(code, 0)
        self.assertFalse(Path(self.index_path).exists())

    def test_index_rejects_text_that_is_not_utf8(self):
        code, out, err = self.run_cli("index", self.index_path, "1", "ok \udcff")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("Error", err)
        self.assertFalse(Path(self.index_path).exists())

    def test_nested_json_index_file(self):
        Path(self.index_path).write_text("[" * 200000 + "]" * 200000, encoding="utf-8")
        code, _, err = self.run_cli("search", self.index_path, "x")
        self.assertEqual(code, 1)
        self.assertIn("Error", err)

    def test_terms_starting_with_dash(self):
        self.run_cli("index", self.index_path, "1", "keep -foo here")
        self.run_cli("index", self.index_path, "2", "keep")
        code, out, _ = self.run_cli("search", self.index_path, "--", "-foo")
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "[1]")
        code, _, _ = self.run_cli("index", self.index_path, "3", "--", "-foo")
        self.assertEqual(code, 0)
        _, out, _ = self.run_cli("search", self.index_path, "--", "-foo keep")
        self.assertEqual(out.strip(), "[1]")
        _, out, _ = self.run_cli("search", self.index_path, "--", "-foo")
        self.assertEqual(out.strip(), "[1, 3]")

    def test_missing_arguments(self):
        code, _, _ = self.run_cli("index", self.index_path, "1")
        self.assertNotEqual(code, 0)
        code, _, _ = self.run_cli("search", self.index_path)
        self.assertNotEqual(code, 0)
        code, _, _ = self.run_cli()
        self.assertNotEqual(code, 0)


if __name__ == "__main__":
    unittest.main()
