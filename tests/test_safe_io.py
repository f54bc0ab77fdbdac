import os
import stat
import tempfile
import unittest
from pathlib import Path

from scaffold_core.io.fs import copy_preserving, content_matches, read_json, write_json_atomic, write_text_atomic


class TestSafeIO(unittest.TestCase):
    def test_write_json_is_atomic_and_cleans_temp(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            out_dir = root / "out"
            out_path = out_dir / "state.json"

            payload = {"a": 1, "b": True, "c": None, "nested": {"x": "y"}}
            write_json_atomic(out_path, payload)

            # File written and readable
            self.assertTrue(out_path.exists())
            self.assertEqual(payload, read_json(out_path))

            # No temp files left behind on success
            tmp_files = list(out_dir.glob("*.tmp"))
            self.assertEqual([], tmp_files)

    def test_write_text_keeps_line_endings_and_mode(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "hook.sh"
            p.write_text("old", encoding="utf-8")
            os.chmod(p, 0o755)

            write_text_atomic(p, "a\r\nb\n")

            self.assertEqual(b"a\r\nb\n", p.read_bytes())
            self.assertTrue(p.stat().st_mode & stat.S_IXUSR)
            self.assertTrue(content_matches(p, "a\r\nb\n"))
            self.assertFalse(content_matches(p, "a\nb\n"))

    def test_copy_preserving_never_overwrites(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            (root / "src.txt").write_text("one", encoding="utf-8")
            (root / "dst.txt").write_text("two", encoding="utf-8")

            with self.assertRaises(FileExistsError):
                copy_preserving(root / "src.txt", root / "dst.txt")
            self.assertEqual("two", (root / "dst.txt").read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
