import os
import subprocess
import sys
import unittest
from pathlib import Path
import tempfile


REPO_ROOT = Path(__file__).resolve().parents[1]


def _run(*args: str) -> subprocess.CompletedProcess:
    env = os.environ.copy()
    env.pop("BOOTSTRAP_CONFIG", None)
    return subprocess.run(
        [sys.executable, str(REPO_ROOT / "bootstrap_cli.py"), *args],
        cwd=str(REPO_ROOT),
        env=env,
        capture_output=True,
        text=True,
        timeout=120,
    )


class TestCliSmoke(unittest.TestCase):
    def test_plan_all_prints_ordered_plan(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            res = _run("--mode", "plan", td, "--all")
            self.assertEqual(0, res.returncode, res.stderr)
            self.assertIn("bootstrap-project", res.stdout)
            self.assertLess(res.stdout.index("bootstrap-project"), res.stdout.index("bootstrap-ci-cd"))
            self.assertNotIn("bootstrap-mysql", res.stdout)

    def test_unknown_script_is_a_configuration_error(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            res = _run("--mode", "plan", td, "--script", "bootstrap-nope")
            self.assertEqual(2, res.returncode)
            self.assertIn("bootstrap-nope", res.stderr)

    def test_conflicting_selection_is_a_configuration_error(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            res = _run(td, "--script", "bootstrap-postgres,bootstrap-mysql")
            self.assertEqual(2, res.returncode)
            self.assertFalse((Path(td) / "docker").exists())

    def test_missing_project_root_is_fatal(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            res = _run(str(Path(td) / "missing"), "--all")
            self.assertEqual(1, res.returncode)
            self.assertIn("does not exist", res.stderr)

    def test_nothing_selected_is_success(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            res = _run(td)
            self.assertEqual(0, res.returncode, res.stderr)
            self.assertIn("Nothing to do", res.stdout)
            self.assertEqual([], list(Path(td).iterdir()))


if __name__ == "__main__":
    unittest.main()
