import shutil
from datetime import datetime
from pathlib import Path

import pytest

from pipeline.execution.record import write_completion_marker
from pipeline.rollback import restore_backup, rollback_script
from scaffold_core.domain.manifest import ScriptManifest
from scaffold_core.errors import FatalError
from scaffold_core.io.layout import ProjectPaths, list_backups


def test_restore_latest_backup_keeps_current_copy(tmp_path: Path) -> None:
    target = tmp_path / "app.yml"
    target.write_text("current\n", encoding="utf-8")
    (tmp_path / "app.yml.backup.20250101000000").write_text("older\n", encoding="utf-8")
    (tmp_path / "app.yml.backup.20250601000000").write_text("newest\n", encoding="utf-8")
    paths = ProjectPaths.for_root(tmp_path)

    used = restore_backup(paths, "app.yml", clock=lambda: datetime(2026, 1, 2, 3, 4, 5))

    assert used.name == "app.yml.backup.20250601000000"
    assert target.read_text(encoding="utf-8") == "newest\n"
    safety = tmp_path / "app.yml.backup.20260102030405"
    assert safety.read_text(encoding="utf-8") == "current\n"
    assert len(list_backups(target)) == 3


def test_backup_counters_order_numerically(tmp_path: Path) -> None:
    target = tmp_path / "app.yml"
    for suffix, text in (("", "v0"), ("-2", "v2"), ("-10", "v10")):
        (tmp_path / f"app.yml.backup.20250101000000{suffix}").write_text(text, encoding="utf-8")
    paths = ProjectPaths.for_root(tmp_path)

    assert [b.name[len("app.yml.backup."):] for b in list_backups(target)] == [
        "20250101000000",
        "20250101000000-2",
        "20250101000000-10",
    ]
    used = restore_backup(paths, "app.yml")

    assert used.name == "app.yml.backup.20250101000000-10"
    assert target.read_text(encoding="utf-8") == "v10"


def test_restore_without_backups_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(FatalError):
        restore_backup(ProjectPaths.for_root(tmp_path), "missing.txt")


@pytest.mark.skipif(shutil.which("rm") is None, reason="rm not available")
def test_rollback_runs_command_and_drops_marker(tmp_path: Path) -> None:
    (tmp_path / "x.yml").write_text("k: v\n", encoding="utf-8")
    paths = ProjectPaths.for_root(tmp_path)
    write_completion_marker(paths, "bootstrap-x")
    manifest = ScriptManifest(name="bootstrap-x", phase=1, creates=("x.yml",), rollback="rm -f x.yml")

    res = rollback_script(paths, manifest, timeout_seconds=30)

    assert res.exit_code == 0 and res.marker_removed
    assert not (tmp_path / "x.yml").exists()
    assert not paths.marker_for("bootstrap-x").exists()


def test_rollback_without_command_only_drops_marker(tmp_path: Path) -> None:
    (tmp_path / "x.yml").write_text("k: v\n", encoding="utf-8")
    paths = ProjectPaths.for_root(tmp_path)
    write_completion_marker(paths, "bootstrap-x")

    res = rollback_script(paths, ScriptManifest(name="bootstrap-x", phase=1))

    assert res.command is None and res.marker_removed
    assert (tmp_path / "x.yml").exists()


def test_rollback_missing_binary_is_fatal(tmp_path: Path) -> None:
    manifest = ScriptManifest(name="bootstrap-x", phase=1, rollback="doesnotexist123 --undo")

    with pytest.raises(FatalError):
        rollback_script(ProjectPaths.for_root(tmp_path), manifest)
