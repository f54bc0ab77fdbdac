from datetime import datetime
from pathlib import Path

import pytest

from scaffold_core.artifacts import tracker as tracker_mod
from scaffold_core.artifacts.tracker import ArtifactState, FileOperationTracker, classify
from scaffold_core.domain.report import ExecutionReport, Outcome
from scaffold_core.errors import FatalError, VerificationError
from scaffold_core.io.layout import list_backups

FIXED = datetime(2026, 1, 2, 3, 4, 5)


def _tracker(root: Path, **kw) -> FileOperationTracker:
    return FileOperationTracker(root, ExecutionReport(script="bootstrap-test"), clock=lambda: FIXED, **kw)


def test_absent_artifact_is_created(tmp_path: Path) -> None:
    t = _tracker(tmp_path)
    rec = t.write_file("config/app.yml", "a: 1\n")

    assert rec.outcome == Outcome.CREATED
    assert (tmp_path / "config" / "app.yml").read_text(encoding="utf-8") == "a: 1\n"
    assert t.report.counts() == {"created": 1, "skipped": 0, "backed_up": 0, "warnings": 0}


def test_identical_artifact_is_skipped_without_backup(tmp_path: Path) -> None:
    (tmp_path / "app.yml").write_text("a: 1\n", encoding="utf-8")
    t = _tracker(tmp_path, backup_approved=True)

    rec = t.write_file("app.yml", "a: 1\n")

    assert rec.outcome == Outcome.SKIPPED_EXISTS
    assert list_backups(tmp_path / "app.yml") == []


def test_stale_artifact_is_left_untouched_without_approval(tmp_path: Path) -> None:
    (tmp_path / "app.yml").write_text("mine\n", encoding="utf-8")
    t = _tracker(tmp_path)

    rec = t.write_file("app.yml", "generated\n")

    assert rec.outcome == Outcome.SKIPPED_EXISTS
    assert "backup_existing_files" in (rec.message or "")
    assert (tmp_path / "app.yml").read_text(encoding="utf-8") == "mine\n"
    assert list_backups(tmp_path / "app.yml") == []


def test_stale_artifact_is_backed_up_before_overwrite(tmp_path: Path) -> None:
    (tmp_path / "app.yml").write_text("mine\n", encoding="utf-8")
    t = _tracker(tmp_path, backup_approved=True)

    rec = t.write_file("app.yml", "generated\n")

    assert rec.outcome == Outcome.SKIPPED_BACKED_UP
    assert rec.backup_path == "app.yml.backup.20260102030405"
    assert (tmp_path / rec.backup_path).read_text(encoding="utf-8") == "mine\n"
    assert (tmp_path / "app.yml").read_text(encoding="utf-8") == "generated\n"


def test_backups_never_overwrite_each_other(tmp_path: Path) -> None:
    target = tmp_path / "app.yml"
    target.write_text("v1\n", encoding="utf-8")
    t = _tracker(tmp_path, backup_approved=True)

    t.write_file("app.yml", "v2\n")
    target.write_text("v3\n", encoding="utf-8")
    t.write_file("app.yml", "v2\n")

    backups = list_backups(target)
    assert [b.name for b in backups] == ["app.yml.backup.20260102030405", "app.yml.backup.20260102030405-1"]
    assert backups[0].read_text(encoding="utf-8") == "v1\n"
    assert backups[1].read_text(encoding="utf-8") == "v3\n"


def test_directory_artifacts(tmp_path: Path) -> None:
    t = _tracker(tmp_path)

    assert t.ensure_dir("docs").outcome == Outcome.CREATED
    assert (tmp_path / "docs").is_dir()
    assert t.reconcile("docs/").outcome == Outcome.SKIPPED_EXISTS


def test_type_mismatch_is_a_warning(tmp_path: Path) -> None:
    (tmp_path / "docs").write_text("not a dir", encoding="utf-8")
    t = _tracker(tmp_path, backup_approved=True)

    rec = t.ensure_dir("docs/")

    assert rec.outcome == Outcome.WARNING
    assert (tmp_path / "docs").is_file()


@pytest.mark.parametrize("bad", ["../escape.txt", "/etc/passwd", "a/../../b"])
def test_paths_outside_project_are_rejected(tmp_path: Path, bad: str) -> None:
    with pytest.raises(FatalError):
        _tracker(tmp_path).write_file(bad, "x")


def test_failed_verification_is_fatal(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(tracker_mod, "write_text_atomic", lambda path, text: None)
    t = _tracker(tmp_path)

    with pytest.raises(VerificationError) as ei:
        t.write_file("ghost.txt", "content")

    assert ei.value.path == "ghost.txt"
    assert t.report.records == []


def test_failed_verification_is_a_warning_when_tolerant(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(tracker_mod, "write_text_atomic", lambda path, text: None)
    t = _tracker(tmp_path, tolerant=True)

    rec = t.write_file("ghost.txt", "content")

    assert rec.outcome == Outcome.WARNING
    assert "verification failed" in (rec.message or "")


def test_classify_states(tmp_path: Path) -> None:
    p = tmp_path / "f.txt"
    assert classify(p, "x") is ArtifactState.ABSENT
    p.write_text("x", encoding="utf-8")
    assert classify(p, "x") is ArtifactState.PRESENT_CURRENT
    assert classify(p, "y") is ArtifactState.PRESENT_STALE


def test_outcomes_are_deterministic(tmp_path: Path) -> None:
    def run(root: Path):
        root.mkdir()
        (root / "b.txt").write_text("same", encoding="utf-8")
        (root / "c.txt").write_text("old", encoding="utf-8")
        t = _tracker(root, backup_approved=True)
        for rel, content in (("a.txt", "new"), ("b.txt", "same"), ("c.txt", "new")):
            t.write_file(rel, content)
        return [r.to_dict() for r in t.report.records]

    assert run(tmp_path / "one") == run(tmp_path / "two")


def test_unwritable_target_is_fatal_with_path(tmp_path: Path) -> None:
    (tmp_path / "ro").write_text("a file, not a dir", encoding="utf-8")
    t = _tracker(tmp_path)

    with pytest.raises(FatalError) as ei:
        t.write_file("ro/x.yml", "k: v\n")

    assert "ro/x.yml" in str(ei.value)
    assert ei.value.script == "bootstrap-test"


def test_externally_rewritten_file_is_backed_up(tmp_path: Path) -> None:
    (tmp_path / "app.yml").write_text("mine\n", encoding="utf-8")
    t = _tracker(tmp_path, backup_approved=True)

    snap = t.snapshot("app.yml")
    (tmp_path / "app.yml").write_text("from script\n", encoding="utf-8")
    rec = t.observe(snap)

    assert rec.outcome == Outcome.SKIPPED_BACKED_UP
    assert rec.backup_path == "app.yml.backup.20260102030405"
    assert (tmp_path / rec.backup_path).read_text(encoding="utf-8") == "mine\n"


def test_externally_rewritten_file_without_approval_is_a_warning(tmp_path: Path) -> None:
    (tmp_path / "app.yml").write_text("mine\n", encoding="utf-8")
    t = _tracker(tmp_path)

    snap = t.snapshot("app.yml")
    (tmp_path / "app.yml").write_text("from script\n", encoding="utf-8")
    rec = t.observe(snap)

    assert rec.outcome == Outcome.WARNING
    assert "modified by the external script" in (rec.message or "")
    assert list_backups(tmp_path / "app.yml") == []


def test_untouched_file_drops_its_pre_run_backup(tmp_path: Path) -> None:
    (tmp_path / "app.yml").write_text("mine\n", encoding="utf-8")
    t = _tracker(tmp_path, backup_approved=True)

    snap = t.snapshot("app.yml")
    assert snap.backup is not None and snap.backup.exists()
    rec = t.observe(snap)

    assert rec.outcome == Outcome.SKIPPED_EXISTS
    assert list_backups(tmp_path / "app.yml") == []
