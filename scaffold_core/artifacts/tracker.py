"""scaffold_core.artifacts.tracker

Per-artifact state machine and the run's file-operation tracker.

Every declared artifact is in one of three states before a write::

    ABSENT           -> write, record "created"
    PRESENT_CURRENT  -> no write, record "skipped-exists"
    PRESENT_STALE    -> backups approved: copy to <path>.backup.<ts>, then
                        overwrite, record "skipped-backed-up"
                        otherwise: leave untouched, record "skipped-exists"

:meth:`FileOperationTracker.reconcile` is the only transition for files the
tracker writes itself. Files written by an external script are bracketed by
:meth:`~FileOperationTracker.snapshot` and :meth:`~FileOperationTracker.observe`,
which apply the same backup rule to whatever the script changed. After any write
the artifact is verified; a failed verification raises
:class:`~scaffold_core.errors.VerificationError` unless the tracker was built
as tolerant, in which case it is recorded as a warning.

Given the same filesystem state and configuration the sequence of outcomes is
the same. Only backup paths carry a timestamp (taken from the injectable
clock).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Callable, List, Optional

from scaffold_core.domain.report import ArtifactRecord, ExecutionReport, Outcome
from scaffold_core.errors import FatalError, VerificationError
from scaffold_core.io.fs import content_matches, copy_preserving, write_text_atomic
from scaffold_core.io.layout import backup_path_for

logger = logging.getLogger(__name__)


class ArtifactState(str, Enum):
    ABSENT = "absent"
    PRESENT_CURRENT = "present-current"
    PRESENT_STALE = "present-stale"


@dataclass
class ExternalSnapshot:
    """An artifact as it was before an external process ran."""

    rel: str
    existed: bool
    content: Optional[bytes] = None
    backup: Optional[Path] = None


def is_directory_artifact(rel_path: str) -> bool:
    return rel_path.endswith("/")


def classify(path: Path, content: Optional[str], *, directory: bool = False) -> ArtifactState:
    """Classify *path* against the desired *content*.

    Directory artifacts are current as soon as the directory exists. A path
    whose type differs from the desired one (file vs directory) is stale.
    """

    p = Path(path)
    if not p.exists() and not p.is_symlink():
        return ArtifactState.ABSENT
    if directory:
        return ArtifactState.PRESENT_CURRENT if p.is_dir() else ArtifactState.PRESENT_STALE
    if p.is_dir():
        return ArtifactState.PRESENT_STALE
    if content is not None and content_matches(p, content):
        return ArtifactState.PRESENT_CURRENT
    return ArtifactState.PRESENT_STALE


def normalize_rel_path(rel_path: str) -> str:
    """Validate a declared artifact path and return it in POSIX form.

    Artifacts must stay inside the project root.
    """

    raw = str(rel_path).replace("\\", "/")
    directory = raw.endswith("/")
    pp = PurePosixPath(raw.rstrip("/"))
    if not raw.strip("/") or pp.is_absolute() or raw.startswith("/") or ".." in pp.parts:
        raise FatalError(f"Artifact path must be relative and inside the project: {rel_path!r}")
    out = pp.as_posix()
    return out + "/" if directory else out


class FileOperationTracker:
    """Apply artifact writes for one script and record their outcomes."""

    def __init__(
        self,
        project_root: Path,
        report: ExecutionReport,
        *,
        backup_approved: bool = False,
        tolerant: bool = False,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.project_root = Path(project_root)
        self.report = report
        self.backup_approved = backup_approved
        self.tolerant = tolerant
        self.clock = clock
        self.written: List[Path] = []

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def reconcile(self, rel_path: str, content: Optional[str] = None) -> ArtifactRecord:
        """Bring one artifact to the desired state and record the outcome.

        A trailing ``/`` (or ``content=None``) declares a directory.
        """

        rel = normalize_rel_path(rel_path)
        directory = is_directory_artifact(rel) or content is None
        rel_key = rel.rstrip("/")
        target = self.project_root / rel_key

        try:
            state = classify(target, content, directory=directory)
        except OSError as e:
            raise FatalError(f"cannot read {rel_key}: {e}", script=self.report.script)
        logger.debug("%s: %s", rel_key, state.value)

        if state is ArtifactState.ABSENT:
            self._apply(target, content, directory=directory)
            return self._verified(rel, target, content, directory=directory, outcome=Outcome.CREATED)

        if state is ArtifactState.PRESENT_CURRENT:
            return self.report.add(rel, Outcome.SKIPPED_EXISTS)

        # PRESENT_STALE
        if directory or target.is_dir():
            # Never replace a directory with a file (or the reverse).
            return self.report.add(
                rel,
                Outcome.WARNING,
                message=f"{rel_key} exists with a different type; left untouched",
            )

        if not self.backup_approved:
            return self.report.add(
                rel,
                Outcome.SKIPPED_EXISTS,
                message="differs from generated content; not overwritten "
                "(set auto_approve.backup_existing_files=true to back up and replace)",
            )

        backup = backup_path_for(target, self.clock())
        try:
            copy_preserving(target, backup)
        except OSError as e:
            raise FatalError(f"cannot back up {rel_key}: {e}", script=self.report.script)
        logger.info("Backed up %s -> %s", rel_key, backup.name)
        self._apply(target, content, directory=False)
        return self._verified(
            rel,
            target,
            content,
            directory=False,
            outcome=Outcome.SKIPPED_BACKED_UP,
            backup_path=self._rel(backup),
        )

    def write_file(self, rel_path: str, content: str) -> ArtifactRecord:
        return self.reconcile(rel_path, content)

    def ensure_dir(self, rel_path: str) -> ArtifactRecord:
        rel = rel_path if rel_path.endswith("/") else rel_path + "/"
        return self.reconcile(rel, None)

    def snapshot(self, rel_path: str) -> ExternalSnapshot:
        """Capture an artifact before an external process may rewrite it.

        An existing file is read into memory and, when backups are approved,
        copied to a fresh backup so the external process cannot destroy it.
        """

        rel = normalize_rel_path(rel_path)
        target = self.project_root / rel.rstrip("/")
        if not target.exists():
            return ExternalSnapshot(rel, existed=False)
        if is_directory_artifact(rel) or not target.is_file():
            return ExternalSnapshot(rel, existed=True)
        try:
            before = target.read_bytes()
            backup = None
            if self.backup_approved:
                backup = backup_path_for(target, self.clock())
                copy_preserving(target, backup)
        except OSError as e:
            raise FatalError(f"cannot back up {rel}: {e}", script=self.report.script)
        return ExternalSnapshot(rel, existed=True, content=before, backup=backup)

    def observe(self, snap: ExternalSnapshot) -> ArtifactRecord:
        """Record an artifact that an external process was responsible for.

        Used for shell generators: the tracker did not write the file, so it
        compares what is on disk now with *snap* and verifies it.
        """

        rel = snap.rel
        rel_key = rel.rstrip("/")
        target = self.project_root / rel_key
        directory = is_directory_artifact(rel)
        if not snap.existed:
            return self._verified(rel, target, None, directory=directory, outcome=Outcome.CREATED)
        if snap.content is None:
            return self.report.add(rel, Outcome.SKIPPED_EXISTS)

        try:
            after = target.read_bytes() if target.is_file() else None
        except OSError as e:
            raise FatalError(f"cannot read {rel_key}: {e}", script=self.report.script)

        if after == snap.content:
            if snap.backup is not None:
                snap.backup.unlink()
            return self.report.add(rel, Outcome.SKIPPED_EXISTS)

        backup_rel = self._rel(snap.backup) if snap.backup is not None else None
        if after is None:
            return self._verified(rel, target, None, directory=False, outcome=Outcome.WARNING, backup_path=backup_rel)
        if snap.backup is None:
            return self.warn(
                f"{rel_key} was modified by the external script and no backup was kept "
                "(set auto_approve.backup_existing_files=true to back up first)",
                path=rel,
            )
        logger.info("Backed up %s -> %s", rel_key, snap.backup.name)
        return self._verified(
            rel,
            target,
            None,
            directory=False,
            outcome=Outcome.SKIPPED_BACKED_UP,
            backup_path=backup_rel,
        )

    def warn(self, message: str, *, path: str = "") -> ArtifactRecord:
        logger.warning(message)
        return self.report.warn(message, path=path)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _apply(self, target: Path, content: Optional[str], *, directory: bool) -> None:
        try:
            if directory:
                target.mkdir(parents=True, exist_ok=True)
            else:
                write_text_atomic(target, content or "")
        except OSError as e:
            raise FatalError(f"cannot write {self._rel(target)}: {e}", script=self.report.script)
        self.written.append(target)

    def _verified(
        self,
        rel: str,
        target: Path,
        content: Optional[str],
        *,
        directory: bool,
        outcome: Outcome,
        backup_path: Optional[str] = None,
    ) -> ArtifactRecord:
        problem = verify_artifact(target, content, directory=directory)
        if problem is None:
            return self.report.add(rel, outcome, backup_path=backup_path)

        if not self.tolerant:
            raise VerificationError(rel, problem, script=self.report.script)

        logger.warning("verification failed for %s: %s", rel, problem)
        return self.report.add(
            rel,
            Outcome.WARNING,
            backup_path=backup_path,
            message=f"verification failed: {problem}",
        )

    def _rel(self, p: Path) -> str:
        try:
            return p.relative_to(self.project_root).as_posix()
        except ValueError:
            return str(p)


def verify_artifact(target: Path, content: Optional[str], *, directory: bool = False) -> Optional[str]:
    """Return a problem description, or None when the artifact looks right."""

    if directory:
        return None if target.is_dir() else "directory does not exist"
    if not target.exists():
        return "file does not exist"
    if not target.is_file():
        return "path is not a regular file"
    if content is None:
        return None
    if content and target.stat().st_size == 0:
        return "file is empty"
    return None
