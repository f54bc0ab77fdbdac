"""pipeline.rollback

Caller-invoked undo operations. Nothing in the runtime calls these on its own;
a failed session leaves its artifacts in place.

* :func:`rollback_script` runs the manifest's ``rollback`` command (tokenised
  with :mod:`shlex`, never through a shell) from the project root, bounded
  by the command timeout, then drops the completion marker.
* :func:`restore_backup` puts the newest ``<artifact>.backup.<ts>`` back in
  place. The current file is itself backed up first, so a restore never
  destroys data.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from scaffold_core.artifacts.tracker import normalize_rel_path
from scaffold_core.domain.manifest import ScriptManifest
from scaffold_core.errors import FatalError
from scaffold_core.io.fs import copy_preserving
from scaffold_core.io.layout import ProjectPaths, backup_path_for, list_backups
from tools.core_cmd import run_cmd

from pipeline.execution.record import remove_completion_marker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RollbackResult:
    script: str
    command: Optional[str]
    exit_code: int
    marker_removed: bool


def rollback_script(paths: ProjectPaths, manifest: ScriptManifest, *, timeout_seconds: int = 300) -> RollbackResult:
    """Undo one script using its declared rollback command."""

    exit_code = 0
    if manifest.rollback:
        cmd = shlex.split(manifest.rollback)
        logger.info("Rolling back %s: %s", manifest.name, manifest.rollback)
        try:
            res = run_cmd(cmd, cwd=paths.root, timeout_seconds=timeout_seconds)
        except OSError as e:
            raise FatalError(f"rollback command failed to start: {e}", script=manifest.name)
        exit_code = res.exit_code
        if exit_code != 0:
            raise FatalError(
                f"rollback command exited with code {exit_code}: {res.stderr.strip()}",
                script=manifest.name,
            )
    else:
        logger.warning("%s declares no rollback command; only its completion marker is removed", manifest.name)

    removed = remove_completion_marker(paths, manifest.name)
    return RollbackResult(
        script=manifest.name,
        command=manifest.rollback,
        exit_code=exit_code,
        marker_removed=removed,
    )


def restore_backup(
    paths: ProjectPaths,
    rel_path: str,
    *,
    clock: Callable[[], datetime] = datetime.now,
) -> Path:
    """Restore the newest backup of *rel_path*; return the backup used."""

    rel = normalize_rel_path(rel_path).rstrip("/")
    target = paths.root / rel
    backups = list_backups(target)
    if not backups:
        raise FatalError(f"No backups found for {rel}")
    latest = backups[-1]

    if target.exists():
        if target.is_dir():
            raise FatalError(f"{rel} is a directory; refusing to restore a file over it")
        safety = backup_path_for(target, clock())
        copy_preserving(target, safety)
        logger.info("Backed up current %s -> %s", rel, safety.name)
        target.unlink()

    copy_preserving(latest, target)
    logger.info("Restored %s from %s", rel, latest.name)
    return latest
