"""scaffold_core.io.layout

Canonical filesystem layout inside a target project.

::

    <project>/
      .bootstrap-answers.env          # per-invocation answers (KEY=value)
      .bootstrap/
        bootstrap.config              # persisted INI config store
        logs/
          bootstrap.log               # central run log (append-only)
          last-run.json               # summary of the most recent session
          .<script>.completed         # completion markers

Backups of overwritten artifacts live next to the original:
``<artifact>.backup.<YYYYmmddHHMMSS>``.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

from scaffold_core.errors import ProjectRootError

BOOTSTRAP_DIRNAME = ".bootstrap"
CONFIG_FILENAME = "bootstrap.config"
ANSWERS_FILENAME = ".bootstrap-answers.env"
LOG_FILENAME = "bootstrap.log"
LAST_RUN_FILENAME = "last-run.json"
MARKER_SUFFIX = ".completed"

BACKUP_INFIX = ".backup."
BACKUP_TS_FORMAT = "%Y%m%d%H%M%S"
BACKUP_RE = re.compile(r"\.backup\.\d{14}(-\d+)?$")


def resolve_project_root(path: Union[str, Path]) -> Path:
    """Return the absolute project root, or raise :class:`ProjectRootError`.

    The root must already exist; the runtime never creates the project
    directory itself.
    """

    p = Path(path).expanduser().resolve()
    if not p.exists():
        raise ProjectRootError(f"Project root does not exist: {p}")
    if not p.is_dir():
        raise ProjectRootError(f"Project root is not a directory: {p}")
    if not os.access(str(p), os.W_OK | os.X_OK):
        raise ProjectRootError(f"Project root is not writable: {p}")
    return p


@dataclass(frozen=True)
class ProjectPaths:
    """All runtime-owned paths for one target project."""

    root: Path
    config_override: Optional[Path] = None

    @classmethod
    def for_root(cls, root: Union[str, Path], *, config_file: Optional[Union[str, Path]] = None) -> "ProjectPaths":
        override = config_file or os.environ.get("BOOTSTRAP_CONFIG") or None
        return cls(root=Path(root), config_override=Path(override) if override else None)

    @property
    def state_dir(self) -> Path:
        return self.root / BOOTSTRAP_DIRNAME

    @property
    def config_file(self) -> Path:
        return self.config_override or (self.state_dir / CONFIG_FILENAME)

    @property
    def logs_dir(self) -> Path:
        return self.state_dir / "logs"

    @property
    def log_file(self) -> Path:
        return self.logs_dir / LOG_FILENAME

    @property
    def last_run(self) -> Path:
        return self.logs_dir / LAST_RUN_FILENAME

    @property
    def answers_file(self) -> Path:
        return self.root / ANSWERS_FILENAME

    def marker_for(self, script: str) -> Path:
        return self.logs_dir / f".{script}{MARKER_SUFFIX}"

    def artifact(self, rel: str) -> Path:
        """Resolve a declared artifact path (relative to the project root)."""
        return self.root / rel.rstrip("/")

    def completed_scripts(self) -> List[str]:
        """Names of scripts that left a completion marker, sorted."""

        if not self.logs_dir.is_dir():
            return []
        out: List[str] = []
        for p in self.logs_dir.iterdir():
            name = p.name
            if p.is_file() and name.startswith(".") and name.endswith(MARKER_SUFFIX):
                out.append(name[1 : -len(MARKER_SUFFIX)])
        return sorted(out)


def backup_path_for(path: Path, now: datetime) -> Path:
    """Return a fresh backup path for *path* that does not exist yet.

    Two backups within the same second get a ``-N`` counter so earlier
    backups are never overwritten.
    """

    p = Path(path)
    base = p.with_name(f"{p.name}{BACKUP_INFIX}{now.strftime(BACKUP_TS_FORMAT)}")
    candidate = base
    n = 1
    while candidate.exists():
        candidate = base.with_name(f"{base.name}-{n}")
        n += 1
    return candidate


def list_backups(path: Path) -> List[Path]:
    """Backups of *path*, oldest first."""

    p = Path(path)
    if not p.parent.is_dir():
        return []
    prefix = p.name + BACKUP_INFIX
    found = [
        c
        for c in p.parent.iterdir()
        if c.name.startswith(prefix) and BACKUP_RE.search(c.name[len(p.name):])
    ]
    return sorted(found, key=lambda c: _backup_order(c.name[len(prefix):]))


def _backup_order(suffix: str) -> Tuple[str, int]:
    # "20260102030405-10" sorts after "20260102030405-2".
    stamp, _, counter = suffix.partition("-")
    return stamp, int(counter or 0)
