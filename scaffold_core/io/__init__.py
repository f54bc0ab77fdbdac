"""scaffold_core.io

Filesystem contracts and IO helpers.

Design principle
----------------
Where the runtime keeps its own state inside the target project (config,
logs, completion markers, answers) is a public contract: users commit some of
these files and delete others. If every module built these paths on its own,
they would drift. This package centralizes those rules.
"""

from __future__ import annotations

from .fs import content_matches, copy_preserving, read_json, write_json_atomic, write_text_atomic
from .layout import (
    ANSWERS_FILENAME,
    BOOTSTRAP_DIRNAME,
    ProjectPaths,
    backup_path_for,
    list_backups,
    resolve_project_root,
)

__all__ = [
    "ANSWERS_FILENAME",
    "BOOTSTRAP_DIRNAME",
    "ProjectPaths",
    "backup_path_for",
    "content_matches",
    "copy_preserving",
    "list_backups",
    "read_json",
    "resolve_project_root",
    "write_json_atomic",
    "write_text_atomic",
]
