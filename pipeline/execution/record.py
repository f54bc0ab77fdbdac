"""pipeline.execution.record

Filesystem side effects of a session.

Rule
----
Only this module writes runtime state for execution: completion markers and
the ``last-run.json`` session record. Artifacts are written by the tracker.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from scaffold_core.io.fs import read_json, write_json_atomic, write_text_atomic
from scaffold_core.io.layout import ProjectPaths

from .model import SessionResult, now_iso

logger = logging.getLogger(__name__)


def write_completion_marker(paths: ProjectPaths, script: str) -> Path:
    marker = paths.marker_for(script)
    write_text_atomic(marker, now_iso() + "\n")
    logger.debug("Wrote completion marker %s", marker)
    return marker


def remove_completion_marker(paths: ProjectPaths, script: str) -> bool:
    marker = paths.marker_for(script)
    if not marker.exists():
        return False
    marker.unlink()
    return True


def write_session_record(paths: ProjectPaths, session: SessionResult) -> Path:
    write_json_atomic(paths.last_run, session.to_dict())
    return paths.last_run


def load_session_record(paths: ProjectPaths) -> Optional[Dict[str, Any]]:
    p = paths.last_run
    if not p.is_file():
        return None
    try:
        data = read_json(p)
    except ValueError as e:
        logger.warning("Ignoring unreadable session record %s: %s", p, e)
        return None
    return data if isinstance(data, dict) else None
