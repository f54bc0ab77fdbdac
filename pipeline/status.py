"""pipeline.status

Read-only view of what the runtime has done to a project.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from scaffold_core.domain.manifest import ScriptManifest
from scaffold_core.io.layout import ProjectPaths, list_backups

from pipeline.execution.record import load_session_record


def project_status(paths: ProjectPaths, manifests: Mapping[str, ScriptManifest]) -> Dict[str, Any]:
    completed = paths.completed_scripts()

    scripts: Dict[str, Any] = {}
    for name in sorted(manifests, key=lambda n: (manifests[n].phase, n)):
        m = manifests[name]
        artifacts = {rel: paths.artifact(rel).exists() for rel in m.creates}
        backups = {
            rel: [b.name for b in list_backups(paths.artifact(rel))]
            for rel in m.creates
            if not rel.endswith("/")
        }
        scripts[name] = {
            "phase": m.phase,
            "completed": name in completed,
            "artifacts": artifacts,
            "backups": {k: v for k, v in backups.items() if v},
        }

    last = load_session_record(paths)
    return {
        "project_root": str(paths.root),
        "config_file": str(paths.config_file),
        "config_exists": paths.config_file.is_file(),
        "completed": completed,
        "scripts": scripts,
        "last_run": {
            "finished": last.get("finished"),
            "ok": last.get("ok"),
            "counts": last.get("counts"),
        }
        if last
        else None,
    }
