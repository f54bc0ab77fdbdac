"""scaffold_core.config.validation

Non-blocking checks over well-known config values.

A malformed value never aborts a run: each problem becomes a warning string
that the caller records in its report.
"""

from __future__ import annotations

import re
from typing import List

from scaffold_core.config.store import FALSE_VALUES, TRUE_VALUES, ConfigStore

PORT_KEYS = ("docker.app_port", "docker.database_port")
BOOL_KEYS = (
    "git.init_repository",
    "auto_approve.backup_existing_files",
    "dependencies.version_checks",
    "answers.persist",
)
PACKAGE_MANAGERS = ("npm", "yarn", "pnpm")
PROJECT_PHASES = ("POC", "MVP", "Production")


def _is_int(value: str) -> bool:
    return bool(re.fullmatch(r"-?\d+", value.strip()))


def validate_config(store: ConfigStore) -> List[str]:
    """Return human-readable warnings for invalid values (empty if all good)."""

    warnings: List[str] = []

    for key in PORT_KEYS:
        v = store.get(key)
        if v is None:
            continue
        if not _is_int(v) or not (1024 <= int(v) <= 65535):
            warnings.append(f"{key}={v!r} is not a valid port (1024-65535)")

    cov = store.get("testing.coverage_threshold")
    if cov is not None and (not _is_int(cov) or not (0 <= int(cov) <= 100)):
        warnings.append(f"testing.coverage_threshold={cov!r} must be between 0 and 100")

    pm = store.get("packages.package_manager")
    if pm is not None and pm not in PACKAGE_MANAGERS:
        warnings.append(f"packages.package_manager={pm!r} must be one of {', '.join(PACKAGE_MANAGERS)}")

    node = store.get("packages.node_version")
    if node is not None and not re.fullmatch(r"\d+(\.\d+){0,2}", node.strip()):
        warnings.append(f"packages.node_version={node!r} must be numeric (e.g. 20 or 20.11.0)")

    phase = store.get("project.phase")
    if phase is not None and phase not in PROJECT_PHASES:
        warnings.append(f"project.phase={phase!r} must be one of {', '.join(PROJECT_PHASES)}")

    for key in BOOL_KEYS:
        v = store.get(key)
        if v is not None and v.strip().lower() not in TRUE_VALUES | FALSE_VALUES:
            warnings.append(f"{key}={v!r} must be true or false")

    return warnings
