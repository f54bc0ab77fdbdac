"""scaffold_core.config.defaults

Seed values for a fresh ``bootstrap.config``.

Detection here only looks at files in the project root (lock files,
``.nvmrc``, the directory name). Git-derived values (user, email, remote)
need a subprocess and are passed in by the caller.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from scaffold_core.config.store import ConfigStore

# Lock file -> package manager, checked in order.
LOCK_FILES = (
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("package-lock.json", "npm"),
)

DEFAULT_CONFIG: Dict[str, Dict[str, str]] = {
    "project": {"phase": "POC"},
    "git": {"default_branch": "main", "init_repository": "true"},
    "docker": {
        "database_type": "postgres",
        "database_name": "app_db",
        "app_port": "3000",
        "database_port": "5432",
    },
    "packages": {"package_manager": "npm", "node_version": "20"},
    "testing": {"coverage_threshold": "80", "e2e_framework": "playwright"},
    "cicd": {"provider": "github", "node_version": "20"},
    "auto_approve": {"backup_existing_files": "false"},
    "dependencies": {"version_checks": "true", "check_timeout": "10"},
    "runtime": {"command_timeout": "300"},
    "answers": {"persist": "true"},
}


def sanitize_project_name(name: str) -> str:
    s = re.sub(r"[^A-Za-z0-9._-]+", "-", name.strip()).strip("-.")
    return s.lower() or "project"


def detect_package_manager(project_root: Path) -> Optional[str]:
    for lock, manager in LOCK_FILES:
        if (project_root / lock).exists():
            return manager
    return None


def detect_node_version(project_root: Path) -> Optional[str]:
    """Major version from ``.nvmrc`` (``v20.11.0`` -> ``20``)."""

    nvmrc = project_root / ".nvmrc"
    if not nvmrc.is_file():
        return None
    m = re.search(r"(\d+)", nvmrc.read_text(encoding="utf-8", errors="ignore"))
    return m.group(1) if m else None


def detected_values(
    project_root: Path,
    *,
    git_info: Optional[Mapping[str, Optional[str]]] = None,
) -> Dict[str, str]:
    """Auto-detected dotted key -> value pairs for *project_root*.

    *git_info* may carry ``repo_name``, ``user_name``, ``user_email`` and
    ``default_branch``; missing entries are simply not detected.
    """

    info = dict(git_info or {})
    out: Dict[str, str] = {}

    out["project.name"] = sanitize_project_name(info.get("repo_name") or project_root.name)

    for src, key in (
        ("user_name", "git.user_name"),
        ("user_email", "git.user_email"),
        ("default_branch", "git.default_branch"),
    ):
        if info.get(src):
            out[key] = str(info[src])

    pm = detect_package_manager(project_root)
    if pm:
        out["packages.package_manager"] = pm

    node = detect_node_version(project_root)
    if node:
        out["packages.node_version"] = node
        out["cicd.node_version"] = node

    return out


def init_config(
    store: ConfigStore,
    project_root: Path,
    *,
    git_info: Optional[Mapping[str, Optional[str]]] = None,
    force: bool = False,
) -> List[str]:
    """Seed *store* with detected values and defaults.

    Existing persisted values win unless *force* is set. Detected values win
    over static defaults. Returns the keys that were written; the caller
    decides when to :meth:`~ConfigStore.save`.
    """

    seeds: Dict[str, str] = {}
    for section, values in DEFAULT_CONFIG.items():
        for k, v in values.items():
            seeds[f"{section}.{k}"] = v
    seeds.update(detected_values(project_root, git_info=git_info))

    written: List[str] = []
    for key in sorted(seeds):
        if force:
            store.set(key, seeds[key])
            written.append(key)
        elif store.set_default(key, seeds[key]):
            written.append(key)
    return written
