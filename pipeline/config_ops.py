"""pipeline.config_ops

Config operations that need more than the store itself: git-based
auto-detection for ``init`` and the show/get/set helpers used by the CLI.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from scaffold_core.config.answers import AnswersOverride
from scaffold_core.config.defaults import init_config
from scaffold_core.config.store import ConfigStore
from scaffold_core.config.validation import validate_config
from scaffold_core.io.layout import ProjectPaths
from tools.core_git import get_git_branch, get_git_config, get_remote_url, repo_name_from_url

logger = logging.getLogger(__name__)


def detect_git_info(project_root: Path) -> Dict[str, Optional[str]]:
    """Best-effort git facts for config seeding (never raises)."""

    remote = get_remote_url(project_root)
    return {
        "repo_name": repo_name_from_url(remote) if remote else None,
        "user_name": get_git_config(project_root, "user.name"),
        "user_email": get_git_config(project_root, "user.email"),
        "default_branch": get_git_branch(project_root),
    }


def open_store(paths: ProjectPaths, *, with_answers: bool = True) -> ConfigStore:
    answers = AnswersOverride.load(paths.answers_file) if with_answers else AnswersOverride()
    return ConfigStore(paths.config_file, answers=answers)


def init_project_config(paths: ProjectPaths, *, force: bool = False) -> Tuple[ConfigStore, List[str]]:
    """Create or complete ``bootstrap.config`` with detected values and defaults."""

    store = open_store(paths, with_answers=False)
    written = init_config(store, paths.root, git_info=detect_git_info(paths.root), force=force)
    store.save()
    logger.info("Initialised %s (%d keys written)", paths.config_file, len(written))
    return store, written


def set_value(paths: ProjectPaths, key: str, value: str) -> List[str]:
    """Persist one value; return validation warnings for the resulting store."""

    store = open_store(paths, with_answers=False)
    store.set(key, value)
    store.save()
    return validate_config(store)
