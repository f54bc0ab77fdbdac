"""generators.actions

Named side effects a built-in generator may request after its templates are
written. Registry entries only name an action; the work happens here.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict

from scaffold_core.domain.report import Outcome
from scaffold_core.errors import FatalError
from tools.core_git import init_repository, is_git_repo

from .base import GeneratorContext

logger = logging.getLogger(__name__)


def git_init(ctx: GeneratorContext) -> None:
    """Initialise a git repository unless disabled or already present."""

    if not ctx.config.get_bool("git.init_repository", True):
        logger.info("git.init_repository=false; not running git init")
        return
    if is_git_repo(ctx.project_root):
        ctx.report.add(".git/", Outcome.SKIPPED_EXISTS)
        return
    branch = ctx.config.get("git.default_branch", "main")
    try:
        init_repository(ctx.project_root, default_branch=branch)
    except (OSError, RuntimeError) as e:
        raise FatalError(f"git init failed: {e}", script=ctx.manifest.name)
    ctx.report.add(".git/", Outcome.CREATED)


ACTIONS: Dict[str, Callable[[GeneratorContext], None]] = {
    "git-init": git_init,
}


def run_action(name: str, ctx: GeneratorContext) -> None:
    fn = ACTIONS.get(name)
    if fn is None:
        raise FatalError(f"Unknown generator action: {name}", script=ctx.manifest.name)
    fn(ctx)
