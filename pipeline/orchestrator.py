"""pipeline.orchestrator

High-level session entrypoints for the bootstrap runtime.

Design principles
-----------------
- Keep the CLI thin: parse args, build a :class:`RunRequest`, call in here.
- Reject a bad selection (unknown names, conflicts, cycles) *before* any
  script runs.
- Run scripts strictly one after another; stop the session at the first
  fatal error.
- Never roll back automatically; rollback is a separate, caller-invoked
  operation (:mod:`pipeline.rollback`).

This module is intentionally "boring": it wires together existing components.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

from generators.base import Generator
from generators.catalog import default_selection, load_generators
from pipeline.core import (
    DEFAULT_CHECK_TIMEOUT_SECONDS,
    DEFAULT_COMMAND_TIMEOUT_SECONDS,
    SHELL_SCRIPT_GLOB,
    TEMPLATES_DIR,
)
from pipeline.dependencies import DependencyValidator
from pipeline.execution.model import RunRequest, SessionResult, now_iso
from pipeline.execution.plan import plan_scripts, select_scripts
from pipeline.execution.record import write_session_record
from pipeline.execution.runner import run_script
from pipeline.manifests import discover_shell_scripts
from scaffold_core.config.answers import AnswersOverride
from scaffold_core.config.store import ConfigStore
from scaffold_core.config.validation import validate_config
from scaffold_core.errors import ConfigurationError
from scaffold_core.domain.manifest import ScriptManifest
from scaffold_core.io.layout import ProjectPaths, resolve_project_root
from scaffold_core.render import TemplateRenderer
from tools.probes import ToolProbe, default_probe

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """Everything loaded for a session before any script runs."""

    paths: ProjectPaths
    config: ConfigStore
    answers: AnswersOverride
    generators: Dict[str, Generator]

    @property
    def manifests(self) -> Dict[str, ScriptManifest]:
        return {name: g.manifest for name, g in self.generators.items()}


def resolve_scripts_dir(req_dir: Optional[Path], config: ConfigStore, project_root: Path) -> Optional[Path]:
    """``--scripts-dir`` wins; otherwise ``paths.scripts_dir`` (relative to the project)."""

    if req_dir:
        return Path(req_dir)
    configured = config.get("paths.scripts_dir")
    if not configured:
        return None
    p = Path(configured).expanduser()
    return p if p.is_absolute() else project_root / p


def load_session(req: RunRequest) -> SessionContext:
    """Resolve the project root and load config, answers and generators."""

    root = resolve_project_root(req.project_root)
    paths = ProjectPaths.for_root(root, config_file=req.config_file)
    answers = AnswersOverride.load(Path(req.answers_file) if req.answers_file else paths.answers_file)
    if answers.source:
        logger.debug("Loaded %d answers from %s", len(answers), answers.source)
    config = ConfigStore(paths.config_file, answers=answers)

    scripts_dir = resolve_scripts_dir(req.scripts_dir, config, root)
    try:
        shell_scripts = discover_shell_scripts(scripts_dir, SHELL_SCRIPT_GLOB) if scripts_dir else []
    except (FileNotFoundError, ValueError) as e:
        raise ConfigurationError(f"cannot load scripts: {e}") from e
    generators = load_generators(shell_scripts)
    return SessionContext(paths=paths, config=config, answers=answers, generators=generators)


def plan_session(req: RunRequest, ctx: Optional[SessionContext] = None) -> List[ScriptManifest]:
    """Return the ordered plan for *req* (raises ConfigurationError)."""

    ctx = ctx or load_session(req)
    manifests = ctx.manifests
    names = select_scripts(
        manifests,
        names=list(req.scripts),
        phase=req.phase,
        all_scripts=req.all_scripts,
        eligible=default_selection(ctx.generators),
    )
    return plan_scripts(names, manifests)


def run_session(
    req: RunRequest,
    *,
    probe: Optional[ToolProbe] = None,
    renderer: Optional[TemplateRenderer] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> SessionResult:
    """Plan and run a session.

    Raises :class:`~scaffold_core.errors.ConfigurationError` (bad selection)
    or :class:`~scaffold_core.errors.ProjectRootError` before anything runs.
    Script-level fatal errors are captured in the returned result.
    """

    ctx = load_session(req)
    plan = plan_session(req, ctx)

    session = SessionResult(plan=[m.name for m in plan], started=now_iso())
    session.warnings.extend(validate_config(ctx.config))
    for w in session.warnings:
        logger.warning("config: %s", w)

    if not plan:
        logger.info("Nothing to do: no scripts selected")
        session.finished = now_iso()
        return session

    if req.dry_run:
        session.finished = now_iso()
        return session

    config = ctx.config
    probe = probe or default_probe(
        version_checks=config.get_bool("dependencies.version_checks", True),
        timeout_seconds=config.get_int("dependencies.check_timeout", DEFAULT_CHECK_TIMEOUT_SECONDS),
    )
    validator = DependencyValidator(ctx.paths, probe=probe, manifests=ctx.manifests)
    renderer = renderer or TemplateRenderer(TEMPLATES_DIR)
    command_timeout = config.get_int("runtime.command_timeout", DEFAULT_COMMAND_TIMEOUT_SECONDS)

    for manifest in plan:
        result = run_script(
            ctx.generators[manifest.name],
            paths=ctx.paths,
            config=config,
            validator=validator,
            renderer=renderer,
            command_timeout=command_timeout,
            clock=clock,
        )
        session.results.append(result)
        if not result.ok:
            logger.error("Stopping session: %s failed; not run: %s", result.name, ", ".join(session.not_run) or "-")
            break

    if session.ok and req.persist_answers and config.get_bool("answers.persist", True) and len(ctx.answers):
        session.answers_persisted = config.update_from_answers(ctx.answers)
        if session.answers_persisted:
            logger.info("Saved %d answers to %s", len(session.answers_persisted), ctx.paths.config_file)

    session.finished = now_iso()
    write_session_record(ctx.paths, session)
    return session
