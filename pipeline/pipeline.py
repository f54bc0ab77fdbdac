"""pipeline.pipeline

This module defines a *single, high-level* object that represents this repo's
primary capabilities.

Why this exists
---------------
The runtime is implemented across several modules:

- :mod:`pipeline.orchestrator` loads a session and runs the plan.
- :mod:`pipeline.execution` plans, runs and records individual scripts.
- :mod:`pipeline.rollback` / :mod:`pipeline.status` inspect and undo.

That separation is good internally, but it's not a great "front door" for
callers (CLI, scripts, CI runners). The :class:`BootstrapPipeline` facade
gives the repo one obvious entrypoint with a small API:

- ``run(...)``: plan and run a session
- ``plan(...)``: the ordered plan only (dry run)
- ``status(...)`` / ``rollback(...)`` / ``restore(...)``
- ``manifests(...)``: every known manifest (built-in + external)
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, Dict, List, Optional

from pipeline.core import DEFAULT_COMMAND_TIMEOUT_SECONDS, EXIT_FATAL, EXIT_OK
from pipeline.execution.model import RunRequest, SessionResult
from pipeline.orchestrator import SessionContext, load_session, plan_session, run_session
from pipeline.rollback import RollbackResult, restore_backup, rollback_script
from pipeline.status import project_status
from scaffold_core.domain.manifest import ScriptManifest
from scaffold_core.errors import ConfigurationError
from scaffold_core.io.layout import ProjectPaths, resolve_project_root


class BootstrapPipeline:
    """High-level facade over the runtime.

    Callers should prefer using this object (built via
    :func:`pipeline.wiring.build_pipeline`) rather than importing low-level
    modules directly.
    """

    def __init__(
        self,
        *,
        run_fn: Callable[[RunRequest], SessionResult] = run_session,
        plan_fn: Callable[[RunRequest], List[ScriptManifest]] = plan_session,
        on_project: Optional[Callable[[ProjectPaths], Any]] = None,
    ) -> None:
        self._run_fn = run_fn
        self._plan_fn = plan_fn
        self._on_project = on_project

    def _enter(self, project_root: Path, *, config_file: Optional[Path] = None) -> ProjectPaths:
        paths = ProjectPaths.for_root(resolve_project_root(project_root), config_file=config_file)
        if self._on_project is not None:
            self._on_project(paths)
        return paths

    def _session(self, project_root: Path, scripts_dir: Optional[Path]) -> SessionContext:
        return load_session(RunRequest(project_root=Path(project_root), scripts_dir=scripts_dir))

    def run(self, req: RunRequest) -> SessionResult:
        """Run a session; raises ConfigurationError/ProjectRootError before any script runs."""
        self._enter(req.project_root, config_file=req.config_file)
        return self._run_fn(req)

    def plan(self, req: RunRequest) -> List[ScriptManifest]:
        return self._plan_fn(req)

    def manifests(self, project_root: Path, *, scripts_dir: Optional[Path] = None) -> List[ScriptManifest]:
        ctx = self._session(project_root, scripts_dir)
        return sorted(ctx.manifests.values(), key=lambda m: (m.phase, m.name))

    def status(self, project_root: Path, *, scripts_dir: Optional[Path] = None) -> Dict[str, Any]:
        ctx = self._session(project_root, scripts_dir)
        return project_status(ctx.paths, ctx.manifests)

    def rollback(self, project_root: Path, script: str, *, scripts_dir: Optional[Path] = None) -> RollbackResult:
        paths = self._enter(project_root)
        ctx = self._session(project_root, scripts_dir)
        if script not in ctx.generators:
            raise ConfigurationError(f"Unknown script: {script}. Available: {', '.join(sorted(ctx.generators))}")
        timeout = ctx.config.get_int("runtime.command_timeout", DEFAULT_COMMAND_TIMEOUT_SECONDS)
        return rollback_script(paths, ctx.generators[script].manifest, timeout_seconds=timeout)

    def restore(self, project_root: Path, rel_path: str) -> Path:
        paths = self._enter(project_root)
        return restore_backup(paths, rel_path)

    @staticmethod
    def exit_code(session: SessionResult) -> int:
        """0 on success (including "nothing to do"), 1 when a script failed."""
        return EXIT_OK if session.ok else EXIT_FATAL
