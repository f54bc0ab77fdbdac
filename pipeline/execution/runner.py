"""pipeline.execution.runner

Run one generator end to end.

Sequence for a single script::

    validate dependencies  (DependencyError -> nothing written)
    generate artifacts     (tracker: create / skip / back up, then verify)
    write completion marker

A :class:`~scaffold_core.errors.FatalError` anywhere stops the script. The
result still carries the partial report so the caller can show what was
written before the failure. Nothing is rolled back automatically.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from generators.base import Generator, GeneratorContext
from pipeline.dependencies import DependencyValidator
from scaffold_core.artifacts.tracker import FileOperationTracker
from scaffold_core.config.store import ConfigStore
from scaffold_core.domain.report import ExecutionReport
from scaffold_core.errors import FatalError
from scaffold_core.io.layout import ProjectPaths
from scaffold_core.render import TemplateRenderer

from .model import STATUS_COMPLETED, STATUS_FAILED, ScriptResult, now_iso
from .record import write_completion_marker

logger = logging.getLogger(__name__)


def run_script(
    generator: Generator,
    *,
    paths: ProjectPaths,
    config: ConfigStore,
    validator: DependencyValidator,
    renderer: TemplateRenderer,
    command_timeout: int = 300,
    clock: Callable[[], datetime] = datetime.now,
) -> ScriptResult:
    manifest = generator.manifest
    report = ExecutionReport(script=manifest.name)
    started = now_iso()
    warnings_before = len(config.warnings)

    logger.info("▶ %s (phase %s)", manifest.name, manifest.phase)
    try:
        outcome = validator.validate(manifest)
        for w in outcome.warnings:
            report.warn(w)

        tracker = FileOperationTracker(
            paths.root,
            report,
            backup_approved=config.get_bool("auto_approve.backup_existing_files", False),
            tolerant=not manifest.verification_is_fatal,
            clock=clock,
        )
        ctx = GeneratorContext(
            manifest=manifest,
            paths=paths,
            config=config,
            tracker=tracker,
            renderer=renderer,
            command_timeout=command_timeout,
        )
        generator.generate(ctx)

        for w in config.warnings[warnings_before:]:
            report.warn(w)

        write_completion_marker(paths, manifest.name)
        validator.mark_completed(manifest.name)
    except FatalError as e:
        if e.script is None:
            e.script = manifest.name
        return _failed(manifest.name, report, started, e)
    except OSError as e:
        # Writes outside the tracker (markers, generator side files).
        return _failed(manifest.name, report, started, FatalError(f"filesystem error: {e}", script=manifest.name))

    counts = report.counts()
    logger.info(
        "%s: %d created, %d skipped, %d backed up, %d warnings",
        manifest.name,
        counts["created"],
        counts["skipped"],
        counts["backed_up"],
        counts["warnings"],
    )
    return ScriptResult(
        name=manifest.name,
        status=STATUS_COMPLETED,
        report=report,
        started=started,
        finished=now_iso(),
    )


def _failed(name: str, report: ExecutionReport, started: str, err: FatalError) -> ScriptResult:
    logger.error("%s failed: %s", name, err)
    return ScriptResult(
        name=name,
        status=STATUS_FAILED,
        report=report,
        error=str(err),
        error_type=type(err).__name__,
        hints=dict(getattr(err, "hints", {}) or {}),
        started=started,
        finished=now_iso(),
    )

