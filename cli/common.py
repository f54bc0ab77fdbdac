"""cli.common

Small shared helpers for CLI command modules.

The CLI is split by "mode" (run/plan/config/status/rollback/manifest). Some
small helpers are useful across multiple modes; keeping them here avoids
subtle drift when two files copy/paste the same logic.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from generators.registry import GENERATOR_LABELS
from pipeline.execution.model import RunRequest, SessionResult
from scaffold_core.domain.manifest import ScriptManifest
from scaffold_core.domain.report import ExecutionReport, Outcome

OUTCOME_GLYPHS = {
    Outcome.CREATED: "✅",
    Outcome.SKIPPED_EXISTS: "ℹ️ ",
    Outcome.SKIPPED_BACKED_UP: "💾",
    Outcome.WARNING: "⚠️ ",
}


def parse_csv(raw: Optional[str]) -> list[str]:
    """Parse a comma-separated list value into a list of non-empty strings."""
    if not raw:
        return []
    return [x.strip() for x in raw.split(",") if x.strip()]


def flatten_csv(values: Iterable[str]) -> List[str]:
    out: List[str] = []
    for v in values or []:
        out.extend(parse_csv(v))
    return out


def build_run_request(args) -> RunRequest:
    return RunRequest(
        project_root=Path(args.project_root),
        scripts=flatten_csv(args.scripts),
        phase=args.phase,
        all_scripts=bool(args.all_scripts),
        scripts_dir=Path(args.scripts_dir) if args.scripts_dir else None,
        config_file=Path(args.config_file) if args.config_file else None,
        answers_file=Path(args.answers_file) if args.answers_file else None,
        dry_run=bool(args.dry_run),
        persist_answers=not bool(args.no_persist_answers),
    )


def print_plan(plan: Sequence[ScriptManifest]) -> None:
    if not plan:
        print("ℹ️  Nothing to do: no scripts selected (use --script, --phase or --all).")
        return
    print("\n📋 Execution plan")
    for i, m in enumerate(plan, start=1):
        deps = f"  (after: {', '.join(m.depends)})" if m.depends else ""
        label = GENERATOR_LABELS.get(m.name) or m.short
        about = f" - {label}" if label else ""
        print(f"  {i:>2}. [phase {m.phase}] {m.name}{about}{deps}")


def print_report(report: ExecutionReport) -> None:
    for rec in report.records:
        glyph = OUTCOME_GLYPHS.get(rec.outcome, "-")
        line = f"    {glyph} {rec.outcome.value:<18} {rec.path}"
        if rec.backup_path:
            line += f"  (backup: {rec.backup_path})"
        if rec.message:
            line += f"  - {rec.message}"
        print(line)


def print_summary(session: SessionResult) -> None:
    for w in session.warnings:
        print(f"⚠️  config: {w}")

    for result in session.results:
        mark = "✅" if result.ok else "❌"
        print(f"\n{mark} {result.name}")
        print_report(result.report)
        if result.error:
            print(f"    ❌ {result.error}")
        for tool, hint in sorted(result.hints.items()):
            print(f"       {tool}: {hint}")

    counts = session.report.counts()
    print("\n----------------------------------------")
    print(
        f"Created: {counts['created']}  Skipped: {counts['skipped']}  "
        f"Backed up: {counts['backed_up']}  Warnings: {counts['warnings']}"
    )
    if session.not_run and session.results:
        print(f"Not run: {', '.join(session.not_run)}")
    if session.answers_persisted:
        print(f"Saved answers: {', '.join(session.answers_persisted)}")
