"""pipeline.execution.model

Shared data structures for script execution.

The execution layer is split into:

* :mod:`pipeline.execution.plan`   – pure planning (what to run, in which order)
* :mod:`pipeline.execution.runner` – running one script (side effects)
* :mod:`pipeline.execution.record` – completion markers and session records

These dataclasses contain no side effects so they can be used freely across
the planner/runner/recorder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from scaffold_core.domain.report import ExecutionReport


def now_iso() -> str:
    """Return current UTC time as ISO-8601 string."""

    return datetime.now(timezone.utc).isoformat()


STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class RunRequest:
    """Parameters for one bootstrap session."""

    project_root: Path
    scripts: Sequence[str] = ()
    phase: Optional[int] = None
    all_scripts: bool = False

    scripts_dir: Optional[Path] = None
    config_file: Optional[Path] = None
    answers_file: Optional[Path] = None

    dry_run: bool = False
    # Fold answers back into the config store after a successful session.
    persist_answers: bool = True

    @property
    def has_selection(self) -> bool:
        return bool(self.scripts) or self.phase is not None or self.all_scripts


@dataclass
class ScriptResult:
    name: str
    status: str
    report: ExecutionReport
    error: Optional[str] = None
    error_type: Optional[str] = None
    # Install hints for missing tools, when the failure was a dependency miss.
    hints: Dict[str, str] = field(default_factory=dict)
    started: str = ""
    finished: str = ""

    @property
    def ok(self) -> bool:
        return self.status == STATUS_COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "name": self.name,
            "status": self.status,
            "started": self.started,
            "finished": self.finished,
            "report": self.report.to_dict(),
        }
        if self.error:
            out["error"] = self.error
            out["error_type"] = self.error_type
        if self.hints:
            out["hints"] = dict(self.hints)
        return out


@dataclass
class SessionResult:
    """Outcome of one session: per-script results in execution order."""

    plan: List[str] = field(default_factory=list)
    results: List[ScriptResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    answers_persisted: List[str] = field(default_factory=list)
    started: str = ""
    finished: str = ""

    @property
    def failed(self) -> Optional[ScriptResult]:
        for r in self.results:
            if not r.ok:
                return r
        return None

    @property
    def ok(self) -> bool:
        return self.failed is None

    @property
    def not_run(self) -> List[str]:
        ran = {r.name for r in self.results}
        return [n for n in self.plan if n not in ran]

    @property
    def report(self) -> ExecutionReport:
        return ExecutionReport.merged(r.report for r in self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "started": self.started,
            "finished": self.finished,
            "ok": self.ok,
            "plan": list(self.plan),
            "not_run": self.not_run,
            "warnings": list(self.warnings),
            "answers_persisted": list(self.answers_persisted),
            "counts": self.report.counts(),
            "scripts": [r.to_dict() for r in self.results],
        }
