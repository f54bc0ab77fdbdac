"""scaffold_core.domain.report

Per-run artifact outcomes.

An :class:`ExecutionReport` is an explicit value: each script run gets its own
report, the tracker appends to it, and the runner returns it to the caller.
Nothing is accumulated in module-level state, so two sessions in the same
process never see each other's records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional


class Outcome(str, Enum):
    CREATED = "created"
    SKIPPED_EXISTS = "skipped-exists"
    SKIPPED_BACKED_UP = "skipped-backed-up"
    WARNING = "warning"


@dataclass(frozen=True)
class ArtifactRecord:
    path: str
    outcome: Outcome
    backup_path: Optional[str] = None
    message: Optional[str] = None
    script: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"path": self.path, "outcome": self.outcome.value}
        if self.backup_path:
            out["backup_path"] = self.backup_path
        if self.message:
            out["message"] = self.message
        if self.script:
            out["script"] = self.script
        return out


@dataclass
class ExecutionReport:
    """Ordered artifact records for one script (or one merged session)."""

    script: Optional[str] = None
    records: List[ArtifactRecord] = field(default_factory=list)

    def add(
        self,
        path: str,
        outcome: Outcome,
        *,
        backup_path: Optional[str] = None,
        message: Optional[str] = None,
    ) -> ArtifactRecord:
        rec = ArtifactRecord(
            path=str(path),
            outcome=Outcome(outcome),
            backup_path=backup_path,
            message=message,
            script=self.script,
        )
        self.records.append(rec)
        return rec

    def warn(self, message: str, *, path: str = "") -> ArtifactRecord:
        return self.add(path, Outcome.WARNING, message=message)

    def extend(self, records: Iterable[ArtifactRecord]) -> None:
        self.records.extend(records)

    def _with(self, outcome: Outcome) -> List[ArtifactRecord]:
        return [r for r in self.records if r.outcome == outcome]

    @property
    def created(self) -> List[ArtifactRecord]:
        return self._with(Outcome.CREATED)

    @property
    def skipped(self) -> List[ArtifactRecord]:
        return self._with(Outcome.SKIPPED_EXISTS)

    @property
    def backed_up(self) -> List[ArtifactRecord]:
        return self._with(Outcome.SKIPPED_BACKED_UP)

    @property
    def warnings(self) -> List[ArtifactRecord]:
        return self._with(Outcome.WARNING)

    def counts(self) -> Dict[str, int]:
        return {
            "created": len(self.created),
            "skipped": len(self.skipped),
            "backed_up": len(self.backed_up),
            "warnings": len(self.warnings),
        }

    @property
    def is_noop(self) -> bool:
        """True when nothing was written (every artifact already existed)."""
        return not self.created and not self.backed_up

    def to_dict(self) -> Dict[str, Any]:
        return {
            "script": self.script,
            "counts": self.counts(),
            "records": [r.to_dict() for r in self.records],
        }

    @classmethod
    def merged(cls, reports: Iterable["ExecutionReport"]) -> "ExecutionReport":
        out = cls(script=None)
        for r in reports:
            out.extend(r.records)
        return out
