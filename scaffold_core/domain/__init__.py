"""scaffold_core.domain

Canonical data contracts shared across the runtime.
"""

from __future__ import annotations

from .manifest import DependencyRequirement, ScriptManifest, ToolRequirement
from .report import ArtifactRecord, ExecutionReport, Outcome

__all__ = [
    "ArtifactRecord",
    "DependencyRequirement",
    "ExecutionReport",
    "Outcome",
    "ScriptManifest",
    "ToolRequirement",
]
