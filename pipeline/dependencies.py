"""pipeline.dependencies

Gate a script on its declared dependencies before it produces anything.

Rules
-----
* Every required tool must resolve through the :class:`~tools.probes.ToolProbe`
  (on PATH, and inside its version range when one is declared).
* Every required script must have completed in this session or left a
  completion marker in ``.bootstrap/logs``. For idempotent scripts, a
  predecessor whose declared artifacts are all on disk also counts.
* Optional tools never block; a missing one becomes a warning.

All misses are collected first and raised together as one
:class:`~scaffold_core.errors.DependencyError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set

from scaffold_core.domain.manifest import DependencyRequirement, ScriptManifest
from scaffold_core.errors import DependencyError
from scaffold_core.io.layout import ProjectPaths
from tools.install_hints import suggest_install
from tools.probes import ProbeResult, ToolProbe

logger = logging.getLogger(__name__)


@dataclass
class ValidationOutcome:
    """Non-fatal findings of a successful dependency check."""

    warnings: List[str] = field(default_factory=list)
    probes: List[ProbeResult] = field(default_factory=list)
    satisfied_by_artifacts: List[str] = field(default_factory=list)


class DependencyValidator:
    """Session-scoped dependency checker."""

    def __init__(
        self,
        paths: ProjectPaths,
        *,
        probe: ToolProbe,
        manifests: Optional[Mapping[str, ScriptManifest]] = None,
        completed: Optional[Iterable[str]] = None,
    ) -> None:
        self.paths = paths
        self.probe = probe
        self.manifests: Dict[str, ScriptManifest] = dict(manifests or {})
        self.completed: Set[str] = set(completed or ())

    def mark_completed(self, script: str) -> None:
        self.completed.add(script)

    # ------------------------------------------------------------------

    def has_completed(self, script: str) -> bool:
        return script in self.completed or self.paths.marker_for(script).is_file()

    def artifacts_present(self, script: str) -> bool:
        """True when *script* is known and every artifact it declares exists."""

        m = self.manifests.get(script)
        if m is None or not m.creates:
            return False
        return all(self.paths.artifact(rel).exists() for rel in m.creates)

    def declare_dependencies(
        self,
        requirement: DependencyRequirement,
        *,
        script: Optional[str] = None,
        idempotent: bool = False,
    ) -> ValidationOutcome:
        """Check *requirement*; raise :class:`DependencyError` on any miss."""

        outcome = ValidationOutcome()
        missing_tools: List[str] = []
        version_failures: List[str] = []
        missing_scripts: List[str] = []
        hints: Dict[str, str] = {}

        for tool in requirement.tools:
            res = self.probe.probe(tool)
            outcome.probes.append(res)
            if not res.found:
                missing_tools.append(tool.name)
                hints[tool.name] = suggest_install(tool.name)
            elif not res.satisfied:
                version_failures.append(res.message or str(tool))
                hints[tool.name] = suggest_install(tool.name)

        for dep in requirement.scripts:
            if self.has_completed(dep):
                continue
            if idempotent and self.artifacts_present(dep):
                logger.debug("%s: %s satisfied by existing artifacts", script, dep)
                outcome.satisfied_by_artifacts.append(dep)
                continue
            missing_scripts.append(dep)

        for tool in requirement.optional:
            res = self.probe.probe(tool)
            outcome.probes.append(res)
            if not res.satisfied:
                detail = res.message or f"{tool.name} not available"
                outcome.warnings.append(f"optional tool {tool.name}: {detail} ({suggest_install(tool.name)})")

        if missing_tools or version_failures or missing_scripts:
            err = DependencyError(
                script=script,
                missing_tools=missing_tools,
                version_failures=version_failures,
                missing_scripts=missing_scripts,
                hints=hints,
            )
            logger.error("%s", err)
            raise err

        for w in outcome.warnings:
            logger.warning("%s: %s", script or "dependency check", w)
        return outcome

    def validate(self, manifest: ScriptManifest) -> ValidationOutcome:
        return self.declare_dependencies(
            manifest.requires,
            script=manifest.name,
            idempotent=manifest.idempotent,
        )
