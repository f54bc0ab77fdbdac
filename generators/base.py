"""generators.base

The contract between the runtime and a generator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from scaffold_core.artifacts.tracker import FileOperationTracker
from scaffold_core.config.store import ConfigStore
from scaffold_core.domain.manifest import ScriptManifest
from scaffold_core.domain.report import ExecutionReport
from scaffold_core.io.layout import ProjectPaths
from scaffold_core.render import TemplateRenderer


@dataclass(frozen=True)
class GeneratorContext:
    """Everything a generator may touch while it runs."""

    manifest: ScriptManifest
    paths: ProjectPaths
    config: ConfigStore
    tracker: FileOperationTracker
    renderer: TemplateRenderer
    command_timeout: int = 300

    @property
    def project_root(self) -> Path:
        return self.paths.root

    @property
    def report(self) -> ExecutionReport:
        return self.tracker.report


class Generator(ABC):
    """One runnable unit of the bootstrap session."""

    manifest: ScriptManifest

    @property
    def name(self) -> str:
        return self.manifest.name

    @abstractmethod
    def generate(self, ctx: GeneratorContext) -> None:
        """Produce this generator's artifacts through ``ctx.tracker``.

        Raise :class:`~scaffold_core.errors.FatalError` (or a subclass) to
        abort the script.
        """
        raise NotImplementedError
