"""scaffold_core.errors

Exception taxonomy for the bootstrap runtime.

Two families exist:

* :class:`FatalError` aborts the current script and the rest of the session.
  The CLI maps it to exit code 1.
* :class:`ConfigurationError` is raised while planning, before any script
  runs (cycles, conflicting selections, unknown names). Exit code 2.

Warnings are *not* exceptions; they are recorded in the
:class:`~scaffold_core.domain.report.ExecutionReport`.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence


class BootstrapError(Exception):
    """Base class for every error raised by the runtime."""


class FatalError(BootstrapError):
    """An error that aborts the current script."""

    def __init__(self, message: str, *, script: Optional[str] = None) -> None:
        super().__init__(message)
        self.script = script


class DependencyError(FatalError):
    """One or more declared dependencies are not satisfied.

    All misses are collected before raising so the user sees every problem at
    once instead of fixing them one run at a time.
    """

    def __init__(
        self,
        *,
        script: Optional[str] = None,
        missing_tools: Sequence[str] = (),
        version_failures: Sequence[str] = (),
        missing_scripts: Sequence[str] = (),
        hints: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.missing_tools: List[str] = list(missing_tools)
        self.version_failures: List[str] = list(version_failures)
        self.missing_scripts: List[str] = list(missing_scripts)
        self.hints: Dict[str, str] = dict(hints or {})

        parts: List[str] = []
        if self.missing_tools:
            parts.append("missing required tools: " + ", ".join(self.missing_tools))
        if self.version_failures:
            parts.append("version requirements not met: " + "; ".join(self.version_failures))
        if self.missing_scripts:
            parts.append("required scripts have not run: " + ", ".join(self.missing_scripts))

        prefix = f"{script}: " if script else ""
        super().__init__(prefix + ("; ".join(parts) or "dependency check failed"), script=script)


class VerificationError(FatalError):
    """A written artifact could not be verified on disk."""

    def __init__(self, path: str, reason: str, *, script: Optional[str] = None) -> None:
        super().__init__(f"verification failed for {path}: {reason}", script=script)
        self.path = path
        self.reason = reason


class ProjectRootError(FatalError):
    """The target project root is missing or not writable."""


class TemplateRenderError(FatalError):
    """A template could not be rendered (e.g. an unresolved placeholder)."""


class ConfigurationError(BootstrapError):
    """Invalid selection or manifest graph, detected before execution."""

    def __init__(self, message: str, *, cycle: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.cycle: List[str] = list(cycle)
