"""tools/probes.py

Tool probes: how the dependency validator learns whether a required tool is
available.

A :class:`ToolProbe` answers one question for one
:class:`~scaffold_core.domain.manifest.ToolRequirement`: is it satisfied?
Two real variants exist:

* :class:`BinaryOnPathProbe` - the binary resolves on ``PATH``; version
  constraints are ignored (used when version checks are disabled).
* :class:`VersionRangeProbe` - additionally runs the tool's version command
  (bounded by a timeout) and compares against ``min``/``max``/``exact``.

Tests pass their own ToolProbe implementation instead of touching ``PATH``.
"""

from __future__ import annotations

import re
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from scaffold_core.domain.manifest import ToolRequirement

from .core_cmd import CmdResult, run_cmd

DEFAULT_PROBE_TIMEOUT_SECONDS = 10

# Commands that print a tool's version. Anything else uses "<tool> --version".
VERSION_COMMANDS: Dict[str, List[str]] = {
    "node": ["node", "--version"],
    "python3": ["python3", "--version"],
    "docker": ["docker", "--version"],
    "git": ["git", "--version"],
    "kubectl": ["kubectl", "version", "--client"],
    "helm": ["helm", "version", "--short"],
}

_VERSION_RE = re.compile(r"v?(\d+(?:\.\d+)*)")


@dataclass(frozen=True)
class ProbeResult:
    tool: str
    found: bool
    satisfied: bool
    path: Optional[str] = None
    version: Optional[str] = None
    message: str = ""


class ToolProbe(ABC):
    """Capability interface: can this requirement be met on this machine?"""

    @abstractmethod
    def probe(self, requirement: ToolRequirement) -> ProbeResult:
        raise NotImplementedError


def parse_version(text: str) -> Optional[str]:
    """First dotted version number in *text* (``"v18.19.0"`` -> ``"18.19.0"``)."""

    m = _VERSION_RE.search(text or "")
    return m.group(1) if m else None


def _version_tuple(version: str) -> Tuple[int, ...]:
    parts: List[int] = []
    for piece in version.split("."):
        digits = re.match(r"\d+", piece)
        parts.append(int(digits.group(0)) if digits else 0)
    return tuple(parts)


def version_satisfies(actual: str, required: str, comparison: str = "min") -> bool:
    """Compare dotted versions numerically (``18.9`` < ``18.10``).

    Missing components count as zero, so ``18`` == ``18.0.0``.
    """

    a = _version_tuple(actual)
    r = _version_tuple(required)
    width = max(len(a), len(r))
    a = a + (0,) * (width - len(a))
    r = r + (0,) * (width - len(r))

    if comparison == "min":
        return a >= r
    if comparison == "max":
        return a <= r
    if comparison == "exact":
        return a == r
    raise ValueError(f"Unknown version comparison: {comparison!r}")


class BinaryOnPathProbe(ToolProbe):
    """Satisfied when the binary resolves on PATH."""

    def __init__(self, which: Callable[[str], Optional[str]] = shutil.which) -> None:
        self._which = which

    def probe(self, requirement: ToolRequirement) -> ProbeResult:
        path = self._which(requirement.name)
        if not path:
            return ProbeResult(
                tool=requirement.name,
                found=False,
                satisfied=False,
                message=f"{requirement.name} not found on PATH",
            )
        return ProbeResult(tool=requirement.name, found=True, satisfied=True, path=path)


class VersionRangeProbe(BinaryOnPathProbe):
    """Satisfied when the binary resolves and its version meets the constraint."""

    def __init__(
        self,
        *,
        which: Callable[[str], Optional[str]] = shutil.which,
        runner: Callable[..., CmdResult] = run_cmd,
        timeout_seconds: int = DEFAULT_PROBE_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(which)
        self._runner = runner
        self.timeout_seconds = timeout_seconds

    def detect_version(self, tool: str) -> Optional[str]:
        cmd = VERSION_COMMANDS.get(tool, [tool, "--version"])
        try:
            res = self._runner(cmd, timeout_seconds=self.timeout_seconds)
        except OSError:
            return None
        if res.exit_code != 0:
            return None
        return parse_version(res.stdout or res.stderr)

    def probe(self, requirement: ToolRequirement) -> ProbeResult:
        base = super().probe(requirement)
        if not base.found or not requirement.version:
            return base

        version = self.detect_version(requirement.name)
        if version is None:
            return ProbeResult(
                tool=requirement.name,
                found=True,
                satisfied=False,
                path=base.path,
                message=f"could not determine {requirement.name} version "
                f"(needs {requirement.comparison} {requirement.version})",
            )

        ok = version_satisfies(version, requirement.version, requirement.comparison)
        return ProbeResult(
            tool=requirement.name,
            found=True,
            satisfied=ok,
            path=base.path,
            version=version,
            message="" if ok else f"{requirement.name} {version} does not satisfy "
            f"{requirement.comparison} {requirement.version}",
        )


def default_probe(*, version_checks: bool = True, timeout_seconds: int = DEFAULT_PROBE_TIMEOUT_SECONDS) -> ToolProbe:
    if version_checks:
        return VersionRangeProbe(timeout_seconds=timeout_seconds)
    return BinaryOnPathProbe()
