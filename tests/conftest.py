from __future__ import annotations

from typing import Dict, Iterable, Optional

import pytest

from scaffold_core.domain.manifest import ToolRequirement
from tools.probes import ProbeResult, ToolProbe, version_satisfies


class FakeProbe(ToolProbe):
    """Probe backed by a fixed ``{tool: version}`` map (None = installed, version unknown)."""

    def __init__(self, installed: Optional[Dict[str, Optional[str]]] = None) -> None:
        self.installed = dict(installed or {})
        self.asked: list = []

    def probe(self, requirement: ToolRequirement) -> ProbeResult:
        self.asked.append(requirement.name)
        if requirement.name not in self.installed:
            return ProbeResult(requirement.name, found=False, satisfied=False, message=f"{requirement.name} not found on PATH")
        version = self.installed[requirement.name]
        if requirement.version and version:
            ok = version_satisfies(version, requirement.version, requirement.comparison)
            return ProbeResult(
                requirement.name,
                found=True,
                satisfied=ok,
                version=version,
                message="" if ok else f"{requirement.name} {version} does not satisfy {requirement.comparison} {requirement.version}",
            )
        return ProbeResult(requirement.name, found=True, satisfied=True, version=version)


def fake_probe(tools: Iterable[str] = ()) -> FakeProbe:
    return FakeProbe({t: None for t in tools})


@pytest.fixture(autouse=True)
def _no_config_override(monkeypatch):
    monkeypatch.delenv("BOOTSTRAP_CONFIG", raising=False)
    monkeypatch.delenv("BOOTSTRAP_DEBUG", raising=False)
