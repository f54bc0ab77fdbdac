"""scaffold_core.domain.manifest

Immutable per-script metadata.

A manifest is what the orchestrator and the dependency validator know about a
generator *without running it*: its phase, the artifacts it declares, which
tools and predecessor scripts it needs, and how to undo it.

Manifests come from two places:

* built-in generators declare them in :mod:`generators.registry`
* external shell generators declare them in ``# @key value`` comment headers
  (parsed by :mod:`pipeline.manifests`)

Both end up as the same frozen dataclass, and both round-trip through
``to_dict`` / ``from_dict`` so the registry can be exported to YAML.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

VALID_COMPARISONS = ("min", "max", "exact")


def split_list(value: Any) -> Tuple[str, ...]:
    """Split a comma/space separated string (or a list) into clean tokens."""

    if value is None:
        return ()
    if isinstance(value, str):
        raw: Iterable[str] = value.replace(",", " ").split()
    else:
        raw = [str(v) for v in value]
    out: List[str] = []
    for token in raw:
        t = token.strip()
        if t and t.lower() != "none" and t not in out:
            out.append(t)
    return tuple(out)


def parse_flag(value: Any, *, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in {"yes", "true", "1", "on"}:
        return True
    if s in {"no", "false", "0", "off"}:
        return False
    return default


@dataclass(frozen=True)
class ToolRequirement:
    """A required (or optional) external tool, optionally version-constrained.

    String form: ``name`` or ``name:version`` or ``name:version:comparison``
    where comparison is one of ``min`` (default), ``max``, ``exact``.
    """

    name: str
    version: Optional[str] = None
    comparison: str = "min"

    @classmethod
    def parse(cls, text: str) -> "ToolRequirement":
        parts = [p.strip() for p in str(text).split(":")]
        name = parts[0]
        if not name:
            raise ValueError(f"Empty tool name in requirement: {text!r}")
        version = parts[1] if len(parts) > 1 and parts[1] else None
        comparison = parts[2].lower() if len(parts) > 2 and parts[2] else "min"
        if comparison not in VALID_COMPARISONS:
            raise ValueError(
                f"Invalid version comparison {comparison!r} in {text!r}. Valid: {list(VALID_COMPARISONS)}"
            )
        return cls(name=name, version=version, comparison=comparison)

    def __str__(self) -> str:
        if not self.version:
            return self.name
        return f"{self.name}:{self.version}:{self.comparison}"


@dataclass(frozen=True)
class DependencyRequirement:
    """What a script needs before it may run."""

    tools: Tuple[ToolRequirement, ...] = ()
    scripts: Tuple[str, ...] = ()
    optional: Tuple[ToolRequirement, ...] = ()

    @classmethod
    def build(
        cls,
        *,
        tools: Any = None,
        scripts: Any = None,
        optional: Any = None,
    ) -> "DependencyRequirement":
        return cls(
            tools=tuple(ToolRequirement.parse(t) for t in split_list(tools)),
            scripts=split_list(scripts),
            optional=tuple(ToolRequirement.parse(t) for t in split_list(optional)),
        )

    @property
    def is_empty(self) -> bool:
        return not (self.tools or self.scripts or self.optional)


@dataclass(frozen=True)
class ScriptManifest:
    """Static metadata describing one generator."""

    name: str
    phase: int
    category: str = "general"
    creates: Tuple[str, ...] = ()
    requires: DependencyRequirement = field(default_factory=DependencyRequirement)
    conflicts: Tuple[str, ...] = ()

    # Re-running a script whose artifacts exist is harmless.
    idempotent: bool = False
    # The script never destroys user data.
    safe: bool = False
    # Verification failures become warnings (only honoured when ``safe``).
    tolerant: bool = False

    rollback: Optional[str] = None
    short: str = ""
    config_section: Optional[str] = None

    @property
    def depends(self) -> Tuple[str, ...]:
        return self.requires.scripts

    @property
    def verification_is_fatal(self) -> bool:
        return not (self.safe and self.tolerant)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScriptManifest":
        """Build a manifest from a loose mapping (YAML or parsed headers)."""

        name = str(data.get("name") or data.get("script") or "").strip()
        if not name:
            raise ValueError("Manifest is missing a name")
        if name.endswith(".sh"):
            name = name[: -len(".sh")]

        try:
            phase = int(data.get("phase", 1))
        except (TypeError, ValueError):
            raise ValueError(f"{name}: phase must be an integer, got {data.get('phase')!r}")

        rollback = data.get("rollback")
        return cls(
            name=name,
            phase=phase,
            category=str(data.get("category") or "general"),
            creates=split_list(data.get("creates")),
            requires=DependencyRequirement.build(
                tools=data.get("tools", data.get("requires_tools")),
                scripts=data.get("depends"),
                optional=data.get("optional"),
            ),
            conflicts=split_list(data.get("conflicts")),
            idempotent=parse_flag(data.get("idempotent")),
            safe=parse_flag(data.get("safe")),
            tolerant=parse_flag(data.get("tolerant")),
            rollback=str(rollback).strip() if rollback else None,
            short=str(data.get("short") or data.get("description") or ""),
            config_section=(str(data["config_section"]) if data.get("config_section") else None),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "name": self.name,
            "phase": self.phase,
            "category": self.category,
            "short": self.short,
            "creates": list(self.creates),
            "depends": list(self.requires.scripts),
            "tools": [str(t) for t in self.requires.tools],
            "optional": [str(t) for t in self.requires.optional],
            "conflicts": list(self.conflicts),
            "idempotent": self.idempotent,
            "safe": self.safe,
            "tolerant": self.tolerant,
        }
        if self.rollback:
            out["rollback"] = self.rollback
        if self.config_section:
            out["config_section"] = self.config_section
        return out
