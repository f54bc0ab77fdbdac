"""scaffold_core.config.answers

Per-invocation answers (``.bootstrap-answers.env``).

The answers file is plain dotenv syntax, one ``NAME=value`` per line. It is
read with :func:`dotenv.dotenv_values` so nothing leaks into ``os.environ``.

Answer names map to dotted config keys in two ways:

* explicit aliases for the historical names (``DATABASE_TYPE`` is stored under
  ``docker.database_type``, not ``database.type``)
* otherwise ``section.key`` <-> ``SECTION_KEY``, splitting on the first
  underscore (``CICD_NODE_VERSION`` -> ``cicd.node_version``)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from dotenv import dotenv_values

ANSWER_ALIASES: Dict[str, str] = {
    "PROJECT_NAME": "project.name",
    "PROJECT_PHASE": "project.phase",
    "GIT_USER_NAME": "git.user_name",
    "GIT_USER_EMAIL": "git.user_email",
    "GIT_DEFAULT_BRANCH": "git.default_branch",
    "DATABASE_TYPE": "docker.database_type",
    "DATABASE_NAME": "docker.database_name",
    "APP_PORT": "docker.app_port",
    "DATABASE_PORT": "docker.database_port",
    "PACKAGE_MANAGER": "packages.package_manager",
    "NODE_VERSION": "packages.node_version",
    "COVERAGE_THRESHOLD": "testing.coverage_threshold",
    "E2E_FRAMEWORK": "testing.e2e_framework",
}

# Sections the runtime itself reads; user-defined sections come from the store.
KNOWN_SECTIONS = (
    "project",
    "git",
    "docker",
    "packages",
    "testing",
    "linting",
    "cicd",
    "auto_approve",
    "dependencies",
    "runtime",
    "answers",
    "paths",
)

_KEY_TO_ALIAS: Dict[str, str] = {v: k for k, v in ANSWER_ALIASES.items()}


def env_name_for(key: str) -> str:
    """Answer name that overrides the dotted config *key*."""

    if key in _KEY_TO_ALIAS:
        return _KEY_TO_ALIAS[key]
    return key.replace(".", "_").upper()


def key_for_env(name: str, sections: Iterable[str] = ()) -> Optional[str]:
    """Dotted config key for an answer *name*, or None if it has no section.

    Section names may contain underscores (``auto_approve``), so the name is
    matched against *sections* plus :data:`KNOWN_SECTIONS`, longest prefix
    first, before falling back to the first underscore.
    """

    n = name.strip().upper()
    if n in ANSWER_ALIASES:
        return ANSWER_ALIASES[n]
    candidates = {s.lower() for s in KNOWN_SECTIONS} | {str(s).lower() for s in sections}
    for section in sorted(candidates, key=lambda s: (-len(s), s)):
        prefix = section.upper() + "_"
        if n.startswith(prefix) and len(n) > len(prefix):
            return f"{section}.{n[len(prefix):].lower()}"
    section, sep, rest = n.partition("_")
    if not sep or not section or not rest:
        return None
    return f"{section.lower()}.{rest.lower()}"


@dataclass(frozen=True)
class AnswersOverride:
    """Ephemeral name -> value overrides for a single invocation."""

    values: Mapping[str, str] = field(default_factory=dict)
    source: Optional[Path] = None

    @classmethod
    def load(cls, path: Path) -> "AnswersOverride":
        """Load answers from *path*; a missing file yields an empty override."""

        p = Path(path)
        if not p.is_file():
            return cls(values={}, source=None)
        raw = dotenv_values(p)
        # Bare names without "=" come back as None; they carry no answer.
        values = {str(k): str(v) for k, v in raw.items() if k and v is not None}
        return cls(values=values, source=p)

    @classmethod
    def from_mapping(cls, values: Mapping[str, object]) -> "AnswersOverride":
        return cls(values={str(k): str(v) for k, v in values.items() if v is not None})

    def get(self, name: str) -> Optional[str]:
        v = self.values.get(name)
        if v is None or v == "":
            return None
        return v

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        for k in sorted(self.values):
            yield k, self.values[k]

    def __len__(self) -> int:
        return len(self.values)
