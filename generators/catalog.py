"""generators.catalog

Assemble the runnable generator set: built-ins plus external shell scripts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from scaffold_core.domain.manifest import ScriptManifest
from scaffold_core.errors import ConfigurationError

from .base import Generator
from .registry import DEFAULT_GENERATORS, GENERATORS
from .shell import ShellScriptGenerator
from .template import TemplateGenerator


def builtin_generators() -> Dict[str, Generator]:
    return {name: TemplateGenerator(info) for name, info in GENERATORS.items()}


def load_generators(shell_scripts: Iterable[Tuple[ScriptManifest, Path]] = ()) -> Dict[str, Generator]:
    """Built-in generators plus the given ``(manifest, path)`` shell scripts.

    A shell script may not reuse a built-in name.
    """

    out = builtin_generators()
    for manifest, path in shell_scripts:
        if manifest.name in out:
            raise ConfigurationError(
                f"{path}: script name {manifest.name!r} collides with an existing generator"
            )
        out[manifest.name] = ShellScriptGenerator(manifest, path)
    return out


def default_selection(generators: Dict[str, Generator]) -> List[str]:
    """Names eligible for ``--all`` / ``--phase`` (opt-in built-ins excluded)."""

    optional_builtins = set(GENERATORS) - set(DEFAULT_GENERATORS)
    return sorted(n for n in generators if n not in optional_builtins)
