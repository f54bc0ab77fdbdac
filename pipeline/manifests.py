"""pipeline.manifests

Reading and writing script manifests.

Two formats are supported:

* ``# @key value`` comment headers at the top of an external shell
  generator::

      #!/usr/bin/env bash
      # @name bootstrap-redis
      # @phase 3
      # @category docker
      # @creates docker/redis.conf
      # @depends bootstrap-docker
      # @requires_tools docker
      # @idempotent yes
      # @rollback rm -f docker/redis.conf

  ``@creates`` and ``@depends`` may repeat; list values may be comma or space
  separated. Unknown keys are ignored so scripts can carry extra metadata.

* a YAML export of the whole registry (``bootstrap-manifest.yml``), a list of
  manifest mappings under a top-level ``scripts`` key.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence, Tuple, Union

from scaffold_core.domain.manifest import ScriptManifest

HEADER_RE = re.compile(r"^#\s*@([A-Za-z_][\w-]*)\s*(.*?)\s*$")

# Header keys that accumulate across repeated lines.
LIST_KEYS = {"creates", "depends", "tools", "optional", "conflicts"}

KEY_ALIASES = {
    "script": "name",
    "description": "short",
    "requires_tools": "tools",
    "requires": "tools",
    "optional_tools": "optional",
}


def parse_header_lines(lines: Iterable[str]) -> Dict[str, Any]:
    """Collect ``@key value`` pairs from the leading comment block."""

    out: Dict[str, Any] = {}
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        if not line.startswith("#"):
            break
        m = HEADER_RE.match(line)
        if not m:
            continue
        key = m.group(1).lower().replace("-", "_")
        key = KEY_ALIASES.get(key, key)
        value = m.group(2)
        if key in LIST_KEYS:
            out.setdefault(key, []).extend(value.replace(",", " ").split())
        else:
            out[key] = value
    return out


def parse_script_header(path: Union[str, Path]) -> ScriptManifest:
    """Parse a shell generator's header into a :class:`ScriptManifest`.

    The script's file stem is used when no ``@name`` is declared.
    """

    p = Path(path)
    data = parse_header_lines(p.read_text(encoding="utf-8", errors="replace").splitlines())
    data.setdefault("name", p.stem)
    try:
        return ScriptManifest.from_dict(data)
    except ValueError as e:
        raise ValueError(f"{p}: {e}")


def discover_shell_scripts(scripts_dir: Union[str, Path], pattern: str = "bootstrap-*.sh") -> List[Tuple[ScriptManifest, Path]]:
    """Manifests for every matching script in *scripts_dir*, sorted by name."""

    d = Path(scripts_dir)
    if not d.is_dir():
        raise FileNotFoundError(f"Scripts directory not found: {d}")
    found = [(parse_script_header(p), p) for p in sorted(d.glob(pattern)) if p.is_file()]
    return sorted(found, key=lambda mp: mp[0].name)


# ----------------------------
# YAML IO
# ----------------------------

def load_manifest_yaml(path: Union[str, Path]) -> List[ScriptManifest]:
    """Load a manifest export from YAML."""
    import yaml
    p = Path(path).expanduser().resolve()
    if not p.exists():
        raise FileNotFoundError(f"Manifest file not found: {p}")
    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if isinstance(raw, dict):
        entries = raw.get("scripts") or []
    else:
        entries = raw
    if not isinstance(entries, list):
        raise ValueError(f"Manifest YAML must contain a list of scripts: {p}")
    return [ScriptManifest.from_dict(e) for e in entries if isinstance(e, dict)]


def dump_manifest_yaml(path: Union[str, Path], manifests: Sequence[ScriptManifest]) -> Path:
    """Write manifests to YAML, ordered by (phase, name)."""
    import yaml
    p = Path(path).expanduser().resolve()
    p.parent.mkdir(parents=True, exist_ok=True)
    ordered = sorted(manifests, key=lambda m: (m.phase, m.name))
    data = {"scripts": [m.to_dict() for m in ordered]}
    # Preserve a stable, readable order.
    text = yaml.safe_dump(
        data,
        sort_keys=False,
        default_flow_style=False,
        width=120,
    )
    p.write_text(text, encoding="utf-8")
    return p
