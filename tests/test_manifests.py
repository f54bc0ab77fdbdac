from pathlib import Path

import pytest

from generators.registry import BUILTIN_MANIFESTS
from pipeline.manifests import (
    discover_shell_scripts,
    dump_manifest_yaml,
    load_manifest_yaml,
    parse_header_lines,
    parse_script_header,
)


def test_header_parsing(tmp_path: Path) -> None:
    script = tmp_path / "bootstrap-redis.sh"
    script.write_text(
        "#!/usr/bin/env bash\n"
        "# @phase 3\n"
        "# @category docker\n"
        "# @creates docker/redis.conf\n"
        "# @creates docker/redis/\n"
        "# @depends bootstrap-docker\n"
        "# @requires_tools docker, redis-cli:7.0:min\n"
        "# @idempotent yes\n"
        "# @safe true\n"
        "# @rollback rm -f docker/redis.conf\n"
        "set -euo pipefail\n"
        "# @phase 9\n",
        encoding="utf-8",
    )

    m = parse_script_header(script)

    assert m.name == "bootstrap-redis"
    assert m.phase == 3
    assert m.creates == ("docker/redis.conf", "docker/redis/")
    assert m.depends == ("bootstrap-docker",)
    assert [str(t) for t in m.requires.tools] == ["docker", "redis-cli:7.0:min"]
    assert m.idempotent and m.safe and not m.tolerant
    assert m.rollback == "rm -f docker/redis.conf"


def test_header_name_and_aliases() -> None:
    data = parse_header_lines(["# @script bootstrap-x.sh", "# @description Something", "# @unknown 1"])
    assert data["name"] == "bootstrap-x.sh"
    assert data["short"] == "Something"


def test_bad_phase_names_the_file(tmp_path: Path) -> None:
    script = tmp_path / "bootstrap-bad.sh"
    script.write_text("# @phase later\n", encoding="utf-8")

    with pytest.raises(ValueError) as ei:
        parse_script_header(script)
    assert "bootstrap-bad.sh" in str(ei.value)


def test_discover_missing_dir(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        discover_shell_scripts(tmp_path / "nope")


def test_discover_sorted_by_name(tmp_path: Path) -> None:
    for n in ("bootstrap-b.sh", "bootstrap-a.sh", "other.sh"):
        (tmp_path / n).write_text("# @phase 1\n", encoding="utf-8")

    assert [m.name for m, _ in discover_shell_scripts(tmp_path)] == ["bootstrap-a", "bootstrap-b"]


def test_builtin_registry_yaml_round_trip(tmp_path: Path) -> None:
    out = dump_manifest_yaml(tmp_path / "bootstrap-manifest.yml", list(BUILTIN_MANIFESTS.values()))

    loaded = {m.name: m for m in load_manifest_yaml(out)}

    assert loaded == BUILTIN_MANIFESTS
