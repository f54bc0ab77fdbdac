"""scaffold_core.io.fs

Atomic, stable filesystem writers.

Why this module exists
----------------------
Generators, the config store and the session recorder all write files into the
user's project. A write interrupted half-way would leave a truncated
``docker-compose.yml`` or config file behind, which the next run would then
treat as "present-stale". Every write therefore goes through a temp file in the
target directory followed by ``os.replace()``.
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Optional


def _atomic_write_text(
    path: Path,
    write_fn,
    *,
    encoding: str = "utf-8",
    newline: Optional[str] = None,
) -> None:
    """Write a file atomically by writing to a temp file and os.replace()."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f"{p.name}.", suffix=".tmp", dir=str(p.parent))
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline=newline) as f:
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())

        # Keep the permission bits of the file we replace (e.g. executable hooks).
        if p.exists():
            shutil.copymode(p, tmp_path)
        os.replace(tmp_path, p)
    finally:
        if tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError:
                pass


def write_text_atomic(path: Path, text: str, *, encoding: str = "utf-8") -> None:
    """Write UTF-8 text atomically."""

    def _write(f) -> None:
        f.write(text)

    # newline="" keeps the template's own line endings untouched.
    _atomic_write_text(Path(path), _write, encoding=encoding, newline="")


def write_json_atomic(
    path: Path,
    data: Any,
    *,
    indent: int = 2,
    sort_keys: bool = True,
    ensure_ascii: bool = False,
    encoding: str = "utf-8",
) -> None:
    """Write JSON atomically with stable formatting."""

    def _write(f) -> None:
        json.dump(data, f, indent=indent, sort_keys=sort_keys, ensure_ascii=ensure_ascii)
        f.write("\n")

    _atomic_write_text(Path(path), _write, encoding=encoding)


def read_json(path: Path, *, encoding: str = "utf-8") -> Any:
    """Read JSON from disk."""

    with Path(path).open("r", encoding=encoding) as f:
        return json.load(f)


def content_matches(path: Path, text: str, *, encoding: str = "utf-8") -> bool:
    """True if *path* is a regular file whose bytes equal the encoded *text*."""

    p = Path(path)
    if not p.is_file():
        return False
    return p.read_bytes() == text.encode(encoding)


def copy_preserving(src: Path, dst: Path) -> Path:
    """Copy a file or directory tree to *dst*, keeping metadata.

    *dst* must not exist; backups never overwrite a previous backup.
    """

    s = Path(src)
    d = Path(dst)
    if d.exists():
        raise FileExistsError(f"Refusing to overwrite existing path: {d}")
    d.parent.mkdir(parents=True, exist_ok=True)
    if s.is_dir():
        shutil.copytree(s, d)
    else:
        shutil.copy2(s, d)
    return d
