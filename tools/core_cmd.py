"""tools/core_cmd.py

Command-execution helpers shared by tool probes, generators and rollback.

This module deliberately avoids tool-specific knowledge. It provides:

* :func:`which_or_raise` - resolve executables reliably across environments.
* :func:`run_cmd` - run subprocesses (no shell=True) with a bounded timeout.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

logger = logging.getLogger(__name__)

# Exit code reported when a command is killed by its timeout (same as coreutils' timeout).
TIMEOUT_EXIT_CODE = 124

DEFAULT_TIMEOUT_SECONDS = 300


@dataclass(frozen=True)
class CmdResult:
    exit_code: int
    elapsed_seconds: float
    command_str: str
    stdout: str
    stderr: str
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def which_or_raise(bin_name: str, fallbacks: Optional[List[str]] = None) -> str:
    """Locate an executable and return its absolute path.

    Why this exists:
    - a missing tool should fail with its name, not a bare FileNotFoundError
    - avoids PATH surprises across nvm/brew/pipx installs
    """
    found = shutil.which(bin_name)
    if found:
        return found

    for candidate in fallbacks or []:
        p = Path(candidate)
        if p.exists() and os.access(str(p), os.X_OK):
            return str(p)

    raise FileNotFoundError(
        f"Executable '{bin_name}' not found on PATH.\n"
        f"Install it and ensure it's available to this Python process.\n"
        f"Tried fallbacks: {fallbacks or []}"
    )


def _as_text(data: Union[str, bytes, None]) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def run_cmd(
    cmd: List[str],
    *,
    cwd: Optional[Path] = None,
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
    env: Optional[Dict[str, str]] = None,
) -> CmdResult:
    """Run a subprocess and capture stdout/stderr (no ``shell=True``).

    Never raises on non-zero exit codes or timeouts (a timeout is reported as
    exit code 124); only raises on execution errors (e.g. binary not found).
    Every call is bounded: a non-positive timeout falls back to the default.
    """
    t0 = time.time()
    timeout = timeout_seconds if timeout_seconds and timeout_seconds > 0 else DEFAULT_TIMEOUT_SECONDS

    # If env is provided, merge it onto the current process environment.
    env2 = None
    if env is not None:
        env2 = os.environ.copy()
        env2.update(env)

    command_str = " ".join(cmd)
    logger.debug("run: %s (cwd=%s, timeout=%ss)", command_str, cwd, timeout)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            text=True,
            capture_output=True,
            timeout=timeout,
            env=env2,
        )
    except subprocess.TimeoutExpired as e:
        logger.warning("Command timed out after %ss: %s", timeout, command_str)
        return CmdResult(
            exit_code=TIMEOUT_EXIT_CODE,
            elapsed_seconds=time.time() - t0,
            command_str=command_str,
            stdout=_as_text(e.stdout),
            stderr=_as_text(e.stderr),
            timed_out=True,
        )

    return CmdResult(
        exit_code=proc.returncode,
        elapsed_seconds=time.time() - t0,
        command_str=command_str,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
    )
