"""pipeline.wiring

This module is the **composition root** for the Python runtime.

"Composition root" means: the single place where we *assemble* the running
application from its building blocks:

- configure logging (console + the project's central run log)
- choose real vs stub implementations (tool probes, clocks) for testing
- build the high-level pipeline facade object

Keeping this wiring in one place prevents configuration and dependency setup
from being duplicated across entrypoints (CLI, scripts, CI).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from pipeline.pipeline import BootstrapPipeline
from scaffold_core.io.layout import ProjectPaths

LOG_FORMAT = "[%(asctime)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(message)s"

_FILE_HANDLER_ATTR = "_bootstrap_run_log"


def debug_enabled() -> bool:
    return os.environ.get("BOOTSTRAP_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def configure_logging(*, debug: Optional[bool] = None, console: bool = True) -> None:
    """Install the console handler on the root logger (idempotent)."""

    level = logging.DEBUG if (debug_enabled() if debug is None else debug) else logging.INFO
    root = logging.getLogger()
    root.setLevel(level)
    if console and not any(getattr(h, "_bootstrap_console", False) for h in root.handlers):
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        h.setLevel(level)
        setattr(h, "_bootstrap_console", True)
        root.addHandler(h)


def attach_run_log(paths: ProjectPaths) -> Path:
    """Append everything logged from now on to the project's central log.

    Replaces a run-log handler attached for a different project.
    """

    root = logging.getLogger()
    for h in list(root.handlers):
        if getattr(h, _FILE_HANDLER_ATTR, False):
            root.removeHandler(h)
            h.close()

    paths.logs_dir.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(paths.log_file, encoding="utf-8")
    fh.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    fh.setLevel(logging.DEBUG)
    setattr(fh, _FILE_HANDLER_ATTR, True)
    root.addHandler(fh)
    return paths.log_file


def build_pipeline(*, log: bool = True, debug: Optional[bool] = None) -> BootstrapPipeline:
    """Build the high-level pipeline facade.

    As the runtime grows, this becomes the place to swap implementations
    (probes, renderers) for tests or alternative environments.
    """

    if log:
        configure_logging(debug=debug)
    return BootstrapPipeline(on_project=attach_run_log if log else None)
