# pipeline/core.py
from __future__ import annotations

from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
GENERATORS_DIR = ROOT_DIR / "generators"
TEMPLATES_DIR = GENERATORS_DIR / "templates"

# Process exit codes shared by the CLI and the facade.
EXIT_OK = 0
EXIT_FATAL = 1
EXIT_CONFIG = 2

DEFAULT_COMMAND_TIMEOUT_SECONDS = 300
DEFAULT_CHECK_TIMEOUT_SECONDS = 10

SHELL_SCRIPT_GLOB = "bootstrap-*.sh"
MANIFEST_FILENAME = "bootstrap-manifest.yml"
