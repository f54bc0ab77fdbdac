"""generators.shell

External shell generators.

A ``bootstrap-*.sh`` script declares its manifest in ``# @key value`` header
comments and is run as ``bash <script> <project_root>`` from the project root,
bounded by the runtime command timeout. The script writes its own files; the
tracker snapshots each declared artifact before the run (backing up existing
files when approved), then records it as created, unchanged, backed up, or
modified without a backup, and verifies it.

Config values of the script's ``config_section`` are exported as
``SECTION_KEY`` environment variables, next to ``BOOTSTRAP_PROJECT_ROOT``,
``BOOTSTRAP_CONFIG`` and ``BOOTSTRAP_ANSWERS``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

from scaffold_core.domain.manifest import ScriptManifest
from scaffold_core.errors import FatalError
from tools.core_cmd import run_cmd, which_or_raise

from .base import Generator, GeneratorContext

logger = logging.getLogger(__name__)

STDERR_TAIL_LINES = 20


class ShellScriptGenerator(Generator):
    def __init__(self, manifest: ScriptManifest, script_path: Path, *, shell: str = "bash") -> None:
        self.manifest = manifest
        self.script_path = Path(script_path)
        self.shell = shell

    def environment(self, ctx: GeneratorContext) -> Dict[str, str]:
        env: Dict[str, str] = {
            "BOOTSTRAP_PROJECT_ROOT": str(ctx.project_root),
            "BOOTSTRAP_CONFIG": str(ctx.paths.config_file),
            "BOOTSTRAP_ANSWERS": str(ctx.paths.answers_file),
            "BOOTSTRAP_SCRIPT": self.manifest.name,
        }
        section = self.manifest.config_section
        if section:
            for key, value in ctx.config.section_view(section).items():
                env[f"{section}_{key}".upper()] = value
        return env

    def generate(self, ctx: GeneratorContext) -> None:
        try:
            shell_path = which_or_raise(self.shell)
        except FileNotFoundError:
            raise FatalError(f"{self.shell} not found on PATH; cannot run {self.script_path.name}", script=self.name)

        before = [ctx.tracker.snapshot(rel) for rel in self.manifest.creates]

        res = run_cmd(
            [shell_path, str(self.script_path), str(ctx.project_root)],
            cwd=ctx.project_root,
            timeout_seconds=ctx.command_timeout,
            env=self.environment(ctx),
        )
        if res.stdout.strip():
            logger.info("%s output:\n%s", self.name, res.stdout.rstrip())

        if res.timed_out:
            raise FatalError(f"{self.script_path.name} timed out after {ctx.command_timeout}s", script=self.name)
        if res.exit_code != 0:
            tail = "\n".join(res.stderr.strip().splitlines()[-STDERR_TAIL_LINES:])
            raise FatalError(
                f"{self.script_path.name} exited with code {res.exit_code}" + (f":\n{tail}" if tail else ""),
                script=self.name,
            )

        for snap in before:
            ctx.tracker.observe(snap)
