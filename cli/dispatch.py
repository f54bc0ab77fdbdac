from __future__ import annotations

import argparse

from cli.commands.config import run_config
from cli.commands.manifest import run_manifest
from cli.commands.rollback import run_rollback
from cli.commands.run import run_plan, run_run
from cli.commands.status import run_status
from pipeline.pipeline import BootstrapPipeline


def dispatch(args: argparse.Namespace, pipeline: BootstrapPipeline) -> int:
    mode = args.mode or "run"

    if mode == "plan":
        return int(run_plan(args, pipeline))
    if mode == "config":
        return int(run_config(args))
    if mode == "status":
        return int(run_status(args, pipeline))
    if mode == "rollback":
        return int(run_rollback(args, pipeline))
    if mode == "manifest":
        return int(run_manifest(args, pipeline))
    return int(run_run(args, pipeline))
