from __future__ import annotations

import argparse


MODES = ["run", "plan", "config", "status", "rollback", "manifest"]


def add_base_args(parser: argparse.ArgumentParser) -> None:
    """Register CLI flags that are shared across multiple modes.

    This includes:
    - mode selection
    - the target project root
    - script selection (names, phase, all)
    - execution knobs
    """

    parser.add_argument(
        "--mode",
        choices=MODES,
        default="run",
        help=(
            "run = run the selected scripts (default), plan = print the execution order only, "
            "config = inspect/initialise bootstrap.config, status = completed scripts and backups, "
            "rollback = undo a script or restore a backup, manifest = export all manifests to YAML"
        ),
    )
    parser.add_argument(
        "project_root",
        nargs="?",
        default=".",
        help="Target project root (default: current directory). Must already exist.",
    )

    # Script selection
    parser.add_argument(
        "--script",
        "--scripts",
        dest="scripts",
        action="append",
        default=[],
        help="Script name(s) to run; repeatable and/or comma-separated (e.g. bootstrap-git,bootstrap-docker).",
    )
    parser.add_argument("--phase", type=int, default=None, help="Run every default script of this phase.")
    parser.add_argument("--all", dest="all_scripts", action="store_true", help="Run every default script.")
    parser.add_argument(
        "--scripts-dir",
        default=None,
        help="Directory with external bootstrap-*.sh generators (default: config paths.scripts_dir).",
    )

    # Inputs
    parser.add_argument("--config-file", default=None, help="Override the config store path (env: BOOTSTRAP_CONFIG).")
    parser.add_argument(
        "--answers-file",
        default=None,
        help="Answers file (default: <project>/.bootstrap-answers.env).",
    )

    # Execution knobs
    parser.add_argument("--dry-run", action="store_true", help="Print the plan but do not execute.")
    parser.add_argument(
        "--no-persist-answers",
        action="store_true",
        help="Do not fold answers back into bootstrap.config after a successful run.",
    )
    parser.add_argument("--json", action="store_true", help="(status|plan) Print machine-readable JSON.")
    parser.add_argument("--debug", action="store_true", help="Verbose logging (env: BOOTSTRAP_DEBUG=true).")
