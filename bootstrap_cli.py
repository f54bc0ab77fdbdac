#!/usr/bin/env python3
"""
Top-level CLI for the project bootstrap runtime.

Modes:
  run       - run the selected generators against a project (default)
  plan      - print the ordered execution plan only
  config    - initialise / inspect / edit .bootstrap/bootstrap.config
  status    - completed scripts, artifacts and backups
  rollback  - undo a script (its declared rollback) or restore a backup
  manifest  - export every known manifest to YAML

Usage:
  python bootstrap_cli.py --mode config --init ./my-app
  python bootstrap_cli.py ./my-app --phase 1
  python bootstrap_cli.py ./my-app --script bootstrap-docker,bootstrap-postgres
  python bootstrap_cli.py ./my-app --all --dry-run
  python bootstrap_cli.py --mode rollback ./my-app --script bootstrap-docker

Exit codes: 0 success (including "nothing to do"), 1 fatal error,
2 configuration error (bad selection, cycle, conflict).
"""

from __future__ import annotations

import argparse
import sys

from cli.args.base import add_base_args
from cli.args.config import add_config_args
from cli.dispatch import dispatch
from pipeline.core import EXIT_CONFIG, EXIT_FATAL
from pipeline.wiring import build_pipeline
from scaffold_core.errors import ConfigurationError, DependencyError, FatalError


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scaffold project boilerplate with ordered, idempotent generators.")
    add_base_args(parser)
    add_config_args(parser)
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    pipeline = build_pipeline(debug=True if args.debug else None)

    try:
        code = dispatch(args, pipeline)
    except ConfigurationError as e:
        print(f"\n❌ Configuration error: {e}", file=sys.stderr)
        raise SystemExit(EXIT_CONFIG)
    except DependencyError as e:
        print(f"\n❌ {e}", file=sys.stderr)
        for tool, hint in sorted(e.hints.items()):
            print(f"   {tool}: {hint}", file=sys.stderr)
        raise SystemExit(EXIT_FATAL)
    except FatalError as e:
        print(f"\n❌ {e}", file=sys.stderr)
        raise SystemExit(EXIT_FATAL)
    except ValueError as e:
        # Malformed manifest headers/YAML.
        print(f"\n❌ {e}", file=sys.stderr)
        raise SystemExit(EXIT_CONFIG)
    except OSError as e:
        print(f"\n❌ {e}", file=sys.stderr)
        raise SystemExit(EXIT_FATAL)

    raise SystemExit(code)


if __name__ == "__main__":
    main()
