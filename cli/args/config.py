from __future__ import annotations

import argparse


def add_config_args(parser: argparse.ArgumentParser) -> None:
    """Flags for the config, rollback and manifest modes."""

    g = parser.add_argument_group("config mode")
    g.add_argument("--init", action="store_true", help="Create/complete bootstrap.config with detected values.")
    g.add_argument("--force", action="store_true", help="(--init) Overwrite existing values with detected ones.")
    g.add_argument("--show", action="store_true", help="Print the effective config (answers applied).")
    g.add_argument("--get", metavar="KEY", default=None, help="Print one value (section.key).")
    g.add_argument("--set", metavar="KEY=VALUE", action="append", default=[], help="Persist a value; repeatable.")
    g.add_argument("--validate", action="store_true", help="Report invalid config values.")

    r = parser.add_argument_group("rollback mode")
    r.add_argument(
        "--restore",
        metavar="PATH",
        default=None,
        help="Restore the newest backup of PATH (relative to the project root).",
    )

    m = parser.add_argument_group("manifest mode")
    m.add_argument("--out", default=None, help="Output YAML path (default: <project>/bootstrap-manifest.yml).")
