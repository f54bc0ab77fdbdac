"""CLI argument builder modules.

The top-level :mod:`bootstrap_cli` is kept thin. Groups of flags are
registered via small "arg builder" functions housed here.

Each module exposes a single public function:

- :func:`cli.args.base.add_base_args`
- :func:`cli.args.config.add_config_args`

This keeps :func:`bootstrap_cli.parse_args` from turning into a god function.
"""

from __future__ import annotations

__all__ = [
    "base",
    "config",
]
