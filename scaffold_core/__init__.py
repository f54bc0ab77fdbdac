"""scaffold_core

Core package namespace for the project bootstrap runtime.

Why this exists
---------------
Generators, the orchestrator and the CLI all need to agree on the same
contracts:

* domain types (script manifests, artifact records, execution reports)
* IO/layout rules (where config, answers, logs and completion markers live)
* the layered configuration store
* the per-artifact reconcile logic

Keeping these in one dependency-light package lets ``pipeline`` and ``cli``
stay thin composition roots over reusable components.
"""

from __future__ import annotations
