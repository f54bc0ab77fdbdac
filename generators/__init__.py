"""generators

Built-in and external project generators.

A generator is a thin unit: a :class:`~scaffold_core.domain.manifest.ScriptManifest`
plus a ``generate(ctx)`` method that renders template payloads with a handful
of named fields and hands each result to the context's
:class:`~scaffold_core.artifacts.tracker.FileOperationTracker`.

Templates live under ``generators/templates/<generator>/`` as ``.j2`` files.
"""

from __future__ import annotations
