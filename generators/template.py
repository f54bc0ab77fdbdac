"""generators.template

Template-backed generator built from a :class:`~generators.registry.GeneratorInfo`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from .actions import run_action
from .base import Generator, GeneratorContext
from .registry import GeneratorInfo


class TemplateGenerator(Generator):
    """Render every template entry, then hand the results to the tracker.

    All templates are rendered before the first write, so an unresolved
    placeholder aborts the script with nothing written.
    """

    def __init__(self, info: GeneratorInfo) -> None:
        self.info = info
        self.manifest = info.manifest

    def fields(self, ctx: GeneratorContext) -> Dict[str, Any]:
        if self.info.fields_builder is None:
            return {}
        return dict(self.info.fields_builder(ctx.config, ctx.project_root.name))

    def generate(self, ctx: GeneratorContext) -> None:
        fields = self.fields(ctx)

        rendered: List[Tuple[str, str]] = []
        for entry in self.info.templates:
            if entry.when is not None and not entry.when(ctx.config):
                continue
            rendered.append((entry.artifact, ctx.renderer.render(entry.template, fields)))

        for rel in self.manifest.creates:
            if rel.endswith("/"):
                ctx.tracker.ensure_dir(rel)

        for artifact, content in rendered:
            ctx.tracker.write_file(artifact, content)

        for action in self.info.actions:
            run_action(action, ctx)
