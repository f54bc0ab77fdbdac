"""scaffold_core.render

Typed template rendering.

A generator hands over a template (by name, or an inline body) plus a mapping
of named fields. Rendering uses Jinja2 with :class:`jinja2.StrictUndefined`,
so any placeholder without a field fails the render instead of silently
producing an empty string in a CI file.

Templates are plain ``.j2`` files; their contents are opaque to the runtime.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Union

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
    UndefinedError,
)

from scaffold_core.errors import TemplateRenderError


def _environment(loader: Optional[FileSystemLoader] = None) -> Environment:
    return Environment(
        loader=loader,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )


class TemplateRenderer:
    """Render named templates from a directory tree."""

    def __init__(self, templates_dir: Union[str, Path]) -> None:
        self.templates_dir = Path(templates_dir)
        self._env = _environment(FileSystemLoader(str(self.templates_dir)))

    def render(self, template: str, fields: Mapping[str, Any]) -> str:
        """Render *template* (a path relative to ``templates_dir``)."""

        try:
            tpl = self._env.get_template(template)
        except TemplateNotFound:
            raise TemplateRenderError(f"Template not found: {template} (in {self.templates_dir})")
        except TemplateError as e:
            raise TemplateRenderError(f"{template}: {e}")
        return _render(tpl, fields, label=template)


def render_string(body: str, fields: Mapping[str, Any], *, label: str = "<inline>") -> str:
    """Render an inline template body with the same strict rules."""

    try:
        tpl = _environment().from_string(body)
    except TemplateError as e:
        raise TemplateRenderError(f"{label}: {e}")
    return _render(tpl, fields, label=label)


def _render(tpl, fields: Mapping[str, Any], *, label: str) -> str:
    try:
        return tpl.render(**dict(fields))
    except UndefinedError as e:
        raise TemplateRenderError(f"{label}: unresolved placeholder ({e.message})")
    except TemplateError as e:
        raise TemplateRenderError(f"{label}: {e}")
