from pathlib import Path

import pytest

from scaffold_core.errors import TemplateRenderError
from scaffold_core.render import TemplateRenderer, render_string


def test_render_string_fills_named_fields() -> None:
    assert render_string("port: {{ port }}\n", {"port": 8080}) == "port: 8080\n"


def test_unresolved_placeholder_is_rejected() -> None:
    with pytest.raises(TemplateRenderError) as ei:
        render_string("name: {{ project_name }}", {})
    assert "unresolved placeholder" in str(ei.value)
    assert "project_name" in str(ei.value)


def test_renderer_loads_templates_from_directory(tmp_path: Path) -> None:
    (tmp_path / "docker").mkdir()
    (tmp_path / "docker" / "compose.yml.j2").write_text("image: {{ image }}\n", encoding="utf-8")

    out = TemplateRenderer(tmp_path).render("docker/compose.yml.j2", {"image": "node:20"})

    assert out == "image: node:20\n"


def test_missing_template_is_a_render_error(tmp_path: Path) -> None:
    with pytest.raises(TemplateRenderError):
        TemplateRenderer(tmp_path).render("nope.j2", {})


def test_syntax_error_is_a_render_error() -> None:
    with pytest.raises(TemplateRenderError):
        render_string("{% if %}", {})
