import unittest
from pathlib import Path

from conftest import fake_probe
from generators.registry import DEFAULT_GENERATORS, GENERATORS, SUPPORTED_GENERATORS
from pipeline.core import TEMPLATES_DIR
from pipeline.execution.model import RunRequest
from pipeline.execution.plan import plan_scripts
from pipeline.execution.record import write_completion_marker
from pipeline.orchestrator import run_session
from scaffold_core.config.store import ConfigStore
from scaffold_core.io.layout import ProjectPaths
from scaffold_core.render import TemplateRenderer


class TestGeneratorRegistry(unittest.TestCase):
    def test_every_template_exists(self) -> None:
        for name, info in GENERATORS.items():
            for entry in info.templates:
                self.assertTrue((TEMPLATES_DIR / entry.template).is_file(), f"{name}: {entry.template}")

    def test_rendered_artifacts_are_declared(self) -> None:
        for name, info in GENERATORS.items():
            for entry in info.templates:
                self.assertIn(entry.artifact, info.manifest.creates, name)

    def test_every_template_renders_with_empty_config(self) -> None:
        renderer = TemplateRenderer(TEMPLATES_DIR)
        cfg = ConfigStore.from_text("")
        for name, info in GENERATORS.items():
            fields = info.fields_builder(cfg, "demo") if info.fields_builder else {}
            for entry in info.templates:
                out = renderer.render(entry.template, fields)
                self.assertTrue(out.strip(), f"{name}: {entry.template} rendered empty")

    def test_default_selection_has_no_conflicts(self) -> None:
        manifests = {k: info.manifest for k, info in GENERATORS.items()}
        plan = plan_scripts(DEFAULT_GENERATORS, manifests)
        self.assertEqual(len(plan), len(DEFAULT_GENERATORS))
        self.assertNotIn("bootstrap-mysql", DEFAULT_GENERATORS)
        self.assertIn("bootstrap-mysql", SUPPORTED_GENERATORS)


def test_cicd_writes_only_the_configured_provider(tmp_path: Path) -> None:
    paths = ProjectPaths.for_root(tmp_path)
    write_completion_marker(paths, "bootstrap-git")
    (tmp_path / ".bootstrap-answers.env").write_text("CICD_PROVIDER=gitlab\n", encoding="utf-8")

    session = run_session(
        RunRequest(project_root=tmp_path, scripts=["bootstrap-ci-cd"], persist_answers=False),
        probe=fake_probe(["git"]),
    )

    assert session.ok
    assert [r.path for r in session.report.records] == [".gitlab-ci.yml"]
    assert (tmp_path / ".gitlab-ci.yml").is_file()
    assert not (tmp_path / "Jenkinsfile").exists()


def test_database_port_follows_database_type() -> None:
    cfg = ConfigStore.from_text("[docker]\ndatabase_type = mysql\n")
    fields = GENERATORS["bootstrap-mysql"].fields_builder(cfg, "demo")
    assert fields["database_port"] == 3306
    assert fields["project_name"] == "demo"
