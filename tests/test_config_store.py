import unittest
from pathlib import Path
import tempfile

from scaffold_core.config.answers import KNOWN_SECTIONS, AnswersOverride, env_name_for, key_for_env
from scaffold_core.config.defaults import DEFAULT_CONFIG, init_config, sanitize_project_name
from scaffold_core.config.store import ConfigStore
from scaffold_core.config.validation import validate_config


class TestConfigStoreLookup(unittest.TestCase):
    def test_missing_key_returns_default(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            store = ConfigStore(Path(td) / "missing.config")

            self.assertEqual("3000", store.get("docker.app_port", "3000"))
            self.assertIsNone(store.get("docker.app_port"))
            # Malformed keys are just "undeclared".
            self.assertEqual("x", store.get("no_section_here", "x"))

    def test_persisted_value_beats_default(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            cfg = Path(td) / "bootstrap.config"
            cfg.write_text("[docker]\napp_port = 8080\n", encoding="utf-8")

            store = ConfigStore(cfg)
            self.assertEqual("8080", store.get("docker.app_port", "3000"))

    def test_answers_beat_persisted_value(self) -> None:
        store = ConfigStore.from_text(
            "[docker]\napp_port = 8080\n[cicd]\nnode_version = 20\n",
            answers=AnswersOverride.from_mapping({"APP_PORT": "9090", "CICD_NODE_VERSION": "18"}),
        )

        self.assertEqual("9090", store.get("docker.app_port", "3000"))
        self.assertEqual("18", store.get("cicd.node_version"))
        # Reading never changes the persisted layer.
        self.assertEqual("8080", store.persisted("docker.app_port"))

    def test_empty_answer_falls_through(self) -> None:
        store = ConfigStore.from_text(
            "[docker]\napp_port = 8080\n",
            answers=AnswersOverride.from_mapping({"APP_PORT": ""}),
        )
        self.assertEqual("8080", store.get("docker.app_port"))

    def test_typed_accessors_fall_back_and_warn(self) -> None:
        store = ConfigStore.from_text("[git]\ninit_repository = maybe\n[docker]\napp_port = lots\n")

        self.assertTrue(store.get_bool("git.init_repository", True))
        self.assertEqual(3000, store.get_int("docker.app_port", 3000))
        self.assertEqual(2, len(store.warnings))


class TestUpdateFromAnswers(unittest.TestCase):
    def test_merge_keeps_unmentioned_keys(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            cfg = Path(td) / ".bootstrap" / "bootstrap.config"
            cfg.parent.mkdir()
            cfg.write_text("[project]\nname = demo\n[docker]\napp_port = 8080\n", encoding="utf-8")

            store = ConfigStore(cfg)
            updated = store.update_from_answers(AnswersOverride.from_mapping({"APP_PORT": "9090"}))
            self.assertEqual(["docker.app_port"], updated)

            reloaded = ConfigStore(cfg)
            self.assertEqual("9090", reloaded.get("docker.app_port"))
            self.assertEqual("demo", reloaded.get("project.name"))

    def test_unmappable_answer_is_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            store = ConfigStore(Path(td) / "bootstrap.config")
            updated = store.update_from_answers(AnswersOverride.from_mapping({"VERBOSE": "1"}))

            self.assertEqual([], updated)
            self.assertFalse((Path(td) / "bootstrap.config").exists())
            self.assertTrue(any("VERBOSE" in w for w in store.warnings))


def test_answers_file_is_read_with_dotenv_syntax(tmp_path: Path) -> None:
    p = tmp_path / ".bootstrap-answers.env"
    p.write_text('# answers\nAPP_PORT=7000\nPROJECT_NAME="my app"\n', encoding="utf-8")

    answers = AnswersOverride.load(p)

    assert answers.get("APP_PORT") == "7000"
    assert answers.get("PROJECT_NAME") == "my app"
    assert answers.source == p
    assert "APP_PORT" in answers


def test_missing_answers_file_is_empty(tmp_path: Path) -> None:
    answers = AnswersOverride.load(tmp_path / "nope.env")
    assert len(answers) == 0
    assert answers.source is None


def test_answer_name_mapping() -> None:
    assert key_for_env("DATABASE_TYPE") == "docker.database_type"
    assert key_for_env("CICD_PROVIDER") == "cicd.provider"
    assert key_for_env("VERBOSE") is None
    assert env_name_for("docker.database_type") == "DATABASE_TYPE"
    assert env_name_for("cicd.provider") == "CICD_PROVIDER"
    assert key_for_env("AUTO_APPROVE_BACKUP_EXISTING_FILES") == "auto_approve.backup_existing_files"
    assert key_for_env("MY_TEAM_OWNER", sections=["my_team"]) == "my_team.owner"


def test_underscored_section_answer_round_trips(tmp_path: Path) -> None:
    cfg = tmp_path / "bootstrap.config"
    store = ConfigStore(cfg)

    updated = store.update_from_answers(
        AnswersOverride.from_mapping({"AUTO_APPROVE_BACKUP_EXISTING_FILES": "true"})
    )

    assert updated == ["auto_approve.backup_existing_files"]
    reloaded = ConfigStore(cfg)
    assert reloaded.sections() == ["auto_approve"]
    assert reloaded.get("auto_approve.backup_existing_files") == "true"
    assert reloaded.get_bool("auto_approve.backup_existing_files") is True


def test_known_sections_cover_defaults() -> None:
    assert set(DEFAULT_CONFIG) <= {s for s in KNOWN_SECTIONS}


def test_init_config_detects_and_keeps_existing(tmp_path: Path) -> None:
    (tmp_path / "yarn.lock").write_text("", encoding="utf-8")
    (tmp_path / ".nvmrc").write_text("v18.19.0\n", encoding="utf-8")

    store = ConfigStore(tmp_path / "bootstrap.config")
    store.set("docker.app_port", "8000")

    written = init_config(store, tmp_path, git_info={"user_name": "Ada"})

    assert "docker.app_port" not in written
    assert store.get("docker.app_port") == "8000"
    assert store.get("packages.package_manager") == "yarn"
    assert store.get("packages.node_version") == "18"
    assert store.get("git.user_name") == "Ada"
    assert store.get("project.name") == sanitize_project_name(tmp_path.name)
    assert store.get("auto_approve.backup_existing_files") == "false"


def test_validate_config_reports_bad_values() -> None:
    store = ConfigStore.from_text(
        "[docker]\napp_port = 80\n[packages]\npackage_manager = bower\n[testing]\ncoverage_threshold = 50\n"
    )

    warnings = validate_config(store)

    assert len(warnings) == 2
    assert any("docker.app_port" in w for w in warnings)
    assert any("packages.package_manager" in w for w in warnings)


if __name__ == "__main__":
    unittest.main()
