"""generators.registry

Central registry of built-in generators.

Why this exists
---------------
The orchestrator, the dependency validator, the manifest exporter and the CLI
all need to agree on the *same* generator facts:

- which generators exist (validation, ``--all``)
- their phase, dependencies, conflicts and declared artifacts (the manifest)
- which template renders which artifact
- which config values feed the template fields

Defining them *once* here keeps those facts from drifting.

What belongs here (clean-architecture rule)
------------------------------------------
Entries may carry **small, pure hooks**:

- ``fields_builder``: config -> template fields
- ``TemplateEntry.when``: config -> should this artifact be written

These hooks must remain *pure*: no filesystem writes, no subprocess
execution. Side effects (``git init``) are named in ``actions`` and performed
by :mod:`generators.actions`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from scaffold_core.config.store import ConfigStore
from scaffold_core.domain.manifest import DependencyRequirement, ScriptManifest

FieldsBuilder = Callable[[ConfigStore, str], Dict[str, Any]]


@dataclass(frozen=True)
class TemplateEntry:
    """One artifact rendered from one template."""

    artifact: str
    template: str
    # Optional pure predicate; the artifact is skipped (not recorded) when False.
    when: Optional[Callable[[ConfigStore], bool]] = None


@dataclass(frozen=True)
class GeneratorInfo:
    """Static metadata describing one built-in generator."""

    manifest: ScriptManifest
    label: str
    templates: Tuple[TemplateEntry, ...] = ()
    fields_builder: Optional[FieldsBuilder] = None
    actions: Tuple[str, ...] = ()
    default: bool = True

    @property
    def key(self) -> str:
        return self.manifest.name


# ---------------------------------------------------------------------------
# Field builders (pure: config + project name in, dict out)
# ---------------------------------------------------------------------------

INSTALL_COMMANDS: Dict[str, str] = {
    "npm": "npm ci",
    "yarn": "yarn install --frozen-lockfile",
    "pnpm": "pnpm install --frozen-lockfile",
}


def _common_fields(cfg: ConfigStore, project_name: str) -> Dict[str, Any]:
    pm = cfg.get("packages.package_manager", "npm")
    return {
        "project_name": cfg.get("project.name", project_name),
        "project_phase": cfg.get("project.phase", "POC"),
        "package_manager": pm,
        "install_command": INSTALL_COMMANDS.get(pm, f"{pm} install"),
        "run_prefix": "npm run" if pm == "npm" else pm,
        "node_version": cfg.get("packages.node_version", "20"),
        "default_branch": cfg.get("git.default_branch", "main"),
    }


def _project_fields(cfg: ConfigStore, project_name: str) -> Dict[str, Any]:
    out = _common_fields(cfg, project_name)
    out["description"] = cfg.get("project.description", "")
    return out


def _git_fields(cfg: ConfigStore, project_name: str) -> Dict[str, Any]:
    out = _common_fields(cfg, project_name)
    out["extra_ignores"] = [s for s in str(cfg.get("git.extra_ignores", "")).split(",") if s.strip()]
    return out


def _testing_fields(cfg: ConfigStore, project_name: str) -> Dict[str, Any]:
    out = _common_fields(cfg, project_name)
    out["coverage_threshold"] = cfg.get_int("testing.coverage_threshold", 80)
    out["e2e_framework"] = cfg.get("testing.e2e_framework", "playwright")
    return out


def _linting_fields(cfg: ConfigStore, project_name: str) -> Dict[str, Any]:
    out = _common_fields(cfg, project_name)
    out["print_width"] = cfg.get_int("linting.print_width", 100)
    out["semi"] = cfg.get_bool("linting.semi", True)
    out["single_quote"] = cfg.get_bool("linting.single_quote", True)
    return out


def _docker_fields(cfg: ConfigStore, project_name: str) -> Dict[str, Any]:
    out = _common_fields(cfg, project_name)
    db_type = cfg.get("docker.database_type", "postgres")
    default_db_port = "3306" if db_type == "mysql" else "5432"
    out.update(
        {
            "app_port": cfg.get_int("docker.app_port", 3000),
            "database_type": db_type,
            "database_name": cfg.get("docker.database_name", "app_db"),
            "database_user": cfg.get("docker.database_user", "app"),
            "database_port": cfg.get_int("docker.database_port", int(default_db_port)),
        }
    )
    return out


def _cicd_fields(cfg: ConfigStore, project_name: str) -> Dict[str, Any]:
    out = _testing_fields(cfg, project_name)
    out["node_version"] = cfg.get("cicd.node_version", out["node_version"])
    out["docker_image"] = cfg.get("cicd.docker_image", f"node:{out['node_version']}")
    return out


def _provider_is(name: str) -> Callable[[ConfigStore], bool]:
    def _pred(cfg: ConfigStore) -> bool:
        return str(cfg.get("cicd.provider", "github")).lower() == name

    return _pred


def _manifest(name: str, phase: int, **kw: Any) -> ScriptManifest:
    return ScriptManifest(
        name=name,
        phase=phase,
        category=kw.pop("category", "general"),
        creates=tuple(kw.pop("creates", ())),
        requires=DependencyRequirement.build(
            tools=kw.pop("tools", None),
            scripts=kw.pop("depends", None),
            optional=kw.pop("optional", None),
        ),
        conflicts=tuple(kw.pop("conflicts", ())),
        idempotent=kw.pop("idempotent", True),
        safe=kw.pop("safe", True),
        tolerant=kw.pop("tolerant", False),
        rollback=kw.pop("rollback", None),
        short=kw.pop("short", ""),
        config_section=kw.pop("config_section", None),
    )


# Canonical registry.
#
# NOTE: dict insertion order is preserved, so the order here is the order used
# in listings. Execution order always comes from phase + depends.
GENERATORS: Dict[str, GeneratorInfo] = {
    "bootstrap-project": GeneratorInfo(
        manifest=_manifest(
            "bootstrap-project",
            1,
            category="core",
            creates=["README.md", ".editorconfig", "docs/"],
            short="Project README, editorconfig and docs folder",
            config_section="project",
            rollback="rm -f README.md .editorconfig",
        ),
        label="Project skeleton",
        templates=(
            TemplateEntry("README.md", "project/README.md.j2"),
            TemplateEntry(".editorconfig", "project/editorconfig.j2"),
        ),
        fields_builder=_project_fields,
    ),
    "bootstrap-git": GeneratorInfo(
        manifest=_manifest(
            "bootstrap-git",
            1,
            category="core",
            creates=[".gitignore", ".gitattributes"],
            depends=["bootstrap-project"],
            tools=["git"],
            short="Git ignore/attributes and repository init",
            config_section="git",
            rollback="rm -f .gitignore .gitattributes",
        ),
        label="Git",
        templates=(
            TemplateEntry(".gitignore", "git/gitignore.j2"),
            TemplateEntry(".gitattributes", "git/gitattributes.j2"),
        ),
        fields_builder=_git_fields,
        actions=("git-init",),
    ),
    "bootstrap-github": GeneratorInfo(
        manifest=_manifest(
            "bootstrap-github",
            1,
            category="core",
            creates=[
                ".github/PULL_REQUEST_TEMPLATE.md",
                ".github/ISSUE_TEMPLATE/bug_report.md",
                ".github/workflows/ci.yml",
            ],
            depends=["bootstrap-git"],
            optional=["gh"],
            tolerant=True,
            short="GitHub PR/issue templates and Actions CI workflow",
            config_section="git",
            rollback="rm -rf .github",
        ),
        label="GitHub",
        templates=(
            TemplateEntry(".github/PULL_REQUEST_TEMPLATE.md", "github/PULL_REQUEST_TEMPLATE.md.j2"),
            TemplateEntry(".github/ISSUE_TEMPLATE/bug_report.md", "github/bug_report.md.j2"),
            TemplateEntry(".github/workflows/ci.yml", "github/ci.yml.j2"),
        ),
        fields_builder=_testing_fields,
    ),
    "bootstrap-linting": GeneratorInfo(
        manifest=_manifest(
            "bootstrap-linting",
            2,
            category="quality",
            creates=[".eslintrc.json", ".prettierrc.json", ".prettierignore"],
            depends=["bootstrap-project"],
            optional=["node"],
            tolerant=True,
            short="ESLint and Prettier configuration",
            config_section="linting",
            rollback="rm -f .eslintrc.json .prettierrc.json .prettierignore",
        ),
        label="Linting",
        templates=(
            TemplateEntry(".eslintrc.json", "linting/eslintrc.json.j2"),
            TemplateEntry(".prettierrc.json", "linting/prettierrc.json.j2"),
            TemplateEntry(".prettierignore", "linting/prettierignore.j2"),
        ),
        fields_builder=_linting_fields,
    ),
    "bootstrap-testing": GeneratorInfo(
        manifest=_manifest(
            "bootstrap-testing",
            2,
            category="quality",
            creates=["jest.config.js", "tests/", "tests/e2e/"],
            depends=["bootstrap-project"],
            optional=["node"],
            short="Jest config with coverage threshold and test folders",
            config_section="testing",
            rollback="rm -f jest.config.js",
        ),
        label="Testing",
        templates=(TemplateEntry("jest.config.js", "testing/jest.config.js.j2"),),
        fields_builder=_testing_fields,
    ),
    "bootstrap-docker": GeneratorInfo(
        manifest=_manifest(
            "bootstrap-docker",
            3,
            category="docker",
            creates=["Dockerfile", ".dockerignore", "docker-compose.yml"],
            depends=["bootstrap-project"],
            tools=["docker"],
            short="Dockerfile and Compose stack (app + database)",
            config_section="docker",
            rollback="rm -f Dockerfile .dockerignore docker-compose.yml",
        ),
        label="Docker",
        templates=(
            TemplateEntry("Dockerfile", "docker/Dockerfile.j2"),
            TemplateEntry(".dockerignore", "docker/dockerignore.j2"),
            TemplateEntry("docker-compose.yml", "docker/docker-compose.yml.j2"),
        ),
        fields_builder=_docker_fields,
    ),
    "bootstrap-postgres": GeneratorInfo(
        manifest=_manifest(
            "bootstrap-postgres",
            3,
            category="database",
            creates=["docker/postgres/init.sql"],
            depends=["bootstrap-docker"],
            optional=["psql"],
            conflicts=["bootstrap-mysql"],
            short="PostgreSQL init script",
            config_section="docker",
            rollback="rm -rf docker/postgres",
        ),
        label="PostgreSQL",
        templates=(TemplateEntry("docker/postgres/init.sql", "database/postgres-init.sql.j2"),),
        fields_builder=_docker_fields,
    ),
    "bootstrap-mysql": GeneratorInfo(
        manifest=_manifest(
            "bootstrap-mysql",
            3,
            category="database",
            creates=["docker/mysql/init.sql"],
            depends=["bootstrap-docker"],
            optional=["mysql"],
            conflicts=["bootstrap-postgres"],
            short="MySQL init script",
            config_section="docker",
            rollback="rm -rf docker/mysql",
        ),
        label="MySQL",
        templates=(TemplateEntry("docker/mysql/init.sql", "database/mysql-init.sql.j2"),),
        fields_builder=_docker_fields,
        default=False,
    ),
    "bootstrap-ci-cd": GeneratorInfo(
        manifest=_manifest(
            "bootstrap-ci-cd",
            4,
            category="cicd",
            creates=[
                ".gitlab-ci.yml",
                ".circleci/config.yml",
                "azure-pipelines.yml",
                "bitbucket-pipelines.yml",
                "Jenkinsfile",
            ],
            depends=["bootstrap-git"],
            tools=["git"],
            short="CI pipeline for the configured provider (cicd.provider)",
            config_section="cicd",
        ),
        label="CI/CD",
        templates=(
            TemplateEntry(".gitlab-ci.yml", "cicd/gitlab-ci.yml.j2", when=_provider_is("gitlab")),
            TemplateEntry(".circleci/config.yml", "cicd/circleci-config.yml.j2", when=_provider_is("circleci")),
            TemplateEntry("azure-pipelines.yml", "cicd/azure-pipelines.yml.j2", when=_provider_is("azure")),
            TemplateEntry("bitbucket-pipelines.yml", "cicd/bitbucket-pipelines.yml.j2", when=_provider_is("bitbucket")),
            TemplateEntry("Jenkinsfile", "cicd/Jenkinsfile.j2", when=_provider_is("jenkins")),
        ),
        fields_builder=_cicd_fields,
    ),
}


# Derived views (kept as plain collections for convenience).
SUPPORTED_GENERATORS: Set[str] = set(GENERATORS.keys())

DEFAULT_GENERATORS: List[str] = [k for k, info in GENERATORS.items() if info.default]

GENERATOR_LABELS: Dict[str, str] = {k: info.label for k, info in GENERATORS.items()}

BUILTIN_MANIFESTS: Dict[str, ScriptManifest] = {k: info.manifest for k, info in GENERATORS.items()}
