import unittest

from generators.catalog import builtin_generators, default_selection
from pipeline.execution.plan import find_cycle, plan_scripts, select_scripts
from scaffold_core.domain.manifest import ScriptManifest
from scaffold_core.errors import ConfigurationError


def _m(name, phase, depends=(), conflicts=()):
    return ScriptManifest.from_dict({"name": name, "phase": phase, "depends": list(depends), "conflicts": list(conflicts)})


def _index(*manifests):
    return {m.name: m for m in manifests}


class TestPlanOrdering(unittest.TestCase):
    def test_phases_run_in_ascending_order(self):
        ms = _index(_m("c", 3), _m("a", 1), _m("b", 2))
        self.assertEqual([m.name for m in plan_scripts(["c", "b", "a"], ms)], ["a", "b", "c"])

    def test_depends_honoured_within_phase(self):
        ms = _index(_m("alpha", 1, depends=["zeta"]), _m("zeta", 1))
        self.assertEqual([m.name for m in plan_scripts(["alpha", "zeta"], ms)], ["zeta", "alpha"])

    def test_ties_broken_by_name(self):
        ms = _index(_m("b", 1), _m("c", 1), _m("a", 1))
        self.assertEqual([m.name for m in plan_scripts(["c", "a", "b"], ms)], ["a", "b", "c"])

    def test_unselected_dependency_is_left_to_runtime(self):
        ms = _index(_m("git", 1, depends=["project"]), _m("project", 1))
        self.assertEqual([m.name for m in plan_scripts(["git"], ms)], ["git"])


class TestPlanRejections(unittest.TestCase):
    def test_cycle_names_members(self):
        ms = _index(_m("a", 1, depends=["b"]), _m("b", 1, depends=["c"]), _m("c", 1, depends=["a"]))
        with self.assertRaises(ConfigurationError) as ctx:
            plan_scripts(["a", "b", "c"], ms)
        self.assertEqual(sorted(ctx.exception.cycle), ["a", "b", "c"])
        for name in "abc":
            self.assertIn(name, str(ctx.exception))

    def test_dependency_on_later_phase(self):
        ms = _index(_m("early", 1, depends=["late"]), _m("late", 2))
        with self.assertRaises(ConfigurationError) as ctx:
            plan_scripts(["early", "late"], ms)
        self.assertIn("later phase", str(ctx.exception))

    def test_conflicting_selection(self):
        ms = _index(_m("pg", 3, conflicts=["my"]), _m("my", 3))
        with self.assertRaises(ConfigurationError) as ctx:
            plan_scripts(["pg", "my"], ms)
        self.assertIn("my <-> pg", str(ctx.exception))

    def test_unknown_name(self):
        with self.assertRaises(ConfigurationError) as ctx:
            plan_scripts(["nope"], _index(_m("a", 1)))
        self.assertIn("nope", str(ctx.exception))


def test_find_cycle_none_for_dag() -> None:
    assert find_cycle({"a": ["b"], "b": []}) is None
    assert find_cycle({"a": ["a"]}) == ["a", "a"]


def test_select_scripts_respects_eligible_pool() -> None:
    ms = _index(_m("pg", 3), _m("my", 3), _m("base", 1))

    assert select_scripts(ms, all_scripts=True, eligible=["pg", "base"]) == ["base", "pg"]
    assert select_scripts(ms, phase=3, eligible=["pg", "base"]) == ["pg"]
    assert select_scripts(ms, names=["my", "my"], eligible=["pg"]) == ["my"]


def test_builtin_default_plan_order() -> None:
    gens = builtin_generators()
    manifests = {name: g.manifest for name, g in gens.items()}

    selected = select_scripts(manifests, all_scripts=True, eligible=default_selection(gens))
    plan = [m.name for m in plan_scripts(selected, manifests)]

    assert plan == [
        "bootstrap-project",
        "bootstrap-git",
        "bootstrap-github",
        "bootstrap-linting",
        "bootstrap-testing",
        "bootstrap-docker",
        "bootstrap-postgres",
        "bootstrap-ci-cd",
    ]
