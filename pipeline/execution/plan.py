"""pipeline.execution.plan

Pure planning: which scripts run, and in what order.

Design rules
------------
This module should stay *pure*:
* no subprocess execution
* no filesystem reads or writes

Ordering
--------
1. Phases run in ascending order; no phase-N script starts before every
   selected script of an earlier phase.
2. Inside a phase, ``depends`` edges between selected scripts are honoured
   (Kahn's algorithm, ties broken by name so the plan is deterministic).

Every problem with the selection is a
:class:`~scaffold_core.errors.ConfigurationError` raised here, before any
script executes:

* unknown script names
* two selected scripts that declare each other as conflicting
* dependency cycles (the error names the cycle members)
* a dependency on a selected script from a *later* phase

Dependencies on scripts that are *not* selected are left to the dependency
validator at run time (they may have completed in an earlier session).
"""

from __future__ import annotations

import heapq
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from scaffold_core.domain.manifest import ScriptManifest
from scaffold_core.errors import ConfigurationError


def select_scripts(
    manifests: Mapping[str, ScriptManifest],
    *,
    names: Sequence[str] = (),
    phase: Optional[int] = None,
    all_scripts: bool = False,
    eligible: Optional[Iterable[str]] = None,
) -> List[str]:
    """Resolve a CLI-style selection into script names (de-duplicated).

    ``all_scripts`` and ``phase`` only pick from *eligible* (default: every
    manifest), so opt-in scripts such as an alternative database are only run
    when named explicitly.
    """

    pool = set(manifests) if eligible is None else set(eligible) & set(manifests)
    out: List[str] = []
    if all_scripts:
        out.extend(sorted(pool))
    if phase is not None:
        out.extend(sorted(n for n in pool if manifests[n].phase == phase))
    out.extend(names)

    seen: Set[str] = set()
    unique: List[str] = []
    for n in out:
        if n not in seen:
            seen.add(n)
            unique.append(n)
    return unique


def find_cycle(graph: Mapping[str, Iterable[str]]) -> Optional[List[str]]:
    """Return one dependency cycle as ``[a, b, ..., a]``, or None.

    *graph* maps a node to the nodes it depends on. Traversal is in name order
    so the same graph always reports the same cycle.
    """

    WHITE, GREY, BLACK = 0, 1, 2
    color: Dict[str, int] = {n: WHITE for n in graph}
    stack: List[str] = []

    def visit(node: str) -> Optional[List[str]]:
        color[node] = GREY
        stack.append(node)
        for dep in sorted(graph.get(node, ())):
            if dep not in color:
                continue
            if color[dep] == GREY:
                start = stack.index(dep)
                return stack[start:] + [dep]
            if color[dep] == WHITE:
                found = visit(dep)
                if found:
                    return found
        stack.pop()
        color[node] = BLACK
        return None

    for node in sorted(graph):
        if color[node] == WHITE:
            found = visit(node)
            if found:
                return found
    return None


def _check_known(selected: Sequence[str], manifests: Mapping[str, ScriptManifest]) -> None:
    unknown = [n for n in selected if n not in manifests]
    if unknown:
        raise ConfigurationError(
            f"Unknown script(s): {', '.join(unknown)}. Available: {', '.join(sorted(manifests))}"
        )


def _check_conflicts(selected: Sequence[str], manifests: Mapping[str, ScriptManifest]) -> None:
    chosen = sorted(set(selected))
    pairs: List[str] = []
    for i, a in enumerate(chosen):
        for b in chosen[i + 1 :]:
            if b in manifests[a].conflicts or a in manifests[b].conflicts:
                pairs.append(f"{a} <-> {b}")
    if pairs:
        raise ConfigurationError("Conflicting scripts selected: " + ", ".join(pairs))


def plan_scripts(selected: Sequence[str], manifests: Mapping[str, ScriptManifest]) -> List[ScriptManifest]:
    """Validate a selection and return its execution order."""

    _check_known(selected, manifests)
    _check_conflicts(selected, manifests)

    chosen = set(selected)
    graph: Dict[str, List[str]] = {
        n: [d for d in manifests[n].depends if d in chosen] for n in chosen
    }

    cycle = find_cycle(graph)
    if cycle:
        raise ConfigurationError(
            "Dependency cycle detected: " + " -> ".join(cycle),
            cycle=cycle[:-1],
        )

    for name in sorted(chosen):
        m = manifests[name]
        for dep in graph[name]:
            if manifests[dep].phase > m.phase:
                raise ConfigurationError(
                    f"{name} (phase {m.phase}) depends on {dep} (phase {manifests[dep].phase}); "
                    "a script cannot depend on a later phase"
                )

    ordered: List[ScriptManifest] = []
    for phase in sorted({manifests[n].phase for n in chosen}):
        members = {n for n in chosen if manifests[n].phase == phase}
        ordered.extend(manifests[n] for n in _topo_sort(members, graph))
    return ordered


def _topo_sort(members: Set[str], graph: Mapping[str, Sequence[str]]) -> List[str]:
    indegree: Dict[str, int] = {n: 0 for n in members}
    dependents: Dict[str, List[str]] = {n: [] for n in members}
    for n in members:
        for dep in graph.get(n, ()):
            if dep in members:
                indegree[n] += 1
                dependents[dep].append(n)

    ready = [n for n, d in indegree.items() if d == 0]
    heapq.heapify(ready)
    out: List[str] = []
    while ready:
        n = heapq.heappop(ready)
        out.append(n)
        for child in dependents[n]:
            indegree[child] -= 1
            if indegree[child] == 0:
                heapq.heappush(ready, child)

    if len(out) != len(members):
        # find_cycle() runs first, so this only guards against a broken graph.
        raise ConfigurationError("Could not order scripts: " + ", ".join(sorted(members - set(out))))
    return out
