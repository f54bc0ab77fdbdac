import ast
from pathlib import Path
from typing import Iterator, List, Tuple

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]

# Layer direction, leaf first:
#   scaffold_core  <-  tools  <-  generators  <-  pipeline  <-  cli
# A layer may import from layers to its left only.
LAYERS = ("scaffold_core", "tools", "generators", "pipeline", "cli")


def _forbidden_for(layer: str) -> Tuple[str, ...]:
    return LAYERS[LAYERS.index(layer) + 1 :]


def _py_files(layer: str) -> Iterator[Path]:
    for p in sorted((REPO_ROOT / layer).rglob("*.py")):
        if "__pycache__" in p.parts:
            continue
        yield p


def _absolute_import_roots(py_file: Path) -> Iterator[Tuple[int, str]]:
    tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield node.lineno, alias.name
        # Relative imports stay inside their own package.
        elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
            yield node.lineno, node.module


@pytest.mark.parametrize("layer", LAYERS[:-1])
def test_layer_does_not_import_upwards(layer: str) -> None:
    forbidden = _forbidden_for(layer)
    problems: List[str] = []
    for py_file in _py_files(layer):
        for lineno, module in _absolute_import_roots(py_file):
            if module.split(".", 1)[0] in forbidden:
                problems.append(f"{py_file.relative_to(REPO_ROOT)}:{lineno} imports {module}")

    assert not problems, "Imports against the layer direction:\n" + "\n".join(problems)


def test_every_layer_exists() -> None:
    for layer in LAYERS:
        assert (REPO_ROOT / layer).is_dir(), layer
