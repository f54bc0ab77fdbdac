from __future__ import annotations

from pathlib import Path

from pipeline.config_ops import init_project_config, open_store, set_value
from scaffold_core.config.validation import validate_config
from scaffold_core.io.layout import ProjectPaths, resolve_project_root


def _split_assignment(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key.strip():
        raise SystemExit(f"--set expects KEY=VALUE, got {raw!r}")
    return key.strip(), value.strip()


def run_config(args) -> int:
    root = resolve_project_root(args.project_root)
    paths = ProjectPaths.for_root(root, config_file=Path(args.config_file) if args.config_file else None)

    did_something = False

    if args.init:
        _, written = init_project_config(paths, force=bool(args.force))
        print(f"✅ {paths.config_file} ({len(written)} keys written)")
        did_something = True

    warnings = []
    for raw in args.set or []:
        key, value = _split_assignment(raw)
        warnings = set_value(paths, key, value)
        print(f"✅ {key} = {value}")
        did_something = True
    for w in warnings:
        print(f"⚠️  {w}")

    store = open_store(paths)

    if args.get:
        value = store.get(args.get)
        if value is None:
            return 1
        print(value)
        return 0

    if args.validate:
        problems = validate_config(store)
        for p in problems:
            print(f"⚠️  {p}")
        if not problems:
            print("✅ Config looks valid.")
        return 0

    if args.show or not did_something:
        if not store.exists:
            print(f"ℹ️  No config at {paths.config_file} (run --mode config --init).")
            return 0
        for section in store.sections():
            print(f"[{section}]")
            for key, value in store.section_view(section).items():
                print(f"{key} = {value}")
            print()
    return 0
