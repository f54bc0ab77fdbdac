from __future__ import annotations

from pathlib import Path

from cli.common import flatten_csv
from pipeline.pipeline import BootstrapPipeline


def run_rollback(args, pipeline: BootstrapPipeline) -> int:
    project_root = Path(args.project_root)

    if args.restore:
        used = pipeline.restore(project_root, args.restore)
        print(f"✅ Restored {args.restore} from {used.name}")
        return 0

    scripts = flatten_csv(args.scripts)
    if not scripts:
        raise SystemExit("rollback mode needs --script NAME (or --restore PATH).")

    scripts_dir = Path(args.scripts_dir) if args.scripts_dir else None
    # Undo in reverse order of how they were given (last applied first).
    for name in reversed(scripts):
        res = pipeline.rollback(project_root, name, scripts_dir=scripts_dir)
        how = res.command or "no rollback command"
        marker = "marker removed" if res.marker_removed else "no marker"
        print(f"↩️  {name}: {how} ({marker})")
    return 0
