from __future__ import annotations

import json
from pathlib import Path

from pipeline.pipeline import BootstrapPipeline


def run_status(args, pipeline: BootstrapPipeline) -> int:
    scripts_dir = Path(args.scripts_dir) if args.scripts_dir else None
    status = pipeline.status(Path(args.project_root), scripts_dir=scripts_dir)

    if args.json:
        print(json.dumps(status, indent=2))
        return 0

    print(f"\n📁 {status['project_root']}")
    cfg = "present" if status["config_exists"] else "missing"
    print(f"  Config : {status['config_file']} ({cfg})")

    for name, info in status["scripts"].items():
        mark = "✅" if info["completed"] else "  "
        present = sum(1 for ok in info["artifacts"].values() if ok)
        total = len(info["artifacts"])
        print(f"  {mark} [phase {info['phase']}] {name}  ({present}/{total} artifacts present)")
        for rel, backups in info["backups"].items():
            print(f"       💾 {rel}: {len(backups)} backup(s), newest {backups[-1]}")

    last = status.get("last_run")
    if last:
        state = "ok" if last.get("ok") else "failed"
        print(f"\n  Last run: {last.get('finished')} ({state}) {last.get('counts')}")
    return 0
