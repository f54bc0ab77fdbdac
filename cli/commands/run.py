from __future__ import annotations

import json

from cli.common import build_run_request, print_plan, print_summary
from pipeline.pipeline import BootstrapPipeline


def run_plan(args, pipeline: BootstrapPipeline) -> int:
    """Print the ordered plan without executing anything."""

    plan = pipeline.plan(build_run_request(args))
    if args.json:
        print(json.dumps([m.to_dict() for m in plan], indent=2))
    else:
        print_plan(plan)
    return 0


def run_run(args, pipeline: BootstrapPipeline) -> int:
    req = build_run_request(args)
    if req.dry_run:
        return run_plan(args, pipeline)

    if not req.has_selection:
        print_plan([])
        return 0

    print("\n🚀 Running bootstrap")
    print(f"  Project : {req.project_root.resolve()}")

    session = pipeline.run(req)
    if not session.plan:
        print_plan([])
        return 0

    print_summary(session)

    code = pipeline.exit_code(session)
    if code == 0:
        print("\n✅ Bootstrap completed.")
    else:
        failed = session.failed
        print(f"\n⚠️ Bootstrap stopped: {failed.name if failed else 'a script'} failed (exit code {code})")
    return code
