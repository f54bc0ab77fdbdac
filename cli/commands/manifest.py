from __future__ import annotations

from pathlib import Path

from pipeline.core import MANIFEST_FILENAME
from pipeline.manifests import dump_manifest_yaml
from pipeline.pipeline import BootstrapPipeline


def run_manifest(args, pipeline: BootstrapPipeline) -> int:
    project_root = Path(args.project_root)
    scripts_dir = Path(args.scripts_dir) if args.scripts_dir else None
    manifests = pipeline.manifests(project_root, scripts_dir=scripts_dir)

    out = Path(args.out) if args.out else project_root / MANIFEST_FILENAME
    written = dump_manifest_yaml(out, manifests)
    print(f"✅ Wrote {len(manifests)} manifests to {written}")
    return 0
