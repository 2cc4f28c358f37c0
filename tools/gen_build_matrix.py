from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

# ---- sys.path bootstrap (Windows-friendly) ----
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
# ---------------------------------------------

from buildmatrix.core.config import load_release_config  # noqa: E402
from buildmatrix.core.errors import MisconfiguredPackage, ReleaseConfigError  # noqa: E402
from buildmatrix.core.matrix import MatrixGenerator  # noqa: E402
from buildmatrix.core.render import render_matrix  # noqa: E402


def build_document(config_path: Optional[Path], project_root: Path) -> dict:
    cfg = load_release_config(config_path)
    gen = MatrixGenerator(cfg.peer_set(), organization=cfg.organization, project_root=project_root)
    descriptors = gen.generate(cfg.packages)
    return {
        "kind": "build_matrix",
        "organization": cfg.organization,
        "packages": [p.name for p in cfg.packages],
        "descriptors": render_matrix(descriptors),
    }


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Render the release build matrix as bundler options JSON")
    ap.add_argument("--config", default=None, help="Release config (JSON/YAML). Default: BUILDMATRIX_CONFIG or buildmatrix.yaml")
    ap.add_argument("--out", default="build_matrix.json", help="Output path (default build_matrix.json)")
    ap.add_argument("--root", default=None, help="Directory a relative --out is resolved against (default: repo root)")
    ap.add_argument("--check", action="store_true", help="Fail if the output file differs from the regenerated matrix")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    root = Path(args.root).resolve() if args.root else PROJECT_ROOT
    out_path = Path(args.out)
    if not out_path.is_absolute():
        out_path = root / out_path

    try:
        # Entry paths stay relative to the release root so the file is portable
        current = build_document(Path(args.config) if args.config else None, Path("."))
    except ReleaseConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except MisconfiguredPackage as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 4

    if args.check:
        if not out_path.exists():
            print(f"ERROR: {out_path} missing. Run without --check to generate.", file=sys.stderr)
            return 2
        try:
            expected = json.loads(out_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            print(f"ERROR: {out_path.name} is not valid JSON ({e}). Regenerate and commit.", file=sys.stderr)
            return 3
        if expected != current:
            print(f"ERROR: {out_path.name} drift detected. Regenerate and commit.", file=sys.stderr)
            return 3
        print(f"OK: {out_path.name} matches.")
        return 0

    out_path.write_text(json.dumps(current, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    print(f"Wrote: {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
