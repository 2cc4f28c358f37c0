from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from buildmatrix.core.banner import DEFAULT_ORGANIZATION
from buildmatrix.core.config import ReleaseConfig, default_peer_dependencies, load_release_config
from buildmatrix.core.matrix import MatrixGenerator
from buildmatrix.core.models import PackageDeclaration, PeerDependencySet
from buildmatrix.core.render import render_matrix

# MisconfiguredPackage / ReleaseConfigError propagate to SafeErrorMiddleware (422 / 400).
router = APIRouter(prefix="/api/v1", tags=["matrix"])


class TargetsRequest(BaseModel):
    package: PackageDeclaration
    peer_dependencies: Optional[Dict[str, str]] = None
    organization: str = DEFAULT_ORGANIZATION


def _project_root() -> Optional[Path]:
    p = (os.getenv("BUILDMATRIX_PROJECT_ROOT") or "").strip()
    return Path(p) if p else None


def _render_release(cfg: ReleaseConfig):
    gen = MatrixGenerator(
        cfg.peer_set(),
        organization=cfg.organization,
        project_root=_project_root(),
    )
    descriptors = gen.generate(cfg.packages)
    return {
        "organization": cfg.organization,
        "packages": [p.name for p in cfg.packages],
        "count": len(descriptors),
        "descriptors": render_matrix(descriptors),
    }


@router.get("/matrix")
def get_matrix():
    return _render_release(load_release_config())


@router.post("/matrix")
def post_matrix(cfg: ReleaseConfig):
    return _render_release(cfg)


@router.post("/targets")
def post_targets(req: TargetsRequest):
    peers = PeerDependencySet.from_mapping(
        req.peer_dependencies if req.peer_dependencies is not None else default_peer_dependencies()
    )
    gen = MatrixGenerator(peers, organization=req.organization, project_root=_project_root())
    group = gen.build_targets(req.package)
    return {
        "package": req.package.name,
        "descriptors": render_matrix(group),
    }
