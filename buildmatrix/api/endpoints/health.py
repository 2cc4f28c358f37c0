from __future__ import annotations

import os

from fastapi import APIRouter
from starlette.responses import JSONResponse

from buildmatrix.core.config import resolve_config_path
from buildmatrix.observability.metrics import inc_named

router = APIRouter()


@router.get("/api/v1/health/live")
def liveness():
    inc_named("health_live")
    return {"status": "alive"}


@router.get("/api/v1/health/ready")
def readiness():
    """
    Ready when an explicitly configured release file is present.
    Without BUILDMATRIX_CONFIG the built-in release is served.
    """
    inc_named("health_ready")

    problems: list[str] = []
    env_path = (os.getenv("BUILDMATRIX_CONFIG") or "").strip()
    if env_path:
        p = resolve_config_path(None)
        if not p.exists():
            problems.append(f"missing_file:BUILDMATRIX_CONFIG={p}")

    if problems:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "problems": problems},
        )

    return {"status": "ready"}
