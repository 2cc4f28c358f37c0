from __future__ import annotations

import logging
import traceback
from typing import Any, Callable, Dict, Optional, Tuple

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from buildmatrix.core.errors import MisconfiguredPackage, ReleaseConfigError
from buildmatrix.observability.metrics import inc_http

log = logging.getLogger("buildmatrix.errors")


def _shape(exc: Exception) -> Tuple[int, Any]:
    if isinstance(exc, MisconfiguredPackage):
        return 422, {
            "error": "misconfigured_package",
            "package": exc.package,
            "fields": list(exc.fields),
        }
    if isinstance(exc, ReleaseConfigError):
        return 400, str(exc)
    return 500, "Internal Server Error"


class SafeErrorMiddleware(BaseHTTPMiddleware):
    """
    Turns exceptions escaping the handlers into JSON responses.

    MisconfiguredPackage -> 422 naming the package and empty fields
    ReleaseConfigError   -> 400
    anything else        -> 500, traceback logged server-side only
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            rid: Optional[str] = getattr(request.state, "request_id", None) or request.headers.get("x-request-id")
            status, detail = _shape(e)
            inc_http(request.method, request.url.path, status)
            if status == 500:
                log.error(
                    "Unhandled error: %s rid=%s path=%s\n%s",
                    str(e),
                    rid,
                    request.url.path,
                    traceback.format_exc(),
                )
            else:
                log.warning("%s rid=%s path=%s: %s", type(e).__name__, rid, request.url.path, e)

            payload: Dict[str, Any] = {"detail": detail}
            if rid:
                payload["request_id"] = rid
            resp = JSONResponse(status_code=status, content=payload)
            if rid:
                resp.headers["X-Request-Id"] = rid
            return resp
