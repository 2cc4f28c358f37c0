from __future__ import annotations

from fastapi import FastAPI

from buildmatrix import __version__
from buildmatrix.api.endpoints import health, matrix
from buildmatrix.api.endpoints import metrics as metrics_ep
from buildmatrix.api.middleware.error_shaping import SafeErrorMiddleware
from buildmatrix.api.middleware.request_context import RequestContextMiddleware

app = FastAPI(
    title="Build Matrix API",
    version=__version__,
)

# ------------------------------------------------------------
# Middleware stack (ORDER MATTERS)
# Starlette reverses add_middleware order: the LAST call = OUTERMOST wrapper.
#   SafeErrorMiddleware -> RequestContext -> handler
# ------------------------------------------------------------
app.add_middleware(RequestContextMiddleware)
app.add_middleware(SafeErrorMiddleware)


app.include_router(health.router)
app.include_router(metrics_ep.router)
app.include_router(matrix.router)


@app.get("/health")
def health_check():
    return {"status": "healthy"}
