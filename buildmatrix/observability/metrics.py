from __future__ import annotations

import re
from collections import Counter
from typing import Dict, Optional

from prometheus_client import Counter as PromCounter
from prometheus_client import Histogram

# Requests counters (HTTP-level)
_REQUESTS = Counter()

# Named counters (custom)
_NAMED = Counter()


HTTP_REQUESTS_TOTAL = PromCounter(
    "buildmatrix_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "buildmatrix_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)

DESCRIPTORS_TOTAL = PromCounter(
    "buildmatrix_descriptors_total",
    "Build descriptors emitted",
    ["format"],
)

MISCONFIGURED_PACKAGES_TOTAL = PromCounter(
    "buildmatrix_misconfigured_packages_total",
    "Package declarations rejected as misconfigured",
)


def normalize_path(path: str) -> str:
    """Reduce high-cardinality paths for metrics labels."""
    p = path or "/"
    p = re.sub(r"/[0-9a-fA-F]{16,}", "/:hex", p)
    p = re.sub(r"/\d+", "/:id", p)
    return p


def reset_metrics() -> None:
    """
    Test helper: clears in-process counters to avoid cross-test leakage.
    Prometheus collectors are process-global and are left alone.
    """
    _REQUESTS.clear()
    _NAMED.clear()


def inc_http(method: str, path: str, status: Optional[int] = None) -> None:
    m = (method or "UNKNOWN").upper()
    p = normalize_path(path)
    s = status if status is not None else "unknown"

    _REQUESTS["requests_total"] += 1
    _REQUESTS[f"requests_{m}"] += 1
    _REQUESTS[f"path_{p}|{s}"] += 1
    HTTP_REQUESTS_TOTAL.labels(method=m, path=p, status=str(s)).inc()


def observe_duration(method: str, path: str, seconds: float) -> None:
    HTTP_REQUEST_DURATION_SECONDS.labels(method=(method or "UNKNOWN").upper(), path=normalize_path(path)).observe(
        seconds
    )


def inc_descriptor(fmt: str) -> None:
    _NAMED[f"descriptors_{fmt}"] += 1
    DESCRIPTORS_TOTAL.labels(format=fmt).inc()


def inc_misconfigured() -> None:
    _NAMED["misconfigured_packages"] += 1
    MISCONFIGURED_PACKAGES_TOTAL.inc()


def inc_named(name: str, value: int = 1) -> None:
    if not name:
        return
    _NAMED[name] += int(value)


def snapshot_requests() -> Dict[str, int]:
    return dict(_REQUESTS)


def snapshot_named() -> Dict[str, int]:
    return dict(_NAMED)
