from __future__ import annotations

import posixpath
from typing import Tuple

from buildmatrix.core.models import BuildFormat
from buildmatrix.core.stages import (
    Analyze,
    EnvironmentReplace,
    Minify,
    ModuleResolve,
    TransformStage,
    Transpile,
)


def build_path(package_dir: str, *parts: str) -> str:
    return posixpath.join(package_dir, "build", *parts)


def stats_html_path(package_dir: str) -> str:
    return build_path(package_dir, "stats-html.html")


def stats_json_path(package_dir: str) -> str:
    return build_path(package_dir, "stats-react.json")


def build_pipeline(fmt: BuildFormat, *, package_dir: str) -> Tuple[TransformStage, ...]:
    """
    Ordered transform stages for one output format.

    Order is part of the contract:
      transpile -> resolve -> replace -> minify -> analyze

    The NODE_ENV substitution has to land before minification so the dead
    branch can be dropped, and the analyzers measure the final bytes so they
    come last. Only the production UMD bundle carries the full chain.
    """
    fmt = BuildFormat(fmt)
    base: Tuple[TransformStage, ...] = (Transpile(), ModuleResolve())

    if fmt in (BuildFormat.ESM, BuildFormat.CJS):
        return base

    if fmt is BuildFormat.UMD_DEV:
        return base + (EnvironmentReplace("development"),)

    return base + (
        EnvironmentReplace("production"),
        Minify(mangle=True, compress=True),
        Analyze(filename=stats_html_path(package_dir), report="html", gzip_size=True),
        Analyze(filename=stats_json_path(package_dir), report="json", gzip_size=True),
    )
