from __future__ import annotations

import pytest

from buildmatrix.core.models import BuildFormat
from buildmatrix.core.pipeline import build_pipeline
from buildmatrix.core.stages import Analyze, EnvironmentReplace, Minify, ModuleResolve, Transpile

PKG = "packages/ranger-core"


def _kinds(fmt):
    return [s.kind for s in build_pipeline(fmt, package_dir=PKG)]


@pytest.mark.parametrize("fmt", [BuildFormat.ESM, BuildFormat.CJS])
def test_module_tree_formats_only_transpile_and_resolve(fmt):
    assert _kinds(fmt) == ["transpile", "resolve"]


def test_esm_and_cjs_pipelines_are_equal():
    assert build_pipeline(BuildFormat.ESM, package_dir=PKG) == build_pipeline(BuildFormat.CJS, package_dir=PKG)


def test_umd_dev_pipeline():
    stages = build_pipeline(BuildFormat.UMD_DEV, package_dir=PKG)
    assert [s.kind for s in stages] == ["transpile", "resolve", "replace"]
    assert stages[2] == EnvironmentReplace("development")


def test_umd_prod_pipeline_full_chain():
    stages = build_pipeline(BuildFormat.UMD_PROD, package_dir=PKG)
    assert stages == (
        Transpile(),
        ModuleResolve(),
        EnvironmentReplace("production"),
        Minify(mangle=True, compress=True),
        Analyze(filename=f"{PKG}/build/stats-html.html", report="html", gzip_size=True),
        Analyze(filename=f"{PKG}/build/stats-react.json", report="json", gzip_size=True),
    )


def test_umd_prod_stage_ordering():
    kinds = _kinds(BuildFormat.UMD_PROD)
    replace_at = kinds.index("replace")
    minify_at = kinds.index("minify")
    analyze_at = [i for i, k in enumerate(kinds) if k == "analyze"]
    assert kinds.index("transpile") < replace_at
    assert kinds.index("resolve") < replace_at
    assert replace_at < minify_at
    assert len(analyze_at) == 2
    assert all(minify_at < i for i in analyze_at)
    assert analyze_at[-1] == len(kinds) - 1


def test_only_umd_prod_minifies():
    for fmt in (BuildFormat.ESM, BuildFormat.CJS, BuildFormat.UMD_DEV):
        assert "minify" not in _kinds(fmt)
        assert "analyze" not in _kinds(fmt)


def test_accepts_format_value_string():
    assert build_pipeline("umd-dev", package_dir=PKG) == build_pipeline(BuildFormat.UMD_DEV, package_dir=PKG)


def test_unknown_format_rejected():
    with pytest.raises(ValueError):
        build_pipeline("iife", package_dir=PKG)


def test_transpile_and_resolve_cover_jsx_and_ts():
    t, r = build_pipeline(BuildFormat.ESM, package_dir=PKG)
    assert t.to_dict() == {
        "babelHelpers": "bundled",
        "exclude": "node_modules",
        "extensions": [".ts", ".tsx", ".jsx"],
    }
    assert r.to_dict() == {"extensions": [".ts", ".tsx", ".jsx"]}


def test_stage_option_rendering():
    assert EnvironmentReplace("production").to_dict() == {
        "process.env.NODE_ENV": '"production"',
        "delimiters": ["", ""],
        "preventAssignment": True,
    }
    assert Minify().to_dict() == {"mangle": True, "compress": True}
    assert Analyze(filename="x.json", report="json").to_dict() == {
        "filename": "x.json",
        "gzipSize": True,
        "json": True,
    }
    assert "json" not in Analyze(filename="x.html").to_dict()
