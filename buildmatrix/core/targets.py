from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

from buildmatrix.core.banner import DEFAULT_ORGANIZATION, create_banner
from buildmatrix.core.errors import MisconfiguredPackage
from buildmatrix.core.externals import ExternalClassifier
from buildmatrix.core.models import (
    FORMAT_ORDER,
    BuildDescriptor,
    BuildFormat,
    OutputOptions,
    PackageDeclaration,
    PeerDependencySet,
)
from buildmatrix.core.pipeline import build_path, build_pipeline


@dataclass(frozen=True)
class TargetOptions:
    """Everything the four per-format builders share for one package."""

    package: str
    input: str
    package_dir: str
    js_name: str
    output_file: str
    is_external: ExternalClassifier
    globals: PeerDependencySet
    banner: str


_REQUIRED_FIELDS = ("entry_file", "display_name", "output_file")


def validate_declaration(decl: PackageDeclaration) -> None:
    missing = [f for f in _REQUIRED_FIELDS if not str(getattr(decl, f) or "").strip()]
    if missing:
        raise MisconfiguredPackage(decl.name, missing)


def resolve_entry_path(package_dir: str, entry_file: str, project_root: Optional[Path] = None) -> str:
    root = Path(project_root) if project_root is not None else Path.cwd()
    return os.path.normpath(os.path.join(str(root), package_dir, entry_file))


def normalize_package_dir(raw: str) -> str:
    stripped = raw.rstrip("/")
    if stripped:
        return stripped
    return "/" if raw.startswith("/") else "."


def make_target_options(
    decl: PackageDeclaration,
    *,
    is_external: ExternalClassifier,
    peers: PeerDependencySet,
    organization: str = DEFAULT_ORGANIZATION,
    project_root: Optional[Path] = None,
) -> TargetOptions:
    validate_declaration(decl)
    package_dir = normalize_package_dir(decl.package_dir)
    return TargetOptions(
        package=decl.name,
        input=resolve_entry_path(package_dir, decl.entry_file, project_root),
        package_dir=package_dir,
        js_name=decl.display_name,
        output_file=decl.output_file,
        is_external=is_external,
        globals=peers,
        banner=create_banner(decl.display_name, organization),
    )


def _descriptor(opts: TargetOptions, fmt: BuildFormat, output: OutputOptions) -> BuildDescriptor:
    return BuildDescriptor(
        package=opts.package,
        format=fmt,
        entry_path=opts.input,
        is_external=opts.is_external,
        output=output,
        pipeline=build_pipeline(fmt, package_dir=opts.package_dir),
        banner=opts.banner,
    )


def build_esm(opts: TargetOptions) -> BuildDescriptor:
    return _descriptor(
        opts,
        BuildFormat.ESM,
        OutputOptions(
            format="esm",
            banner=opts.banner,
            dir=build_path(opts.package_dir, "esm"),
            preserve_modules=True,
        ),
    )


def build_cjs(opts: TargetOptions) -> BuildDescriptor:
    return _descriptor(
        opts,
        BuildFormat.CJS,
        OutputOptions(
            format="cjs",
            banner=opts.banner,
            dir=build_path(opts.package_dir, "cjs"),
            preserve_modules=True,
            exports="named",
        ),
    )


def build_umd_dev(opts: TargetOptions) -> BuildDescriptor:
    return _descriptor(
        opts,
        BuildFormat.UMD_DEV,
        OutputOptions(
            format="umd",
            banner=opts.banner,
            file=build_path(opts.package_dir, "umd", "index.development.js"),
            name=opts.js_name,
            globals=opts.globals.globals,
        ),
    )


def build_umd_prod(opts: TargetOptions) -> BuildDescriptor:
    return _descriptor(
        opts,
        BuildFormat.UMD_PROD,
        OutputOptions(
            format="umd",
            banner=opts.banner,
            file=build_path(opts.package_dir, "umd", "index.production.js"),
            name=opts.js_name,
            globals=opts.globals.globals,
        ),
    )


TARGET_BUILDERS: Dict[BuildFormat, Callable[[TargetOptions], BuildDescriptor]] = {
    BuildFormat.ESM: build_esm,
    BuildFormat.CJS: build_cjs,
    BuildFormat.UMD_DEV: build_umd_dev,
    BuildFormat.UMD_PROD: build_umd_prod,
}


def build_targets(
    decl: PackageDeclaration,
    *,
    peers: PeerDependencySet,
    organization: str = DEFAULT_ORGANIZATION,
    project_root: Optional[Path] = None,
    is_external: Optional[ExternalClassifier] = None,
) -> List[BuildDescriptor]:
    """
    Four descriptors for one package, always in ESM, CJS, UMD-dev, UMD-prod order.

    Raises MisconfiguredPackage before building anything if the declaration
    has an empty entry file, display name or output file name.
    """
    classifier = is_external if is_external is not None else ExternalClassifier(peers)
    opts = make_target_options(
        decl,
        is_external=classifier,
        peers=peers,
        organization=organization,
        project_root=project_root,
    )
    return [TARGET_BUILDERS[fmt](opts) for fmt in FORMAT_ORDER]
