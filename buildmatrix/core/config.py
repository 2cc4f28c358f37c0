"""
Release configuration loader.

Reads the package declarations and the peer dependency globals for one
release from a JSON or YAML file:

    organization: TanStack
    peer_dependencies:
      react: React
      solid-js: Solid
    packages:
      - name: ranger-core
        package_dir: packages/ranger-core
        display_name: RangerCore
        output_file: ranger-core
        entry_file: src/index.jsx

Environment variable:
    BUILDMATRIX_CONFIG: path to the release file (optional).
    Default search path: <project_root>/buildmatrix.yaml

A missing file means the built-in release. A file that exists but cannot be
read or validated is an error; it is never replaced by defaults.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from buildmatrix.core.banner import DEFAULT_ORGANIZATION
from buildmatrix.core.errors import ReleaseConfigError
from buildmatrix.core.models import PackageDeclaration, PeerDependencySet

_log = logging.getLogger("buildmatrix.config")

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_NAME = "buildmatrix.yaml"


def default_peer_dependencies() -> Dict[str, str]:
    return {
        "react": "React",
        "solid-js": "Solid",
        "solid-js/store": "SolidStore",
        "react-dom": "ReactDOM",
        "@tanstack/ranger-core": "RangerCore",
    }


def default_packages() -> List[PackageDeclaration]:
    return [
        PackageDeclaration(
            name="ranger-core",
            package_dir="packages/ranger-core",
            display_name="RangerCore",
            output_file="ranger-core",
            entry_file="src/index.jsx",
        ),
    ]


class ReleaseConfig(BaseModel):
    organization: str = DEFAULT_ORGANIZATION
    peer_dependencies: Dict[str, str] = Field(default_factory=default_peer_dependencies)
    packages: List[PackageDeclaration] = Field(default_factory=default_packages)

    def peer_set(self) -> PeerDependencySet:
        return PeerDependencySet.from_mapping(self.peer_dependencies)


def load_release_config(path: Optional[Path] = None) -> ReleaseConfig:
    resolved = resolve_config_path(path)
    if not resolved.exists():
        _log.info("No release config at %s; using built-in release", resolved)
        return ReleaseConfig()

    try:
        raw_text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        _log.warning("Cannot read release config %s: %s", resolved, exc)
        raise ReleaseConfigError(f"cannot read {resolved}: {exc}") from exc

    # JSON first, YAML as fallback (YAML is a superset for these documents)
    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            _log.warning("Failed to parse release config %s as JSON or YAML: %s", resolved, exc)
            raise ReleaseConfigError(f"cannot parse {resolved}: {exc}") from exc

    if not isinstance(data, dict):
        _log.warning("Release config %s must be a mapping, got %s", resolved, type(data).__name__)
        raise ReleaseConfigError(f"{resolved} must contain a mapping")

    try:
        cfg = ReleaseConfig.model_validate(data)
    except ValidationError as exc:
        _log.warning("Invalid release config %s: %s", resolved, exc)
        raise ReleaseConfigError(f"invalid release config {resolved}: {exc}") from exc

    _log.info(
        "Loaded release config %s packages=%d peers=%d",
        resolved,
        len(cfg.packages),
        len(cfg.peer_dependencies),
    )
    return cfg


def resolve_config_path(path: Optional[Path]) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.getenv("BUILDMATRIX_CONFIG", "").strip()
    if env_path:
        return Path(env_path)
    return PROJECT_ROOT / DEFAULT_CONFIG_NAME
