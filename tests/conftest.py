from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from buildmatrix.api.main import app
from buildmatrix.core.models import PackageDeclaration, PeerDependencySet
from buildmatrix.observability.metrics import reset_metrics


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path: Path):
    # Never pick up a developer's buildmatrix.yaml or BUILDMATRIX_CONFIG
    monkeypatch.setenv("BUILDMATRIX_CONFIG", str(tmp_path / "absent-buildmatrix.yaml"))
    monkeypatch.delenv("BUILDMATRIX_PROJECT_ROOT", raising=False)
    reset_metrics()


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def ranger_core() -> PackageDeclaration:
    return PackageDeclaration(
        name="ranger-core",
        package_dir="packages/ranger-core",
        display_name="RangerCore",
        output_file="ranger-core",
        entry_file="src/index.jsx",
    )


@pytest.fixture()
def solid_peers() -> PeerDependencySet:
    return PeerDependencySet.from_mapping({"solid-js": "Solid"})
