from __future__ import annotations

from buildmatrix.core.externals import ExternalClassifier
from buildmatrix.core.models import PeerDependencySet


def _classifier(**globals_) -> ExternalClassifier:
    return ExternalClassifier(PeerDependencySet.from_mapping(globals_ or {"solid-js": "Solid", "react": "React"}))


def test_declared_peers_are_external():
    is_external = _classifier()
    assert is_external("solid-js") is True
    assert is_external("react") is True


def test_unknown_module_is_bundled():
    assert _classifier()("left-pad") is False


def test_no_prefix_or_substring_matching():
    is_external = _classifier()
    assert is_external("solid-js/web") is False
    assert is_external("solid") is False
    assert is_external("react-dom") is False
    assert is_external("") is False


def test_subpath_external_only_when_declared():
    is_external = ExternalClassifier(
        PeerDependencySet.from_mapping({"solid-js": "Solid", "solid-js/store": "SolidStore"})
    )
    assert is_external("solid-js/store") is True
    assert is_external("solid-js/web") is False


def test_empty_peer_set_bundles_everything():
    is_external = ExternalClassifier(PeerDependencySet())
    assert is_external("react") is False
    assert is_external.names == frozenset()


def test_classifier_is_idempotent():
    is_external = _classifier()
    assert [is_external("react") for _ in range(3)] == [True, True, True]
    assert [is_external("lodash") for _ in range(3)] == [False, False, False]


def test_classifier_unaffected_by_source_mapping_mutation():
    src = {"react": "React"}
    is_external = ExternalClassifier(PeerDependencySet.from_mapping(src))
    src["vue"] = "Vue"
    assert is_external("vue") is False


def test_sorted_names():
    assert _classifier().sorted_names() == ["react", "solid-js"]
