from __future__ import annotations

from typing import FrozenSet, List

from buildmatrix.core.models import PeerDependencySet


class ExternalClassifier:
    """Exact-name membership test against the peer dependency names.

    No prefix matching: ``solid-js`` being external says nothing about
    ``solid-js/web`` unless that name is declared too.
    """

    __slots__ = ("_names",)

    def __init__(self, peers: PeerDependencySet):
        self._names: FrozenSet[str] = peers.names()

    def __call__(self, module_name: str) -> bool:
        return module_name in self._names

    @property
    def names(self) -> FrozenSet[str]:
        return self._names

    def sorted_names(self) -> List[str]:
        return sorted(self._names)

    def __repr__(self) -> str:
        return f"ExternalClassifier({self.sorted_names()!r})"
