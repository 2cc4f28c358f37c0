from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Iterator, List, Mapping, Optional, Union

from buildmatrix.core.banner import DEFAULT_ORGANIZATION
from buildmatrix.core.errors import MisconfiguredPackage
from buildmatrix.core.externals import ExternalClassifier
from buildmatrix.core.models import BuildDescriptor, PackageDeclaration, PeerDependencySet
from buildmatrix.core.targets import build_targets
from buildmatrix.observability.metrics import inc_descriptor, inc_misconfigured, inc_named

log = logging.getLogger("buildmatrix.matrix")


class MatrixGenerator:
    """Builds the release matrix for one peer dependency set.

    The peer set is injected here rather than read from a module constant so
    independent runs (tests, multiple releases) never share state. One
    classifier is derived per generator and handed to every descriptor.
    """

    def __init__(
        self,
        peers: Union[PeerDependencySet, Mapping[str, str]],
        *,
        organization: str = DEFAULT_ORGANIZATION,
        project_root: Optional[Path] = None,
        max_workers: Optional[int] = None,
    ):
        if not isinstance(peers, PeerDependencySet):
            peers = PeerDependencySet.from_mapping(peers)
        self.peers = peers
        self.organization = organization
        self.project_root = project_root
        self.max_workers = max_workers
        self.is_external = ExternalClassifier(peers)

    def build_targets(self, decl: PackageDeclaration) -> List[BuildDescriptor]:
        try:
            group = build_targets(
                decl,
                peers=self.peers,
                organization=self.organization,
                project_root=self.project_root,
                is_external=self.is_external,
            )
        except MisconfiguredPackage as e:
            inc_misconfigured()
            log.warning("misconfigured package=%s fields=%s", e.package, ",".join(e.fields))
            raise

        for d in group:
            inc_descriptor(d.format.value)
        log.debug("built %d targets for package=%s", len(group), decl.name)
        return group

    def iter_groups(self, packages: Iterable[PackageDeclaration]) -> Iterator[List[BuildDescriptor]]:
        """Yield each package's descriptor group in declaration order.

        Groups already yielded stay valid if a later package raises.
        """
        packages = list(packages)
        if self.max_workers and self.max_workers > 1 and len(packages) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                # map() re-raises in submission order, so errors surface positionally
                yield from pool.map(self.build_targets, packages)
            return

        for decl in packages:
            yield self.build_targets(decl)

    def generate(self, packages: Iterable[PackageDeclaration]) -> List[BuildDescriptor]:
        out: List[BuildDescriptor] = []
        count = 0
        for group in self.iter_groups(packages):
            out.extend(group)
            count += 1
        inc_named("matrices_generated")
        log.info("generated matrix packages=%d descriptors=%d", count, len(out))
        return out


def generate_matrix(
    packages: Iterable[PackageDeclaration],
    *,
    peers: Union[PeerDependencySet, Mapping[str, str]],
    organization: str = DEFAULT_ORGANIZATION,
    project_root: Optional[Path] = None,
    max_workers: Optional[int] = None,
) -> List[BuildDescriptor]:
    gen = MatrixGenerator(
        peers,
        organization=organization,
        project_root=project_root,
        max_workers=max_workers,
    )
    return gen.generate(packages)
