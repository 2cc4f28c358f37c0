from __future__ import annotations

from typing import Sequence, Tuple


class MisconfiguredPackage(ValueError):
    """Raised when a package declaration cannot yield a complete target set."""

    def __init__(self, package: str, fields: Sequence[str]):
        self.package = package
        self.fields: Tuple[str, ...] = tuple(fields)
        super().__init__(
            f"Package {package!r} is misconfigured: empty {', '.join(self.fields)}"
        )


class ReleaseConfigError(RuntimeError):
    pass
