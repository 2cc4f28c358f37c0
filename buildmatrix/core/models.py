from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, Iterator, Mapping, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from buildmatrix.core.stages import TransformStage


class BuildFormat(str, Enum):
    ESM = "esm"
    CJS = "cjs"
    UMD_DEV = "umd-dev"
    UMD_PROD = "umd-prod"


# Positional contract: the bundler's reporting reads descriptors in this order.
FORMAT_ORDER: Tuple[BuildFormat, ...] = (
    BuildFormat.ESM,
    BuildFormat.CJS,
    BuildFormat.UMD_DEV,
    BuildFormat.UMD_PROD,
)


class PackageDeclaration(BaseModel):
    """One library package of a release.

    Field names follow Python conventions; the camelCase keys used by
    JS-side release manifests (``packageDir``, ``jsName``, ...) are accepted
    as input aliases.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    package_dir: str = Field(validation_alias=AliasChoices("package_dir", "packageDir", "packageDirectory"))
    display_name: str = Field(validation_alias=AliasChoices("display_name", "displayName", "jsName"))
    output_file: str = Field(validation_alias=AliasChoices("output_file", "outputFile", "outputBaseName"))
    entry_file: str = Field(validation_alias=AliasChoices("entry_file", "entryFile"))


@dataclass(frozen=True)
class PeerDependencySet:
    """Peer dependency name -> UMD global symbol. Keys are the externals."""

    globals: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = MappingProxyType({str(k): str(v) for k, v in dict(self.globals).items()})
        object.__setattr__(self, "globals", frozen)

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, str]]) -> "PeerDependencySet":
        return cls(globals=dict(mapping or {}))

    def names(self) -> FrozenSet[str]:
        return frozenset(self.globals.keys())

    def as_dict(self) -> Dict[str, str]:
        return dict(self.globals)

    def __iter__(self) -> Iterator[str]:
        return iter(self.globals)

    def __len__(self) -> int:
        return len(self.globals)

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.globals.items())))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PeerDependencySet):
            return NotImplemented
        return dict(self.globals) == dict(other.globals)


@dataclass(frozen=True)
class OutputOptions:
    format: str  # "esm" | "cjs" | "umd"
    banner: str
    sourcemap: bool = True
    dir: Optional[str] = None
    file: Optional[str] = None
    preserve_modules: bool = False
    exports: Optional[str] = None
    name: Optional[str] = None
    globals: Optional[Mapping[str, str]] = None

    @property
    def location(self) -> str:
        return self.dir if self.dir is not None else str(self.file)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"format": self.format, "sourcemap": self.sourcemap}
        if self.dir is not None:
            out["dir"] = self.dir
        if self.file is not None:
            out["file"] = self.file
        if self.preserve_modules:
            out["preserveModules"] = True
        if self.exports is not None:
            out["exports"] = self.exports
        if self.name is not None:
            out["name"] = self.name
        if self.globals is not None:
            out["globals"] = dict(self.globals)
        out["banner"] = self.banner
        return out


@dataclass(frozen=True)
class BuildDescriptor:
    package: str
    format: BuildFormat
    entry_path: str
    is_external: Callable[[str], bool]
    output: OutputOptions
    pipeline: Tuple[TransformStage, ...]
    banner: str

    @property
    def output_location(self) -> str:
        return self.output.location

    @property
    def global_name(self) -> Optional[str]:
        return self.output.name

    def stage_kinds(self) -> Tuple[str, ...]:
        return tuple(s.kind for s in self.pipeline)
