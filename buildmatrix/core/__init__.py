from .errors import MisconfiguredPackage, ReleaseConfigError
from .models import BuildDescriptor, BuildFormat, FORMAT_ORDER, PackageDeclaration, PeerDependencySet
from .externals import ExternalClassifier
from .pipeline import build_pipeline
from .targets import build_targets
from .matrix import MatrixGenerator, generate_matrix
from .render import descriptor_to_options, render_matrix

__all__ = [
    "MisconfiguredPackage",
    "ReleaseConfigError",
    "BuildDescriptor",
    "BuildFormat",
    "FORMAT_ORDER",
    "PackageDeclaration",
    "PeerDependencySet",
    "ExternalClassifier",
    "build_pipeline",
    "build_targets",
    "MatrixGenerator",
    "generate_matrix",
    "descriptor_to_options",
    "render_matrix",
]
