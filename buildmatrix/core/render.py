from __future__ import annotations

from typing import Any, Dict, Iterable, List

from buildmatrix.core.externals import ExternalClassifier
from buildmatrix.core.models import BuildDescriptor


def _external_names(descriptor: BuildDescriptor) -> List[str]:
    pred = descriptor.is_external
    if isinstance(pred, ExternalClassifier):
        return pred.sorted_names()
    # Plain predicates cannot be enumerated; fall back to the UMD globals.
    return sorted(k for k in (descriptor.output.globals or {}) if pred(k))


def descriptor_to_options(descriptor: BuildDescriptor) -> Dict[str, Any]:
    """
    Bundler-facing option object for one descriptor (JSON-serializable).

    {
        "package": ..., "target": "umd-prod",
        "external": [...], "input": ...,
        "output": {...},
        "plugins": [{"name": ..., "options": {...}}, ...]
    }
    """
    return {
        "package": descriptor.package,
        "target": descriptor.format.value,
        "external": _external_names(descriptor),
        "input": descriptor.entry_path,
        "output": descriptor.output.to_dict(),
        "plugins": [{"name": s.plugin, "options": s.to_dict()} for s in descriptor.pipeline],
    }


def render_matrix(descriptors: Iterable[BuildDescriptor]) -> List[Dict[str, Any]]:
    return [descriptor_to_options(d) for d in descriptors]
