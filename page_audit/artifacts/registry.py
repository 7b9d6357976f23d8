"""
Registry of computed artifacts: name, declared raw inputs, derivation.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Tuple

from ..config import AuditSettings
from .manifest_values import compute_manifest_values
from .response_compression import compute_compression_candidates
from .timeline import reconstruct_timeline


@dataclass(frozen=True)
class ComputedArtifact:
    """
    Описание производного артефакта.

    derive вызывается как derive(*inputs, settings=settings) и должен быть
    чистой функцией своих входов.
    """

    name: str
    inputs: Tuple[str, ...]
    derive: Callable[..., Any]


def _page_timeline(trace_events, settings: AuditSettings):
    return reconstruct_timeline(trace_events)


DEFAULT_ARTIFACTS = (
    ComputedArtifact("PageTimeline", ("Trace",), _page_timeline),
    ComputedArtifact("ManifestValues", ("Manifest",), compute_manifest_values),
    ComputedArtifact("CompressionCandidates", ("NetworkRecords",), compute_compression_candidates),
)


def build_registry(artifacts: Iterable[ComputedArtifact] = DEFAULT_ARTIFACTS) -> Dict[str, ComputedArtifact]:
    registry: Dict[str, ComputedArtifact] = {}
    for artifact in artifacts:
        if artifact.name in registry:
            raise ValueError(f"Computed artifact registered twice: {artifact.name}")
        registry[artifact.name] = artifact
    return registry
