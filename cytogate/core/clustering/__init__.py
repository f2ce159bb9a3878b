"""Gating routine interface.

Provides:
- GatingBackend: Abstract interface of the external gating routine
- PrecomputedBackend: Backend wrapping outputs computed elsewhere
- ClusteringOutput: Raw label assignment, tree description and annotation
"""

from .backend import (
    DEFAULT_SPLIT_THRESHOLD,
    ClusteringOutput,
    GatingBackend,
    PrecomputedBackend,
)

__all__ = [
    "DEFAULT_SPLIT_THRESHOLD",
    "ClusteringOutput",
    "GatingBackend",
    "PrecomputedBackend",
]
