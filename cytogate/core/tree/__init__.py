"""Gating tree normalization.

Reconstructs one canonical node/link tree from the raw tree description of
the gating routine, whichever of its three shapes it arrives in.
"""

from .config import TreeConfig
from .context import TraversalContext
from .diagnostics import describe_raw_tree
from .normalizer import TreeNormalizer, coerce_label_counts, normalize
from .schema import CanonicalLink, CanonicalNode, GatingTree
from .shapes import RawTreeView, TreeShape, sniff_tree_shape
from .strategies import (
    BaseTreeStrategy,
    KeyedStrategy,
    LevelListStrategy,
    MatrixStrategy,
    parse_keyed_entry,
)

__all__ = [
    # Config
    "TreeConfig",
    # Schema
    "CanonicalNode",
    "CanonicalLink",
    "GatingTree",
    # Shapes
    "TreeShape",
    "RawTreeView",
    "sniff_tree_shape",
    # Strategies
    "BaseTreeStrategy",
    "MatrixStrategy",
    "KeyedStrategy",
    "LevelListStrategy",
    "TraversalContext",
    "parse_keyed_entry",
    # Normalizer
    "TreeNormalizer",
    "normalize",
    "coerce_label_counts",
    "describe_raw_tree",
]
