"""Configuration for gating tree normalization."""

from dataclasses import dataclass
from typing import Tuple


@dataclass
class TreeConfig:
    """Configuration for tree shape normalization.

    Attributes
    ----------
    marker_index_base : int
        Index of the first marker column in numeric marker references
        (0 = Python-style, 1 = R-style)
    threshold_precision : int
        Decimal digits kept on split thresholds
    reshape_flat_tables : bool
        Reshape a flat numeric sequence (or a single wide row) whose length
        is divisible by 5 into split-table rows of 5
    root_key : str
        Name of the start node in name-keyed descriptions
    default_marker : str
        Marker label used when a keyed descriptor names no marker
    marker_fields : Tuple[str, ...]
        Descriptor fields holding the split marker, in lookup order
    threshold_fields : Tuple[str, ...]
        Descriptor fields holding the split threshold, in lookup order
    population_fields : Tuple[str, ...]
        Descriptor fields holding an explicit leaf population id
    """

    marker_index_base: int = 0
    threshold_precision: int = 2
    reshape_flat_tables: bool = True
    root_key: str = "root"
    default_marker: str = "root"
    marker_fields: Tuple[str, ...] = ("marker", "variable", "feature")
    threshold_fields: Tuple[str, ...] = ("cut", "threshold", "split")
    population_fields: Tuple[str, ...] = ("population", "label", "pop")
