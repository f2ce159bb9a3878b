"""Phenotype annotation module.

Builds phenotype signatures and statistics for the terminal populations of
the gating tree.
"""

from .builder import (
    as_annotation_frame,
    build_phenotypes,
    build_population_nodes,
    coerce_label_assignment,
    compute_label_counts,
    format_phenotype,
    resolve_markers_in_use,
)
from .config import PhenotypeConfig
from .schema import PhenotypeRecord, PopulationNode

__all__ = [
    # Config
    "PhenotypeConfig",
    # Schema
    "PhenotypeRecord",
    "PopulationNode",
    # Builder
    "build_phenotypes",
    "build_population_nodes",
    "format_phenotype",
    "resolve_markers_in_use",
    "compute_label_counts",
    "coerce_label_assignment",
    "as_annotation_frame",
]
