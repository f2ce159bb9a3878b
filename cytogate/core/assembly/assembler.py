"""Pure composition of the analysis payload."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..markers.metadata import MarkerMapping
from ..markers.ranges import MarkerRange
from ..phenotype.schema import PhenotypeRecord, PopulationNode
from ..tree.schema import GatingTree
from .schema import AnalysisResult


def scatter_axes(markers: Sequence[str]) -> Dict[str, str]:
    """Initial scatter axes: the first two markers (the first twice if only one)."""
    if not markers:
        return {}
    x_marker = str(markers[0])
    y_marker = str(markers[1]) if len(markers) > 1 else x_marker
    return {"x": x_marker, "y": y_marker}


def assemble_result(
    tree: GatingTree,
    phenotypes: List[PhenotypeRecord],
    population_nodes: List[PopulationNode],
    labels: np.ndarray,
    markers: Sequence[str],
    marker_mappings: Optional[Dict[str, MarkerMapping]] = None,
    marker_ranges: Optional[Dict[str, MarkerRange]] = None,
    cell_data: Optional[List[Dict[str, Any]]] = None,
    debug_info: Optional[Dict[str, Any]] = None,
) -> AnalysisResult:
    """Combine the component outputs into one ``AnalysisResult``.

    An empty tree is passed through unchanged; phenotypes and populations
    are reported regardless of whether a tree could be reconstructed.

    Args:
        tree: Canonical gating tree
        phenotypes: Phenotype records
        population_nodes: Flat population list
        labels: Population id per event
        markers: Gating markers
        marker_mappings: Technical name -> marker mapping
        marker_ranges: Marker -> observed range
        cell_data: Sampled events
        debug_info: Raw tree diagnostics

    Returns:
        Assembled result
    """
    labels = np.asarray(labels)
    return AnalysisResult(
        tree=tree,
        population_nodes=list(population_nodes),
        phenotypes=list(phenotypes),
        n_populations=int(np.unique(labels[labels >= 0]).size) if labels.size else 0,
        n_cells=int(labels.size),
        markers=[str(marker) for marker in markers],
        marker_mappings=dict(marker_mappings or {}),
        marker_ranges=dict(marker_ranges or {}),
        cell_data=list(cell_data or []),
        cell_data_markers=scatter_axes(markers),
        debug_info=dict(debug_info or {}),
    )
