"""Result payloads of an analysis run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..markers.metadata import MarkerMapping
from ..markers.ranges import MarkerRange
from ..phenotype.schema import PhenotypeRecord, PopulationNode
from ..tree.schema import GatingTree

RESULT_KEYS = (
    "nodes",
    "links",
    "treeNodes",
    "treeLinks",
    "populations",
    "cells",
    "markers",
    "markerMappings",
    "markerRanges",
    "cellData",
    "cellDataMarkers",
    "phenotypes",
    "debug_info",
)


@dataclass
class AnalysisResult:
    """Assembled output of one analysis run.

    Attributes:
        tree: Canonical gating tree (may be empty)
        population_nodes: Flat population list, one entry per population
        phenotypes: Phenotype records, one per population
        n_populations: Number of distinct populations in the label assignment
        n_cells: Number of events analysed
        markers: Gating markers, in matrix order
        marker_mappings: Technical name -> marker mapping
        marker_ranges: Marker -> observed range
        cell_data: Sampled events with their population id
        cell_data_markers: Markers shown first on the scatter view ("x", "y")
        debug_info: Raw tree diagnostics
    """

    tree: GatingTree
    population_nodes: List[PopulationNode] = field(default_factory=list)
    phenotypes: List[PhenotypeRecord] = field(default_factory=list)
    n_populations: int = 0
    n_cells: int = 0
    markers: List[str] = field(default_factory=list)
    marker_mappings: Dict[str, MarkerMapping] = field(default_factory=dict)
    marker_ranges: Dict[str, MarkerRange] = field(default_factory=dict)
    cell_data: List[Dict[str, Any]] = field(default_factory=list)
    cell_data_markers: Dict[str, str] = field(default_factory=dict)
    debug_info: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON payload with its stable keys."""
        tree = self.tree.to_dict()
        return {
            "nodes": [node.to_dict() for node in self.population_nodes],
            "links": [],
            "treeNodes": tree["nodes"],
            "treeLinks": tree["links"],
            "populations": int(self.n_populations),
            "cells": int(self.n_cells),
            "markers": list(self.markers),
            "markerMappings": {
                technical: mapping.to_dict()
                for technical, mapping in self.marker_mappings.items()
            },
            "markerRanges": {
                marker: marker_range.to_dict()
                for marker, marker_range in self.marker_ranges.items()
            },
            "cellData": list(self.cell_data),
            "cellDataMarkers": dict(self.cell_data_markers),
            "phenotypes": [record.to_dict() for record in self.phenotypes],
            "debug_info": dict(self.debug_info),
        }


@dataclass
class ErrorResult:
    """Failure payload of an analysis run."""

    error: str

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.error}
