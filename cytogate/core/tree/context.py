"""Traversal state shared by the tree reconstruction strategies."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

import numpy as np

from .schema import CanonicalLink, CanonicalNode, GatingTree

logger = logging.getLogger(__name__)

# Anomaly categories recorded during reconstruction
INDEX_OUT_OF_RANGE = "index_out_of_range"
SHAPE_UNRECOGNIZED = "shape_unrecognized"
CYCLE_DETECTED = "cycle_detected"
STRATEGY_FAILED = "strategy_failed"


def population_name(population_id: int) -> str:
    return f"Pop_{population_id}"


@dataclass
class TraversalContext:
    """Id counter and node/link accumulator for one reconstruction.

    Each strategy run gets its own context, so partial results from two
    strategies never mix.

    Attributes:
        label_counts: Cells per population id (index = population id)
        marker_names: Ordered marker columns used for gating
        nodes: Nodes emitted so far, in id order
        links: Links emitted so far
        name_to_id: Node name -> canonical id, for name-addressed strategies
        visited: Node names already expanded
        anomalies: Recovered problems, as "<category>: <detail>" strings
    """

    label_counts: np.ndarray
    marker_names: Sequence[str]
    nodes: List[CanonicalNode] = field(default_factory=list)
    links: List[CanonicalLink] = field(default_factory=list)
    name_to_id: Dict[str, int] = field(default_factory=dict)
    visited: Set[str] = field(default_factory=set)
    anomalies: List[str] = field(default_factory=list)
    _next_id: int = 0
    _leaf_ordinal: int = 0

    def next_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def add_decision_node(
        self, name: str, marker: str, threshold: Optional[float] = None
    ) -> int:
        node_id = self.next_id()
        self.nodes.append(
            CanonicalNode(id=node_id, name=name, marker=marker, threshold=threshold)
        )
        return node_id

    def add_leaf(
        self,
        population_id: int,
        name: Optional[str] = None,
        marker: Optional[str] = None,
    ) -> int:
        """Emit a population leaf with its cell count from ``label_counts``."""
        node_id = self.next_id()
        label = population_name(population_id)
        self.nodes.append(
            CanonicalNode(
                id=node_id,
                name=name or label,
                marker=marker or label,
                cells=self.cells_for(population_id),
            )
        )
        return node_id

    def add_placeholder_leaf(self, name: str) -> int:
        """Emit a zero-count leaf standing in for an unusable reference."""
        node_id = self.next_id()
        self.nodes.append(CanonicalNode(id=node_id, name=name, marker=name, cells=0))
        return node_id

    def next_leaf_ordinal(self) -> int:
        """Population id for the next leaf that carries no explicit id."""
        self._leaf_ordinal += 1
        return self._leaf_ordinal

    def link(self, source: int, target: int) -> None:
        self.links.append(CanonicalLink(source=source, target=target))

    def cells_for(self, population_id: int) -> int:
        """Cell count of a population; zero when the id is out of range."""
        if 0 <= population_id < len(self.label_counts):
            return int(self.label_counts[population_id])
        self.note(INDEX_OUT_OF_RANGE, f"population {population_id} has no label count")
        return 0

    def resolve_marker(self, index: int, base: int = 0) -> str:
        """Marker name for a column index, or a ``Marker_<index>`` placeholder."""
        position = index - base
        if 0 <= position < len(self.marker_names):
            return str(self.marker_names[position])
        self.note(INDEX_OUT_OF_RANGE, f"marker index {index} outside {len(self.marker_names)} markers")
        return f"Marker_{index}"

    def note(self, category: str, detail: str) -> None:
        message = f"{category}: {detail}"
        logger.debug("Tree reconstruction anomaly - %s", message)
        self.anomalies.append(message)

    def to_tree(self, strategy: str) -> GatingTree:
        return GatingTree(
            nodes=list(self.nodes),
            links=list(self.links),
            strategy=strategy,
            anomalies=list(self.anomalies),
        )
