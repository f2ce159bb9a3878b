"""Canonical gating tree representation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class CanonicalNode:
    """A node of the canonical gating tree.

    Attributes:
        id: Sequential id (>= 1) assigned in traversal order
        name: Display name (e.g., "Node_3", "CD3.0", "Pop_2")
        marker: Marker split on, or the population label for leaves
        cells: Cell count, set on leaves only
        threshold: Split threshold, set on decision nodes only
    """

    id: int
    name: str
    marker: str
    cells: Optional[int] = None
    threshold: Optional[float] = None

    @property
    def is_leaf(self) -> bool:
        return self.cells is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting unset optional fields."""
        record: Dict[str, Any] = {
            "id": int(self.id),
            "name": str(self.name),
            "marker": str(self.marker),
        }
        if self.cells is not None:
            record["cells"] = int(self.cells)
        if self.threshold is not None:
            record["threshold"] = float(self.threshold)
        return record


@dataclass(frozen=True)
class CanonicalLink:
    """Directed parent -> child edge between canonical node ids."""

    source: int
    target: int

    def to_dict(self) -> Dict[str, int]:
        return {"source": int(self.source), "target": int(self.target)}


@dataclass
class GatingTree:
    """Canonical ``{nodes, links}`` graph.

    Attributes:
        nodes: Nodes in id order
        links: Parent -> child links
        strategy: Name of the strategy that produced the tree ("" if empty)
        anomalies: Problems recovered locally during reconstruction
    """

    nodes: List[CanonicalNode] = field(default_factory=list)
    links: List[CanonicalLink] = field(default_factory=list)
    strategy: str = ""
    anomalies: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    @property
    def leaves(self) -> List[CanonicalNode]:
        return [node for node in self.nodes if node.is_leaf]

    def total_leaf_cells(self) -> int:
        return int(sum(node.cells or 0 for node in self.leaves))

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }
