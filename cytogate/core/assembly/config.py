"""Configuration for result assembly and the master analysis configuration.

All analysis parameters are configurable via YAML.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..clustering.backend import DEFAULT_SPLIT_THRESHOLD
from ..phenotype.config import PhenotypeConfig
from ..preprocessing.config import CombineConfig
from ..tree.config import TreeConfig

TREE_TUPLE_FIELDS = ("marker_fields", "threshold_fields", "population_fields")


@dataclass
class AssemblyConfig:
    """Configuration for assembling the result payload.

    Attributes
    ----------
    max_cells : int
        Maximum number of events included in the cell sample
    seed : int, optional
        Seed of the cell sample; None draws a fresh sample every run
    range_precision : int
        Decimal digits kept on marker range bounds
    split_threshold : float
        Split sensitivity passed to the gating routine
    """

    max_cells: int = 10000
    seed: Optional[int] = None
    range_precision: int = 2
    split_threshold: float = DEFAULT_SPLIT_THRESHOLD

    def __post_init__(self) -> None:
        if self.max_cells < 0:
            raise ValueError(f"max_cells must be >= 0, got {self.max_cells}")


@dataclass
class AnalysisConfig:
    """Master configuration of an analysis run.

    Attributes
    ----------
    tree : TreeConfig
        Tree normalization configuration
    phenotype : PhenotypeConfig
        Phenotype annotation configuration
    combine : CombineConfig
        Sample combination configuration
    assembly : AssemblyConfig
        Result assembly configuration
    """

    tree: TreeConfig = field(default_factory=TreeConfig)
    phenotype: PhenotypeConfig = field(default_factory=PhenotypeConfig)
    combine: CombineConfig = field(default_factory=CombineConfig)
    assembly: AssemblyConfig = field(default_factory=AssemblyConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisConfig":
        """Build a configuration from a plain dictionary."""
        data = data or {}

        # Handle nested cytogate section
        if "cytogate" in data:
            data = data["cytogate"] or {}

        tree_data = dict(data.get("tree") or {})
        for name in TREE_TUPLE_FIELDS:
            if name in tree_data:
                tree_data[name] = tuple(tree_data[name])

        return cls(
            tree=TreeConfig(**tree_data),
            phenotype=PhenotypeConfig(**(data.get("phenotype") or {})),
            combine=CombineConfig(**(data.get("combine") or {})),
            assembly=AssemblyConfig(**(data.get("assembly") or {})),
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "AnalysisConfig":
        """Load configuration from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def default(cls) -> "AnalysisConfig":
        """Create default configuration."""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a YAML-safe dictionary."""
        tree = asdict(self.tree)
        for name in TREE_TUPLE_FIELDS:
            tree[name] = list(tree[name])
        return {
            "tree": tree,
            "phenotype": asdict(self.phenotype),
            "combine": asdict(self.combine),
            "assembly": asdict(self.assembly),
        }
