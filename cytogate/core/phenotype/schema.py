"""Phenotype records for terminal populations."""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class PhenotypeRecord:
    """Phenotype signature and statistics of one population.

    Attributes:
        key: Machine key, e.g. "CD3=1,CD4=0" (empty when unannotated)
        label: Human-readable signature, e.g. "CD3+ CD4-"
        population: Population id from the label assignment
        count: Cell count reported by the annotation routine
        proportion: Fraction of all cells, as reported by the annotation routine
        cells: Cell count taken from the label assignment
    """

    key: str
    label: str
    population: int
    count: int
    proportion: float
    cells: int

    @property
    def is_annotated(self) -> bool:
        return bool(self.key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "population": int(self.population),
            "count": int(self.count),
            "proportion": float(self.proportion),
            "cells": int(self.cells),
        }


@dataclass
class PopulationNode:
    """Flat population entry for the population overview.

    ``name`` and ``marker`` both carry the phenotype label, or the fallback
    ``Pop_<id>`` when the population has no phenotype.
    """

    id: int
    name: str
    marker: str
    cells: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": int(self.id),
            "name": str(self.name),
            "marker": str(self.marker),
            "cells": int(self.cells),
        }
