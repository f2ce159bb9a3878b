"""Per-marker value ranges of the combined sample matrix."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable

import numpy as np
import pandas as pd


@dataclass
class MarkerRange:
    """Observed minimum and maximum of one marker."""

    min: float
    max: float

    def to_dict(self) -> Dict[str, float]:
        return {"min": float(self.min), "max": float(self.max)}


def extract_marker_ranges(
    data: pd.DataFrame,
    markers: Iterable[str],
    precision: int = 2,
) -> Dict[str, MarkerRange]:
    """Compute min/max per requested marker.

    Parameters
    ----------
    data : pd.DataFrame
        Combined sample matrix (events x markers)
    markers : Iterable[str]
        Markers to summarize; markers absent from ``data`` are skipped
    precision : int
        Decimal places of the reported bounds

    Returns
    -------
    Dict[str, MarkerRange]
        Marker -> range, in the requested order. NaN values are ignored and
        markers with no finite value are left out.
    """
    ranges: Dict[str, MarkerRange] = {}
    if data is None or data.empty:
        return ranges

    for marker in markers:
        if marker not in data.columns or marker in ranges:
            continue
        values = pd.to_numeric(data[marker], errors="coerce").to_numpy(dtype=float)
        values = values[np.isfinite(values)]
        if values.size == 0:
            continue
        ranges[marker] = MarkerRange(
            min=round(float(values.min()), precision),
            max=round(float(values.max()), precision),
        )
    return ranges
