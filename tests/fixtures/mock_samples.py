"""Mock gating data generators for testing.

Provides sample matrices and matching gating outputs (label assignment,
tree descriptions in all three shapes, annotation table) without requiring
a real gating routine.
"""

from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

DEFAULT_MARKERS = ["CD3", "CD4", "CD8", "CD19"]


def create_sample_matrix(
    n_events: int = 200,
    markers: Optional[Sequence[str]] = None,
    seed: int = 42,
) -> pd.DataFrame:
    """Create an events x markers intensity matrix.

    Parameters
    ----------
    n_events : int
        Number of events
    markers : Sequence[str], optional
        Marker column names (default: CD3, CD4, CD8, CD19)
    seed : int
        Random seed for reproducibility

    Returns
    -------
    pd.DataFrame
        Matrix with log-normal-ish intensities
    """
    markers = list(markers or DEFAULT_MARKERS)
    rng = np.random.default_rng(seed)
    values = rng.normal(loc=2.0, scale=1.0, size=(n_events, len(markers)))
    return pd.DataFrame(values, columns=markers)


def create_parameter_metadata(
    channels: Sequence[str] = ("FL1-A", "FL2-A", "FSC-A"),
    stains: Sequence[Optional[str]] = ("CD3", "CD4", None),
) -> Dict[str, Any]:
    """Create an acquisition keyword dictionary with $PnN/$PnS entries."""
    description: Dict[str, Any] = {"$TOT": "1000", "$PAR": str(len(channels))}
    for index, (channel, stain) in enumerate(zip(channels, stains), start=1):
        description[f"$P{index}N"] = channel
        if stain is not None:
            description[f"$P{index}S"] = stain
    return description


def create_split_table() -> List[List[float]]:
    """Two-level split table over CD3 (index 0) then CD4 (index 1).

    Node 1 splits on CD3 into population 2 and node 3; node 3 splits on
    CD4 into populations 4 and 5.
    """
    return [
        [1, 0, 0.5, 2, 3],
        [3, 1, 1.25, 4, 5],
    ]


def create_keyed_tree() -> Dict[str, Any]:
    """Name-keyed description of the same tree as ``create_split_table``."""
    return {
        "root": {"marker": "CD3", "cut": 0.5},
        "CD3.0": {"population": 2},
        "CD3.1": {"marker": "CD4", "cut": 1.25},
        "CD4.0": {"population": 4},
        "CD4.1": {"population": 5},
    }


def create_gated_dataset(
    n_per_population: Sequence[int] = (30, 20, 50),
    populations: Sequence[int] = (2, 4, 5),
    seed: int = 7,
) -> Dict[str, Any]:
    """Create a sample matrix with matching gating outputs.

    Returns
    -------
    Dict[str, Any]
        ``data`` (DataFrame), ``labels`` (np.ndarray), ``mark_tree``
        (split table over CD3/CD4) and ``annotation`` (DataFrame with one
        row per population and 0/1 calls for CD3 and CD4)
    """
    labels = np.concatenate(
        [np.full(n, population) for n, population in zip(n_per_population, populations)]
    ).astype(np.int64)
    data = create_sample_matrix(
        n_events=len(labels), markers=["CD3", "CD4"], seed=seed
    )

    total = len(labels)
    calls = {2: (0, 0), 4: (1, 0), 5: (1, 1)}
    rows = []
    for n, population in zip(n_per_population, populations):
        cd3, cd4 = calls.get(population, (np.nan, np.nan))
        rows.append(
            {
                "CD3": cd3,
                "CD4": cd4,
                "labels": population,
                "count": n,
                "prop": n / total,
            }
        )

    return {
        "data": data,
        "labels": labels,
        "mark_tree": create_split_table(),
        "annotation": pd.DataFrame(rows),
    }
