"""Bounded cell sampling for the scatter view."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

POPULATION_FIELD = "population"


def sample_cell_data(
    data: pd.DataFrame,
    labels: np.ndarray,
    max_cells: int = 10000,
    seed: Optional[int] = None,
    markers: Optional[Sequence[str]] = None,
) -> List[Dict[str, Any]]:
    """Draw at most ``max_cells`` events, each with its population id.

    Parameters
    ----------
    data : pd.DataFrame
        Events x markers matrix, row-aligned with ``labels``
    labels : np.ndarray
        Population id per event
    max_cells : int
        Sample ceiling; all events are kept when there are fewer
    seed : int, optional
        Seed of the random generator
    markers : Sequence[str], optional
        Columns to include (default: all columns)

    Returns
    -------
    List[Dict[str, Any]]
        One record per sampled event in original row order, with the
        ``population`` field first. Missing values are written as None.
    """
    n_events = len(data)
    if n_events == 0 or max_cells <= 0:
        return []
    if len(labels) != n_events:
        raise ValueError(
            f"labels has {len(labels)} entries but data has {n_events} events"
        )

    if n_events > max_cells:
        rng = np.random.default_rng(seed)
        positions = np.sort(rng.choice(n_events, size=max_cells, replace=False))
    else:
        positions = np.arange(n_events)

    columns = list(markers) if markers is not None else list(data.columns)
    values = data.iloc[positions][columns].to_numpy(dtype=float)
    sampled_labels = np.asarray(labels)[positions]

    records: List[Dict[str, Any]] = []
    for label, row in zip(sampled_labels, values):
        record: Dict[str, Any] = {POPULATION_FIELD: int(label)}
        for column, value in zip(columns, row):
            record[str(column)] = float(value) if np.isfinite(value) else None
        records.append(record)
    return records
