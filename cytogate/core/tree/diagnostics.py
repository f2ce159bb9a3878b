"""Debug summary of the raw tree description."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import numpy as np
import pandas as pd

from ...utils.coerce import is_sequence
from .schema import GatingTree
from .shapes import label_text, sniff_tree_shape


def _raw_length(raw: Any) -> int:
    if isinstance(raw, (np.ndarray, pd.DataFrame)):
        return int(raw.size)
    try:
        return len(raw)
    except TypeError:
        return 1


def _first_item(raw: Any) -> Any:
    if isinstance(raw, Mapping):
        return next(iter(raw.values()), None)
    if isinstance(raw, pd.DataFrame):
        return raw.iloc[0].tolist() if len(raw) else None
    if is_sequence(raw):
        items = list(raw)
        return items[0] if items else None
    return raw


def _sample_text(raw: Any) -> Optional[List[str]]:
    item = _first_item(raw)
    if item is None:
        return None
    if isinstance(item, Mapping):
        return [label_text(value) for value in item.values()]
    if is_sequence(item):
        return [label_text(value) for value in list(item)]
    return [label_text(item)]


def describe_raw_tree(raw_tree: Any, tree: Optional[GatingTree] = None) -> Dict[str, Any]:
    """Summarize a raw tree description for the ``debug_info`` payload.

    Args:
        raw_tree: Raw tree description from the gating routine
        tree: Normalized tree, to record the winning strategy and anomalies

    Returns:
        Dict with the type, length, names and first element of the raw value
    """
    is_null = raw_tree is None
    info: Dict[str, Any] = {
        "mark_tree_is_null": is_null,
        "mark_tree_class": "NULL" if is_null else type(raw_tree).__name__,
        "mark_tree_length": 0 if is_null else _raw_length(raw_tree),
        "mark_tree_names": (
            [str(key) for key in raw_tree.keys()] if isinstance(raw_tree, Mapping) else []
        ),
        "mark_tree_sample": None if is_null else _sample_text(raw_tree),
        "mark_tree_shape": sniff_tree_shape(raw_tree).shape.value,
    }
    if tree is not None:
        info["strategy"] = tree.strategy
        info["anomalies"] = list(tree.anomalies)
    return info
