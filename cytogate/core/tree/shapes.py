"""Shape sniffing for raw gating tree descriptions.

The gating routine can describe its tree as a numeric split table, as a
name-keyed mapping of node descriptors, or as a level-ordered list of node
labels. ``sniff_tree_shape`` inspects the raw value once and returns a
``RawTreeView`` holding every interpretation that applies, so the strategies
never inspect Python types themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ...utils.coerce import is_missing, is_number, is_sequence

TABLE_WIDTH = 5


class TreeShape(str, Enum):
    """Primary shape of a raw tree description."""

    TABLE = "table"
    KEYED = "keyed"
    LEVELS = "levels"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RawTreeView:
    """Tagged view over a raw tree description.

    Attributes:
        shape: Primary shape, in strategy priority order
        table: Split table with at least 5 columns (TABLE view)
        keyed: Node name -> descriptor mapping (KEYED view)
        levels: Node labels per level (LEVELS view)
        reshaped: True if the table view was reshaped from a flat sequence
    """

    shape: TreeShape
    table: Optional[np.ndarray] = None
    keyed: Optional[Dict[str, Any]] = None
    levels: Optional[List[List[str]]] = None
    reshaped: bool = False


def label_text(value: Any) -> str:
    """Render a level label, writing integral numbers without decimals.

    Examples:
        "CD3.0" -> "CD3.0"
        2 -> "2"
        3.0 -> "3"
    """
    if is_number(value):
        as_float = float(value)
        if np.isfinite(as_float) and as_float.is_integer():
            return str(int(as_float))
        return str(value)
    return str(value)


def _table_cell(value: Any) -> bool:
    return is_number(value) or is_missing(value)


def _coerce_rows(rows: List[List[Any]]) -> Optional[np.ndarray]:
    """Float table from equal-width rows; missing cells become NaN.

    Missing cells are only tolerated in split-table-wide rows that otherwise
    hold numbers, so a level list of labels is never read as a table.
    """
    width = len(rows[0])
    if width == 0 or any(len(row) != width for row in rows):
        return None
    if all(is_number(item) for row in rows for item in row):
        return np.asarray(rows, dtype=float)
    if width < TABLE_WIDTH:
        return None
    if not all(_table_cell(item) for row in rows for item in row):
        return None
    if not all(any(is_number(item) for item in row) for row in rows):
        return None
    frame = pd.DataFrame(rows).apply(pd.to_numeric, errors="coerce")
    return frame.to_numpy(dtype=float)


def _numeric_rows(raw: Any) -> Optional[np.ndarray]:
    """Convert a numeric container to a float array, or None if not numeric."""
    if isinstance(raw, pd.DataFrame):
        if raw.empty:
            return None
        if all(pd.api.types.is_numeric_dtype(dtype) for dtype in raw.dtypes):
            return raw.to_numpy(dtype=float)
        return _coerce_rows(raw.astype(object).values.tolist())

    if isinstance(raw, np.ndarray):
        if raw.dtype.kind in "iuf":
            return raw.astype(float)
        if raw.dtype.kind != "O":
            return None
        raw = raw.tolist()

    if isinstance(raw, pd.Series):
        raw = raw.tolist()

    if not isinstance(raw, (list, tuple)) or len(raw) == 0:
        return None

    if all(is_number(item) for item in raw):
        return np.asarray(raw, dtype=float)

    if all(is_sequence(row) for row in raw):
        return _coerce_rows([list(row) for row in raw])

    return None


def as_table(raw: Any, reshape: bool = True) -> Tuple[Optional[np.ndarray], bool]:
    """Interpret a raw value as a split table.

    Parameters
    ----------
    raw : Any
        Raw tree description.
    reshape : bool
        Reshape flat sequences (and single wide rows) whose length is
        divisible by 5 into rows of 5.

    Returns
    -------
    Tuple[Optional[np.ndarray], bool]
        The 2-D table (None when the value is not table-shaped) and whether
        it was reshaped.
    """
    values = _numeric_rows(raw)
    if values is None or values.size == 0:
        return None, False

    if values.ndim == 1:
        if reshape and values.size % TABLE_WIDTH == 0:
            return values.reshape(-1, TABLE_WIDTH), True
        return None, False

    if values.ndim != 2:
        return None, False

    n_rows, n_cols = values.shape
    if reshape and n_rows == 1 and n_cols > TABLE_WIDTH and n_cols % TABLE_WIDTH == 0:
        return values.reshape(-1, TABLE_WIDTH), True
    if n_cols >= TABLE_WIDTH:
        return values, False
    return None, False


def as_keyed(raw: Any) -> Optional[Dict[str, Any]]:
    """Interpret a raw value as a name-keyed descriptor mapping."""
    if not isinstance(raw, Mapping) or len(raw) == 0:
        return None
    return {str(key): value for key, value in raw.items()}


def _flatten_labels(level: Any, out: List[str]) -> bool:
    """Append the labels of one level to ``out``; False if it holds a mapping."""
    if isinstance(level, Mapping):
        return False
    if is_sequence(level):
        for item in list(level):
            if not _flatten_labels(item, out):
                return False
        return True
    if level is None:
        return True
    out.append(label_text(level))
    return True


def as_levels(raw: Any) -> Optional[List[List[str]]]:
    """Interpret a raw value as a level-ordered list of node labels."""
    if isinstance(raw, Mapping):
        items: Sequence[Any] = list(raw.values())
    elif is_sequence(raw):
        items = list(raw)
    else:
        return None
    if not items:
        return None

    levels: List[List[str]] = []
    for item in items:
        labels: List[str] = []
        if not _flatten_labels(item, labels):
            return None
        levels.append(labels)
    return levels


def sniff_tree_shape(raw: Any, reshape: bool = True) -> RawTreeView:
    """Classify a raw tree description.

    A numeric table never exposes a level view. A mapping exposes a keyed
    view, and also a level view when its values are plain labels.

    Parameters
    ----------
    raw : Any
        Raw tree description from the gating routine.
    reshape : bool
        Allow flat sequences to be reshaped into split-table rows.

    Returns
    -------
    RawTreeView
        View with the primary shape and all applicable interpretations.
    """
    if raw is None:
        return RawTreeView(shape=TreeShape.UNKNOWN)

    table, reshaped = as_table(raw, reshape=reshape)
    keyed = as_keyed(raw)
    levels = None if table is not None else as_levels(raw)

    if table is not None:
        shape = TreeShape.TABLE
    elif keyed is not None:
        shape = TreeShape.KEYED
    elif levels is not None:
        shape = TreeShape.LEVELS
    else:
        shape = TreeShape.UNKNOWN

    return RawTreeView(
        shape=shape,
        table=table,
        keyed=keyed,
        levels=levels,
        reshaped=reshaped,
    )
