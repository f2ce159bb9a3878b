"""Coercion of loosely typed values from the gating routine.

The routine hands back numbers as Python scalars, numpy scalars, strings or
missing values depending on the serialization path. These helpers turn them
into plain ``int``/``float`` values, or ``None`` when unusable.
"""

from __future__ import annotations

import math
import numbers
from typing import Any, Optional

import numpy as np
import pandas as pd


def is_number(value: Any) -> bool:
    """True for real numbers, excluding booleans."""
    return isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_))


def is_sequence(value: Any) -> bool:
    """True for list-like containers (not strings, bytes or mappings)."""
    return isinstance(value, (list, tuple, np.ndarray, pd.Series))


def as_float(value: Any) -> Optional[float]:
    """Finite float from a number or numeric string; None otherwise.

    Examples:
        0.5 -> 0.5
        "1.25" -> 1.25
        None, "", "NA", nan, True -> None
    """
    if value is None or isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def as_int(value: Any) -> Optional[int]:
    """Integer from a number or numeric string (truncated); None otherwise."""
    result = as_float(value)
    if result is None:
        return None
    return int(result)


MISSING_TOKENS = frozenset({"", "na", "nan", "null", "none"})


def is_missing(value: Any) -> bool:
    """True for None, NaN and NA-like strings.

    Examples:
        None, nan, "NA", "null", "" -> True
        0, "0", "CD3" -> False
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() in MISSING_TOKENS
    if is_number(value):
        return not math.isfinite(float(value))
    return False
