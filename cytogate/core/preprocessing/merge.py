"""Sample combination and marker selection.

Stacks the per-file sample matrices row-wise and narrows the combined matrix
to the markers requested for gating.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import pandas as pd

from .config import CombineConfig

logger = logging.getLogger(__name__)


class EmptyInputError(ValueError):
    """Raised when no sample supplies any usable rows."""


def _numeric_columns(frame: pd.DataFrame) -> pd.DataFrame:
    converted = frame.apply(pd.to_numeric, errors="coerce")
    keep = [
        column
        for column in frame.columns
        if converted[column].notna().any() or frame[column].isna().all()
    ]
    dropped = [column for column in frame.columns if column not in keep]
    if dropped:
        logger.debug("Dropping non-numeric columns: %s", dropped)
    return converted[keep]


def combine_samples(
    matrices: Sequence[Optional[pd.DataFrame]],
    config: Optional[CombineConfig] = None,
) -> pd.DataFrame:
    """Stack sample matrices into one events x markers matrix.

    Parameters
    ----------
    matrices : Sequence[pd.DataFrame]
        One matrix per sample file; None and empty matrices are skipped
    config : CombineConfig, optional
        Column reconciliation policy

    Returns
    -------
    pd.DataFrame
        Combined float matrix with a fresh 0..n-1 index. Column order follows
        the first usable sample (union adds new columns in encounter order).

    Raises
    ------
    EmptyInputError
        If no sample has any rows
    ValueError
        If the 'strict' policy finds differing columns
    """
    config = config or CombineConfig()

    usable: List[pd.DataFrame] = []
    for position, matrix in enumerate(matrices):
        if matrix is None or matrix.empty:
            logger.warning("Sample %d has no events; skipping", position + 1)
            continue
        frame = matrix.copy()
        frame.columns = [str(column) for column in frame.columns]
        if config.drop_non_numeric:
            frame = _numeric_columns(frame)
        usable.append(frame)

    if not usable:
        raise EmptyInputError("No valid data found in the provided samples")

    reference = list(usable[0].columns)
    if config.column_policy == "strict":
        for position, frame in enumerate(usable[1:], start=2):
            if list(frame.columns) != reference:
                raise ValueError(
                    f"Sample {position} columns {list(frame.columns)} differ from {reference}"
                )
        columns = reference
    elif config.column_policy == "union":
        columns = list(reference)
        for frame in usable[1:]:
            columns.extend(column for column in frame.columns if column not in columns)
    else:
        shared = set(reference)
        for frame in usable[1:]:
            shared &= set(frame.columns)
        columns = [column for column in reference if column in shared]
        if len(columns) < len(reference):
            logger.warning(
                "Keeping %d of %d columns shared by all samples",
                len(columns),
                len(reference),
            )

    combined = pd.concat(
        [frame.reindex(columns=columns) for frame in usable],
        ignore_index=True,
    ).astype(float)

    if combined.empty or len(columns) == 0:
        raise EmptyInputError("No valid data found in the provided samples")

    logger.info(
        "Combined %d samples: %d events x %d markers",
        len(usable),
        combined.shape[0],
        combined.shape[1],
    )
    return combined


def select_markers(
    data: pd.DataFrame, requested: Optional[Sequence[str]] = None
) -> pd.DataFrame:
    """Narrow the matrix to the requested markers.

    Requested markers present in ``data`` are kept in matrix column order.
    An empty request, or a request matching no column, keeps every column.
    """
    if not requested:
        return data

    wanted = {str(marker) for marker in requested}
    columns = [column for column in data.columns if column in wanted]
    if not columns:
        logger.warning(
            "None of the requested markers %s are in the data; using all %d columns",
            list(requested),
            data.shape[1],
        )
        return data

    missing = sorted(wanted - set(columns))
    if missing:
        logger.info("Requested markers not in data: %s", missing)
    return data.loc[:, columns]

