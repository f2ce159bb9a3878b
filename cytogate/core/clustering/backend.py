"""Seam for the external hierarchical gating routine.

The split statistic itself lives outside this package. A backend receives
the combined marker matrix and a split sensitivity and returns the routine's
three outputs unchanged: the per-event label assignment, the raw tree
description and the per-population annotation table.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
import pandas as pd

from ..phenotype.builder import coerce_label_assignment

DEFAULT_SPLIT_THRESHOLD = 0.01


@dataclass
class ClusteringOutput:
    """Raw outputs of one gating run.

    Attributes
    ----------
    labels : np.ndarray
        One population id per event
    mark_tree : Any
        Raw tree description, in whichever shape the routine produced
    annotation : pd.DataFrame
        One row per population with a 0/1 call per marker plus ``labels``,
        ``count`` and ``prop`` columns
    """

    labels: np.ndarray
    mark_tree: Any = None
    annotation: Optional[pd.DataFrame] = None

    @property
    def n_events(self) -> int:
        return int(len(self.labels))


class GatingBackend(ABC):
    """Abstract base class for gating routines."""

    name: str = "base"

    @abstractmethod
    def run(self, data: pd.DataFrame, t: float = DEFAULT_SPLIT_THRESHOLD) -> ClusteringOutput:
        """Gate the events of ``data``.

        Parameters
        ----------
        data : pd.DataFrame
            Events x markers matrix restricted to the gating markers
        t : float
            Split sensitivity

        Returns
        -------
        ClusteringOutput
            Raw routine outputs
        """


class PrecomputedBackend(GatingBackend):
    """Backend returning outputs computed elsewhere.

    Used when the routine ran in another process and its outputs were saved
    to disk. The label assignment must cover every event of the matrix.

    Example
    -------
    >>> backend = PrecomputedBackend(labels, mark_tree, annotation)
    >>> output = backend.run(data)
    """

    name = "precomputed"

    def __init__(
        self,
        labels: Any,
        mark_tree: Any = None,
        annotation: Optional[pd.DataFrame] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.labels = coerce_label_assignment(labels)
        self.mark_tree = mark_tree
        self.annotation = annotation
        self.logger = logger or logging.getLogger(__name__)

    def run(self, data: pd.DataFrame, t: float = DEFAULT_SPLIT_THRESHOLD) -> ClusteringOutput:
        if len(self.labels) != len(data):
            raise ValueError(
                f"Label assignment has {len(self.labels)} entries "
                f"but the data has {len(data)} events"
            )
        self.logger.debug(
            "Using precomputed gating output for %d events (t=%s ignored)", len(data), t
        )
        return ClusteringOutput(
            labels=self.labels,
            mark_tree=self.mark_tree,
            annotation=self.annotation,
        )
