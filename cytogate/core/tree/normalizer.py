"""Tree shape normalization.

Turns the raw tree description of the gating routine into one canonical
``GatingTree``. The raw value is classified once (see ``shapes``); the
strategies are then tried in priority order:

1. matrix - split table rows
2. keyed  - name-keyed descriptors (only if the matrix strategy found nothing)
3. levels - level-ordered labels, a fallback adopted only when the tree so
   far has at most one node and the level tree is larger

When every strategy comes back empty the result is an empty tree, never an
exception, so callers can still report phenotypes.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import numpy as np

from .config import TreeConfig
from .context import SHAPE_UNRECOGNIZED, STRATEGY_FAILED, TraversalContext
from .schema import GatingTree
from .shapes import RawTreeView, sniff_tree_shape
from .strategies import DEFAULT_STRATEGIES, BaseTreeStrategy


def coerce_label_counts(label_counts: Any) -> np.ndarray:
    """Dense integer counts indexed by population id; missing values count as 0."""
    if label_counts is None:
        return np.zeros(0, dtype=np.int64)
    counts = np.asarray(label_counts, dtype=float).ravel()
    counts = np.nan_to_num(counts, nan=0.0, posinf=0.0, neginf=0.0)
    counts[counts < 0] = 0
    return counts.astype(np.int64)


class TreeNormalizer:
    """Strategy dispatcher for raw gating tree descriptions.

    Parameters
    ----------
    config : TreeConfig, optional
        Normalization configuration
    logger : logging.Logger, optional
        Logger instance
    strategies : Sequence[BaseTreeStrategy], optional
        Strategies in priority order (default: matrix, keyed, levels)

    Example
    -------
    >>> normalizer = TreeNormalizer()
    >>> tree = normalizer.normalize([[1, 0, 0.5, 2, 3]], [0, 0, 5, 7], ["CD3"])
    >>> [node.name for node in tree.nodes]
    ['Node_1', 'Pop_2', 'Pop_3']
    """

    def __init__(
        self,
        config: Optional[TreeConfig] = None,
        logger: Optional[logging.Logger] = None,
        strategies: Optional[Sequence[BaseTreeStrategy]] = None,
    ):
        self.config = config or TreeConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.strategies = tuple(strategies) if strategies is not None else DEFAULT_STRATEGIES

    def sniff(self, raw_tree: Any) -> RawTreeView:
        return sniff_tree_shape(raw_tree, reshape=self.config.reshape_flat_tables)

    def _run_strategy(
        self,
        strategy: BaseTreeStrategy,
        view: RawTreeView,
        label_counts: np.ndarray,
        marker_names: Sequence[str],
    ) -> GatingTree:
        context = TraversalContext(label_counts=label_counts, marker_names=marker_names)
        try:
            strategy.build(view, context, self.config)
        except (TypeError, ValueError, KeyError, IndexError, RecursionError) as exc:
            self.logger.warning(
                "Tree strategy '%s' failed on %s input: %s",
                strategy.name,
                view.shape.value,
                exc,
            )
            return GatingTree(
                strategy=strategy.name,
                anomalies=[f"{STRATEGY_FAILED}: {strategy.name}: {exc}"],
            )
        return context.to_tree(strategy.name)

    def normalize(
        self,
        raw_tree: Any,
        label_counts: Any,
        marker_names: Sequence[str],
    ) -> GatingTree:
        """Reconstruct the canonical tree.

        Parameters
        ----------
        raw_tree : Any
            Raw tree description (table, keyed mapping or level list)
        label_counts : array-like
            Cells per population; index i holds the count of population i
        marker_names : Sequence[str]
            Ordered marker columns used for gating

        Returns
        -------
        GatingTree
            Canonical tree; empty when no strategy recognized the input
        """
        view = self.sniff(raw_tree)
        counts = coerce_label_counts(label_counts)
        markers = [str(marker) for marker in marker_names]
        self.logger.debug(
            "Raw gating tree sniffed as %s (reshaped=%s)", view.shape.value, view.reshaped
        )

        chosen: Optional[GatingTree] = None
        for strategy in self.strategies:
            if strategy.fallback or not strategy.applies(view):
                continue
            tree = self._run_strategy(strategy, view, counts, markers)
            if not tree.is_empty:
                chosen = tree
                break

        for strategy in self.strategies:
            if not strategy.fallback or not strategy.applies(view):
                continue
            current_size = len(chosen) if chosen is not None else 0
            if current_size > 1:
                break
            tree = self._run_strategy(strategy, view, counts, markers)
            if len(tree) > current_size:
                chosen = tree

        if chosen is None or chosen.is_empty:
            self.logger.warning(
                "No gating tree could be reconstructed from %s input",
                view.shape.value,
            )
            return GatingTree(
                anomalies=[f"{SHAPE_UNRECOGNIZED}: {view.shape.value} input"]
            )

        self.logger.info(
            "Gating tree: %d nodes, %d links, %d leaf cells (%s strategy)",
            len(chosen.nodes),
            len(chosen.links),
            chosen.total_leaf_cells(),
            chosen.strategy,
        )
        if chosen.anomalies:
            self.logger.warning(
                "Gating tree rebuilt with %d recovered anomalies", len(chosen.anomalies)
            )
        return chosen


def normalize(
    raw_tree: Any,
    label_counts: Any,
    marker_names: Sequence[str],
    config: Optional[TreeConfig] = None,
) -> GatingTree:
    """Normalize a raw tree description with the default strategies.

    See ``TreeNormalizer.normalize``.
    """
    return TreeNormalizer(config).normalize(raw_tree, label_counts, marker_names)
