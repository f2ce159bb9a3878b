"""Reconstruction strategies for the three raw tree shapes.

Provides:
- BaseTreeStrategy: Abstract base class for all strategies
- MatrixStrategy: Split table rows [node, marker, threshold, left, right]
- KeyedStrategy: Node name -> descriptor mapping, children found by name
- LevelListStrategy: Level-ordered labels, children paired positionally

Every strategy writes into a fresh ``TraversalContext`` and recovers from
per-node problems locally (placeholder markers, zero-count leaves).
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

import numpy as np

from ...utils.coerce import as_float, as_int, is_number, is_sequence
from .config import TreeConfig
from .context import CYCLE_DETECTED, INDEX_OUT_OF_RANGE, TraversalContext
from .shapes import RawTreeView

ROOT_EXTERNAL_ID = 1
LEAF_LABEL_PATTERN = re.compile(r"[0-9]+")
MARKER_SUFFIX_PATTERN = re.compile(r"\.[0-9]+$")


def _as_threshold(value: Any, precision: int) -> Optional[float]:
    threshold = as_float(value)
    if threshold is None:
        return None
    return round(threshold, precision)


class BaseTreeStrategy(ABC):
    """Abstract base class for tree reconstruction strategies.

    Attributes
    ----------
    name : str
        Strategy identifier, recorded on the resulting tree
    fallback : bool
        Fallback strategies run only when the primary strategies produced
        at most one node, and win only with a larger tree
    """

    name: str = "base"
    fallback: bool = False

    @abstractmethod
    def applies(self, view: RawTreeView) -> bool:
        """True if the raw value exposes the shape this strategy reads."""

    @abstractmethod
    def build(
        self, view: RawTreeView, context: TraversalContext, config: TreeConfig
    ) -> None:
        """Emit nodes and links for ``view`` into ``context``."""


class MatrixStrategy(BaseTreeStrategy):
    """Depth-first expansion of a split table starting at external id 1.

    An id that is a row key is a decision node; any other id is a leaf
    whose population id is the external id itself.
    """

    name = "matrix"

    def applies(self, view: RawTreeView) -> bool:
        return view.table is not None

    def build(
        self, view: RawTreeView, context: TraversalContext, config: TreeConfig
    ) -> None:
        rows: Dict[int, np.ndarray] = {}
        for row in view.table:
            key = as_int(row[0])
            if key is None:
                context.note(INDEX_OUT_OF_RANGE, "split row without a usable node id")
                continue
            # First row wins for duplicated ids
            rows.setdefault(key, row)

        self._expand(ROOT_EXTERNAL_ID, rows, context, config, set())

    def _expand(
        self,
        external_id: Optional[int],
        rows: Dict[int, np.ndarray],
        context: TraversalContext,
        config: TreeConfig,
        ancestors: Set[int],
    ) -> int:
        if external_id is None:
            context.note(INDEX_OUT_OF_RANGE, "child reference is not a finite id")
            return context.add_placeholder_leaf("Pop_NA")

        row = rows.get(external_id)
        if row is None:
            return context.add_leaf(external_id)

        if external_id in ancestors:
            context.note(CYCLE_DETECTED, f"split row {external_id} is its own ancestor")
            return context.add_placeholder_leaf(f"Node_{external_id}")

        marker_index = as_int(row[1])
        if marker_index is None:
            context.note(INDEX_OUT_OF_RANGE, f"split row {external_id} has no marker index")
            marker = "Marker_NA"
        else:
            marker = context.resolve_marker(marker_index, config.marker_index_base)

        node_id = context.add_decision_node(
            name=f"Node_{external_id}",
            marker=marker,
            threshold=_as_threshold(row[2], config.threshold_precision),
        )

        ancestors.add(external_id)
        left_id = self._expand(as_int(row[3]), rows, context, config, ancestors)
        right_id = self._expand(as_int(row[4]), rows, context, config, ancestors)
        ancestors.discard(external_id)

        context.link(node_id, left_id)
        context.link(node_id, right_id)
        return node_id


@dataclass(frozen=True)
class KeyedDescriptor:
    """Parsed fields of one keyed tree entry."""

    marker: Optional[str] = None
    threshold: Optional[float] = None
    population: Optional[int] = None


def _first_field(entry: Mapping[str, Any], fields: Tuple[str, ...]) -> Any:
    for field_name in fields:
        value = entry.get(field_name)
        if value is not None:
            return value
    return None


def parse_keyed_entry(
    entry: Any, context: TraversalContext, config: TreeConfig
) -> KeyedDescriptor:
    """Extract marker, threshold and population id from a keyed entry.

    Mapping entries are read through the configured field aliases, falling
    back to the first string value for the marker. Sequence entries are read
    as ``[marker, threshold]``; scalar entries are the marker itself.
    Numeric markers are column indices into the gating markers.
    """
    marker_value: Any = None
    threshold_value: Any = None
    population_value: Any = None

    if isinstance(entry, Mapping):
        marker_value = _first_field(entry, config.marker_fields)
        threshold_value = _first_field(entry, config.threshold_fields)
        population_value = _first_field(entry, config.population_fields)
        if marker_value is None:
            reserved = set(config.threshold_fields) | set(config.population_fields)
            for key, value in entry.items():
                if key not in reserved and isinstance(value, str) and value.strip():
                    marker_value = value
                    break
    elif is_sequence(entry):
        items = list(entry)
        if items:
            marker_value = items[0]
        if len(items) > 1 and is_number(items[1]):
            threshold_value = items[1]
    elif entry is not None:
        marker_value = entry

    marker: Optional[str] = None
    if is_number(marker_value):
        index = as_int(marker_value)
        if index is not None and float(marker_value).is_integer():
            marker = context.resolve_marker(index, config.marker_index_base)
        else:
            marker = str(marker_value)
    elif marker_value is not None:
        marker = str(marker_value).strip() or None

    return KeyedDescriptor(
        marker=marker,
        threshold=_as_threshold(threshold_value, config.threshold_precision),
        population=as_int(population_value),
    )


class KeyedStrategy(BaseTreeStrategy):
    """Name-addressed traversal of a node name -> descriptor mapping.

    Children of a node are the entries named ``<marker>.0`` / ``<marker>.1``,
    else ``<node>.0`` / ``<node>.1``. Names map to canonical ids through the
    context's name table; a name reached twice keeps its first id and gets
    no second link.
    """

    name = "keyed"

    def applies(self, view: RawTreeView) -> bool:
        return view.keyed is not None

    def build(
        self, view: RawTreeView, context: TraversalContext, config: TreeConfig
    ) -> None:
        keyed = view.keyed
        root_name = config.root_key if config.root_key in keyed else next(iter(keyed))
        self._visit(root_name, None, keyed, context, config)

    @staticmethod
    def _child_name(
        node_name: str,
        marker: Optional[str],
        side: str,
        keyed: Dict[str, Any],
    ) -> Optional[str]:
        candidates = []
        if marker is not None:
            candidates.append(f"{marker}.{side}")
        candidates.append(f"{node_name}.{side}")
        for candidate in candidates:
            if candidate in keyed:
                return candidate
        return None

    def _visit(
        self,
        node_name: str,
        parent_id: Optional[int],
        keyed: Dict[str, Any],
        context: TraversalContext,
        config: TreeConfig,
    ) -> int:
        if node_name in context.visited:
            return context.name_to_id[node_name]
        context.visited.add(node_name)

        descriptor = parse_keyed_entry(keyed[node_name], context, config)
        marker_label = descriptor.marker or config.default_marker

        children: List[str] = []
        for side in ("0", "1"):
            child = self._child_name(node_name, descriptor.marker, side, keyed)
            if child is not None and child != node_name and child not in context.visited:
                children.append(child)

        if children:
            node_id = context.add_decision_node(
                name=node_name, marker=marker_label, threshold=descriptor.threshold
            )
        else:
            population = descriptor.population
            if population is None:
                population = context.next_leaf_ordinal()
            node_id = context.add_leaf(population, name=node_name, marker=marker_label)

        context.name_to_id[node_name] = node_id
        if parent_id is not None:
            context.link(parent_id, node_id)

        for child in children:
            self._visit(child, node_id, keyed, context, config)
        return node_id


class LevelListStrategy(BaseTreeStrategy):
    """Positional pairing of level-ordered labels.

    Pure-digit labels are population leaves; other labels are decision nodes
    whose marker drops any trailing ``.<digits>`` suffix. Each decision node
    of a level takes the next two labels of the following level.
    """

    name = "levels"
    fallback = True

    def applies(self, view: RawTreeView) -> bool:
        return bool(view.levels)

    @staticmethod
    def _create(label: str, context: TraversalContext) -> Tuple[int, bool]:
        if LEAF_LABEL_PATTERN.fullmatch(label):
            return context.add_leaf(int(label)), False
        marker = MARKER_SUFFIX_PATTERN.sub("", label)
        return context.add_decision_node(name=label, marker=marker), True

    def build(
        self, view: RawTreeView, context: TraversalContext, config: TreeConfig
    ) -> None:
        levels = view.levels
        open_ids: List[int] = []
        for label in levels[0]:
            node_id, is_decision = self._create(label, context)
            if is_decision:
                open_ids.append(node_id)

        for labels in levels[1:]:
            if not open_ids or not labels:
                break
            next_open: List[int] = []
            position = 0
            for parent_id in open_ids:
                for _ in range(2):
                    if position >= len(labels):
                        break
                    node_id, is_decision = self._create(labels[position], context)
                    position += 1
                    context.link(parent_id, node_id)
                    if is_decision:
                        next_open.append(node_id)
            open_ids = next_open


DEFAULT_STRATEGIES: Tuple[BaseTreeStrategy, ...] = (
    MatrixStrategy(),
    KeyedStrategy(),
    LevelListStrategy(),
)
