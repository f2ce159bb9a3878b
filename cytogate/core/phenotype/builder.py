"""Phenotype annotation of terminal populations.

This module turns the per-cell label assignment and the per-population
marker calls of the annotation routine into phenotype records: one per
population present in the label assignment, with a "CD3+ CD4-" style label,
a "CD3=1,CD4=0" style key, a cell count and a proportion.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from ...utils.coerce import as_float, as_int
from .config import PhenotypeConfig
from .schema import PhenotypeRecord, PopulationNode

AnnotationRows = Union[pd.DataFrame, Sequence[Mapping[str, Any]], None]


def coerce_label_assignment(labels: Any) -> np.ndarray:
    """One integer population id per cell; unusable labels become -1."""
    if labels is None:
        return np.zeros(0, dtype=np.int64)
    values = pd.to_numeric(pd.Series(np.asarray(labels).ravel()), errors="coerce")
    return values.fillna(-1).astype(np.int64).to_numpy()


def compute_label_counts(labels: Any) -> np.ndarray:
    """Cells per population id (index = population id).

    Negative (unassigned) labels are not counted.

    Examples:
        [1, 1, 2] -> [0, 2, 1]
    """
    assignment = coerce_label_assignment(labels)
    assigned = assignment[assignment >= 0]
    if assigned.size == 0:
        return np.zeros(1, dtype=np.int64)
    return np.bincount(assigned).astype(np.int64)


def as_annotation_frame(annotation_rows: AnnotationRows) -> pd.DataFrame:
    """Annotation table as a DataFrame (records and None are accepted)."""
    if annotation_rows is None:
        return pd.DataFrame()
    if isinstance(annotation_rows, pd.DataFrame):
        return annotation_rows
    return pd.DataFrame(list(annotation_rows))


def resolve_markers_in_use(
    annotation_rows: AnnotationRows, markers: Iterable[str]
) -> List[str]:
    """Annotation columns that are also analysed markers, in annotation order."""
    frame = as_annotation_frame(annotation_rows)
    marker_set = {str(marker) for marker in markers}
    return [str(column) for column in frame.columns if str(column) in marker_set]


def _marker_call(value: Any, config: PhenotypeConfig) -> Optional[str]:
    call = as_float(value)
    if call is None:
        return None
    if call == config.positive_call:
        return "+"
    if call == config.negative_call:
        return "-"
    return None


def format_phenotype(
    row: Mapping[str, Any],
    markers_in_use: Sequence[str],
    config: Optional[PhenotypeConfig] = None,
) -> Tuple[str, str]:
    """Build the phenotype key and label of one annotation row.

    Args:
        row: Annotation row (Series or dict) with one call per marker
        markers_in_use: Markers to report, in output order
        config: Phenotype configuration (positive/negative call values)

    Returns:
        Tuple of (key, label), e.g. ("CD3=1,CD4=0", "CD3+ CD4-"). Markers
        whose call is neither positive nor negative are left out.
    """
    config = config or PhenotypeConfig()
    key_parts: List[str] = []
    label_parts: List[str] = []
    for marker in markers_in_use:
        call = _marker_call(row.get(marker), config)
        if call is None:
            continue
        label_parts.append(f"{marker}{call}")
        key_parts.append(f"{marker}={1 if call == '+' else 0}")
    return ",".join(key_parts), " ".join(label_parts)


def _index_annotation_rows(
    frame: pd.DataFrame, config: PhenotypeConfig, logger: logging.Logger
) -> Dict[int, pd.Series]:
    """Population id -> first annotation row for that id."""
    if frame.empty:
        return {}
    if config.population_column not in frame.columns:
        logger.warning(
            "Annotation table has no '%s' column; all populations fall back to %s<id>",
            config.population_column,
            config.fallback_prefix,
        )
        return {}

    rows: Dict[int, pd.Series] = {}
    for _, row in frame.iterrows():
        population = as_int(row[config.population_column])
        if population is None:
            continue
        rows.setdefault(population, row)
    return rows


def build_phenotypes(
    label_assignment: Any,
    annotation_rows: AnnotationRows,
    markers_in_use: Sequence[str],
    config: Optional[PhenotypeConfig] = None,
    logger: Optional[logging.Logger] = None,
) -> List[PhenotypeRecord]:
    """Build one phenotype record per population of the label assignment.

    Populations are visited in ascending id order. The first annotation row
    with a matching population id supplies the marker calls, ``count`` and
    ``proportion`` (kept as reported so they agree with the annotation
    routine's own totals). A population without any annotation row gets
    the label ``Pop_<id>``, an empty key, and statistics computed from the
    label assignment.

    Args:
        label_assignment: One population id per cell
        annotation_rows: Per-population table with a call column per marker
            plus population id, count and proportion columns
        markers_in_use: Markers to include in signatures, in output order
        config: Phenotype configuration
        logger: Optional logger instance

    Returns:
        Phenotype records, one per distinct population id
    """
    config = config or PhenotypeConfig()
    if logger is None:
        logger = logging.getLogger(__name__)

    assignment = coerce_label_assignment(label_assignment)
    total_cells = int(assignment.size)
    label_counts = compute_label_counts(assignment)
    rows = _index_annotation_rows(as_annotation_frame(annotation_rows), config, logger)

    records: List[PhenotypeRecord] = []
    n_missing = 0
    for population in np.unique(assignment[assignment >= 0]):
        population = int(population)
        cells = int(label_counts[population])
        row = rows.get(population)

        if row is None:
            n_missing += 1
            logger.debug("No annotation row for population %d", population)
            records.append(
                PhenotypeRecord(
                    key="",
                    label=f"{config.fallback_prefix}{population}",
                    population=population,
                    count=cells,
                    proportion=cells / total_cells if total_cells else 0.0,
                    cells=cells,
                )
            )
            continue

        key, label = format_phenotype(row, markers_in_use, config)
        count = as_int(row.get(config.count_column))
        if count is None:
            count = cells
        proportion = as_float(row.get(config.proportion_column))
        if proportion is None:
            proportion = count / total_cells if total_cells else 0.0

        records.append(
            PhenotypeRecord(
                key=key,
                label=label,
                population=population,
                count=count,
                proportion=proportion,
                cells=cells,
            )
        )

    logger.info(
        "Built %d phenotype records over %d cells (%d without annotation)",
        len(records),
        total_cells,
        n_missing,
    )
    return records


def build_population_nodes(
    records: Sequence[PhenotypeRecord],
    config: Optional[PhenotypeConfig] = None,
) -> List[PopulationNode]:
    """Flat population list, one node per phenotype record.

    Populations with an empty phenotype are named ``Pop_<id>``.
    """
    config = config or PhenotypeConfig()
    nodes: List[PopulationNode] = []
    for node_id, record in enumerate(records, start=1):
        name = record.label or f"{config.fallback_prefix}{record.population}"
        nodes.append(PopulationNode(id=node_id, name=name, marker=name, cells=record.cells))
    return nodes
