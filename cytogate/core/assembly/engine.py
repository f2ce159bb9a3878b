"""Analysis engine.

This module provides the AnalysisEngine class that orchestrates an analysis
run: sample combination, marker selection, the gating routine, tree
normalization, phenotype annotation and result assembly.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence, Union

import pandas as pd

from ..clustering.backend import GatingBackend
from ..markers.metadata import first_marker_metadata
from ..markers.ranges import extract_marker_ranges
from ..phenotype.builder import (
    build_phenotypes,
    build_population_nodes,
    compute_label_counts,
    resolve_markers_in_use,
)
from ..preprocessing.merge import combine_samples, select_markers
from ..tree.diagnostics import describe_raw_tree
from ..tree.normalizer import TreeNormalizer
from .assembler import assemble_result
from .config import AnalysisConfig
from .sampling import sample_cell_data
from .schema import AnalysisResult, ErrorResult


class AnalysisEngine:
    """Orchestrates one analysis run.

    Args:
        backend: Gating routine to run on the combined matrix
        config: Analysis configuration (default: ``AnalysisConfig.default()``)
        logger: Optional logger instance

    Example:
        >>> engine = AnalysisEngine(PrecomputedBackend(labels, tree, annotation))
        >>> result = engine.run([sample_df], markers=["CD3", "CD4"])
        >>> payload = result.to_dict()
    """

    def __init__(
        self,
        backend: GatingBackend,
        config: Optional[AnalysisConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.backend = backend
        self.config = config or AnalysisConfig.default()
        self.logger = logger or logging.getLogger(__name__)
        self.normalizer = TreeNormalizer(self.config.tree, logger=self.logger)

    def run(
        self,
        samples: Sequence[Optional[pd.DataFrame]],
        metadata: Optional[Sequence[Optional[Mapping[str, Any]]]] = None,
        markers: Optional[Sequence[str]] = None,
    ) -> AnalysisResult:
        """Run the analysis.

        Args:
            samples: One events x markers matrix per sample file
            metadata: Acquisition keyword dictionaries, aligned with samples
            markers: Requested gating markers (default: all columns)

        Returns:
            Assembled result

        Raises:
            EmptyInputError: If no sample supplies any events
            ValueError: If the label assignment does not cover every event
        """
        assembly = self.config.assembly

        self.logger.info("Phase 1: Combining %d samples...", len(samples))
        combined = combine_samples(samples, self.config.combine)
        data = select_markers(combined, markers)
        gating_markers = [str(column) for column in data.columns]
        self.logger.info("  Gating on %d markers: %s", len(gating_markers), gating_markers)

        marker_mappings = first_marker_metadata(list(metadata or []))
        marker_ranges = extract_marker_ranges(
            data, gating_markers, precision=assembly.range_precision
        )

        self.logger.info(
            "Phase 2: Running %s gating (t=%s)...",
            self.backend.name,
            assembly.split_threshold,
        )
        output = self.backend.run(data, t=assembly.split_threshold)
        if output.n_events != len(data):
            raise ValueError(
                f"Gating returned {output.n_events} labels for {len(data)} events"
            )

        self.logger.info("Phase 3: Annotating populations and normalizing the gating tree...")
        phenotype_rows = output.annotation
        markers_in_use = resolve_markers_in_use(phenotype_rows, gating_markers)
        records = build_phenotypes(
            output.labels,
            phenotype_rows,
            markers_in_use,
            config=self.config.phenotype,
            logger=self.logger,
        )
        label_counts = compute_label_counts(output.labels)
        tree = self.normalizer.normalize(output.mark_tree, label_counts, gating_markers)

        self.logger.info("Phase 4: Assembling result...")
        cell_data = sample_cell_data(
            data,
            output.labels,
            max_cells=assembly.max_cells,
            seed=assembly.seed,
        )
        result = assemble_result(
            tree=tree,
            phenotypes=records,
            population_nodes=build_population_nodes(records, self.config.phenotype),
            labels=output.labels,
            markers=gating_markers,
            marker_mappings=marker_mappings,
            marker_ranges=marker_ranges,
            cell_data=cell_data,
            debug_info=describe_raw_tree(output.mark_tree, tree),
        )
        self.logger.info(
            "Analysis complete: %d cells, %d populations, %d tree nodes",
            result.n_cells,
            result.n_populations,
            len(tree),
        )
        return result


def analyze(
    samples: Sequence[Optional[pd.DataFrame]],
    backend: GatingBackend,
    metadata: Optional[Sequence[Optional[Mapping[str, Any]]]] = None,
    markers: Optional[Sequence[str]] = None,
    config: Optional[AnalysisConfig] = None,
    logger: Optional[logging.Logger] = None,
) -> Union[AnalysisResult, ErrorResult]:
    """Run an analysis, returning an ``ErrorResult`` instead of raising.

    Only input errors (no usable events, mismatched label assignment) are
    converted; programming errors propagate.
    """
    logger = logger or logging.getLogger(__name__)
    engine = AnalysisEngine(backend, config=config, logger=logger)
    try:
        return engine.run(samples, metadata=metadata, markers=markers)
    except ValueError as exc:
        logger.error("Analysis failed: %s", exc)
        return ErrorResult(error=str(exc))
