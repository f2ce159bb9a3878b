"""Unit tests for phenotype annotation."""

import logging

import numpy as np
import pandas as pd
import pytest

from cytogate.core.phenotype import (
    PhenotypeConfig,
    build_phenotypes,
    build_population_nodes,
    coerce_label_assignment,
    compute_label_counts,
    format_phenotype,
    resolve_markers_in_use,
)


class TestLabelAssignment:
    """Tests for label coercion and counting."""

    def test_counts_indexed_by_population(self):
        """Test that index i holds the size of population i."""
        assert compute_label_counts([1, 1, 2]).tolist() == [0, 2, 1]

    def test_unusable_labels_not_counted(self):
        """Test that missing labels are excluded."""
        labels = coerce_label_assignment(["1", None, "x", 2.0])
        assert labels.tolist() == [1, -1, -1, 2]
        assert compute_label_counts(labels).tolist() == [0, 1, 1]

    def test_empty(self):
        """Test counts of an empty assignment."""
        assert compute_label_counts([]).tolist() == [0]


class TestFormatPhenotype:
    """Tests for phenotype key and label formatting."""

    def test_positive_and_negative(self):
        """Test the +/- label and =1/=0 key."""
        key, label = format_phenotype({"CD3": 1, "CD4": 0}, ["CD3", "CD4"])
        assert key == "CD3=1,CD4=0"
        assert label == "CD3+ CD4-"

    def test_other_values_omitted(self):
        """Test that calls other than 0/1 are left out."""
        key, label = format_phenotype(
            {"CD3": 1, "CD4": 2, "CD8": np.nan, "CD19": 0},
            ["CD3", "CD4", "CD8", "CD19"],
        )
        assert key == "CD3=1,CD19=0"
        assert label == "CD3+ CD19-"

    def test_marker_order_follows_markers_in_use(self):
        """Test that output order is the markers_in_use order."""
        key, _ = format_phenotype({"CD3": 1, "CD4": 1}, ["CD4", "CD3"])
        assert key == "CD4=1,CD3=1"

    def test_no_qualifying_markers(self):
        """Test that a row with no 0/1 calls gives empty strings."""
        assert format_phenotype({"CD3": 5}, ["CD3"]) == ("", "")

    def test_series_row(self):
        """Test a pandas row."""
        row = pd.Series({"CD3": 0.0, "labels": 1})
        assert format_phenotype(row, ["CD3"]) == ("CD3=0", "CD3-")


class TestResolveMarkersInUse:
    """Tests for resolve_markers_in_use."""

    def test_annotation_order(self):
        """Test that annotation columns shared with the markers are kept in order."""
        annotation = pd.DataFrame(columns=["CD4", "labels", "CD3", "count", "prop"])
        assert resolve_markers_in_use(annotation, ["CD3", "CD4", "CD8"]) == ["CD4", "CD3"]

    def test_none(self):
        """Test a missing annotation table."""
        assert resolve_markers_in_use(None, ["CD3"]) == []


class TestBuildPhenotypes:
    """Tests for build_phenotypes."""

    @pytest.fixture
    def annotation(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {"CD3": 1, "CD4": 0, "labels": 1, "count": 3, "prop": 0.6},
                {"CD3": 0, "CD4": 0, "labels": 1, "count": 99, "prop": 0.9},
            ]
        )

    def test_missing_annotation_row(self, annotation):
        """Test the Pop_<id> fallback for a population without annotation."""
        labels = [1, 1, 1, 4, 4]
        records = build_phenotypes(labels, annotation, ["CD3", "CD4"])

        assert [r.population for r in records] == [1, 4]
        fallback = records[1]
        assert fallback.label == "Pop_4"
        assert fallback.key == ""
        assert fallback.cells == 2
        assert fallback.count == 2
        assert fallback.proportion == pytest.approx(0.4)
        assert not fallback.is_annotated

    def test_first_matching_row_wins(self, annotation):
        """Test that the first annotation row per population is used."""
        records = build_phenotypes([1, 1, 1, 4, 4], annotation, ["CD3", "CD4"])
        annotated = records[0]
        assert annotated.key == "CD3=1,CD4=0"
        assert annotated.label == "CD3+ CD4-"
        assert annotated.count == 3
        assert annotated.proportion == pytest.approx(0.6)
        assert annotated.cells == 3

    def test_reported_statistics_not_recomputed(self):
        """Test that count and prop come from the annotation row."""
        annotation = [{"CD3": 1, "labels": 2, "count": 10, "prop": 0.25}]
        records = build_phenotypes([2, 2], annotation, ["CD3"])
        assert records[0].count == 10
        assert records[0].proportion == 0.25
        assert records[0].cells == 2

    def test_missing_statistics_fall_back(self):
        """Test label-assignment statistics when count/prop are absent."""
        annotation = [{"CD3": 1, "labels": 2}]
        records = build_phenotypes([2, 2, 3, 3], annotation, ["CD3"])
        assert records[0].count == 2
        assert records[0].proportion == pytest.approx(0.5)

    def test_proportions_of_fallbacks(self):
        """Test that unannotated proportions are count / total."""
        labels = np.array([1, 2, 2, 3, 3, 3])
        records = build_phenotypes(labels, None, [])
        total = len(labels)
        for record in records:
            assert record.proportion == pytest.approx(record.count / total)
        assert sum(r.count for r in records) == total

    def test_row_without_qualifying_markers(self):
        """Test that an annotated row with no 0/1 calls has empty strings."""
        annotation = [{"CD3": 7, "labels": 1, "count": 1, "prop": 1.0}]
        records = build_phenotypes([1], annotation, ["CD3"])
        assert records[0].key == ""
        assert records[0].label == ""

    def test_missing_population_column(self, caplog):
        """Test that an annotation without 'labels' falls back with a warning."""
        annotation = pd.DataFrame([{"CD3": 1, "cluster": 1}])
        with caplog.at_level(logging.WARNING):
            records = build_phenotypes([1], annotation, ["CD3"])
        assert records[0].label == "Pop_1"
        assert "labels" in caplog.text

    def test_custom_population_column(self):
        """Test a configured population column."""
        annotation = [{"CD3": 0, "cluster": 1, "count": 1, "prop": 1.0}]
        config = PhenotypeConfig(population_column="cluster")
        records = build_phenotypes([1], annotation, ["CD3"], config=config)
        assert records[0].label == "CD3-"

    def test_to_dict(self, annotation):
        """Test the serialized record."""
        record = build_phenotypes([1, 1, 1], annotation, ["CD3", "CD4"])[0]
        assert record.to_dict() == {
            "key": "CD3=1,CD4=0",
            "label": "CD3+ CD4-",
            "population": 1,
            "count": 3,
            "proportion": 0.6,
            "cells": 3,
        }


class TestBuildPopulationNodes:
    """Tests for the flat population list."""

    def test_names(self):
        """Test phenotype names and the Pop_<id> fallback for empty labels."""
        annotation = [
            {"CD3": 1, "labels": 1, "count": 2, "prop": 0.5},
            {"CD3": 9, "labels": 2, "count": 2, "prop": 0.5},
        ]
        records = build_phenotypes([1, 1, 2, 2], annotation, ["CD3"])
        nodes = build_population_nodes(records)

        assert [n.to_dict() for n in nodes] == [
            {"id": 1, "name": "CD3+", "marker": "CD3+", "cells": 2},
            {"id": 2, "name": "Pop_2", "marker": "Pop_2", "cells": 2},
        ]
