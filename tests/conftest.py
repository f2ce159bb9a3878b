"""Pytest configuration and shared fixtures for CytoGate tests."""

import sys
from pathlib import Path

import pytest
import numpy as np
import pandas as pd

# Add package to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Import mock data generators
from tests.fixtures import (
    create_gated_dataset,
    create_keyed_tree,
    create_parameter_metadata,
    create_sample_matrix,
    create_split_table,
)


# ============================================================================
# Tree Fixtures
# ============================================================================


@pytest.fixture
def markers() -> list:
    """Gating markers in matrix column order."""
    return ["CD3", "CD4"]


@pytest.fixture
def label_counts() -> np.ndarray:
    """Cells per population id for the two-level tree (index = population id)."""
    return np.array([0, 0, 30, 0, 20, 50])


@pytest.fixture
def split_table() -> list:
    """Two-level split table."""
    return create_split_table()


@pytest.fixture
def keyed_tree() -> dict:
    """Name-keyed description of the two-level tree."""
    return create_keyed_tree()


# ============================================================================
# Sample Fixtures
# ============================================================================


@pytest.fixture
def sample_matrix() -> pd.DataFrame:
    """Create a 200-event matrix over four markers."""
    return create_sample_matrix(n_events=200)


@pytest.fixture
def parameter_metadata() -> dict:
    """Acquisition keywords with two stained channels and one scatter channel."""
    return create_parameter_metadata()


@pytest.fixture
def gated_dataset() -> dict:
    """Sample matrix with matching labels, split table and annotation."""
    return create_gated_dataset()


@pytest.fixture
def tmp_output_dir(tmp_path: Path) -> Path:
    """Create a temporary output directory for tests."""
    output_dir = tmp_path / "output"
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def sample_analysis_config(tmp_path) -> Path:
    """Create sample analysis configuration file."""
    import yaml

    config = {
        "cytogate": {
            "tree": {
                "marker_index_base": 0,
                "marker_fields": ["marker", "feature"],
            },
            "phenotype": {"population_column": "labels"},
            "combine": {"column_policy": "union"},
            "assembly": {"max_cells": 50, "seed": 3},
        }
    }

    path = tmp_path / "analysis.yaml"
    with open(path, "w") as f:
        yaml.dump(config, f)

    return path
