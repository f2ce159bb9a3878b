"""Test fixtures for CytoGate.

Provides mock data generators and test utilities.
"""

from .mock_samples import (
    DEFAULT_MARKERS,
    create_gated_dataset,
    create_keyed_tree,
    create_parameter_metadata,
    create_sample_matrix,
    create_split_table,
)

__all__ = [
    "DEFAULT_MARKERS",
    "create_gated_dataset",
    "create_keyed_tree",
    "create_parameter_metadata",
    "create_sample_matrix",
    "create_split_table",
]
