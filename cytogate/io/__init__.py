"""I/O utilities for CytoGate.

Provides run logs and readers/writers for analysis inputs and results.
"""

from .logging import append_run_summary, log_run_config, open_run_log, run_summary
from .csv import (
    load_annotation_table,
    load_label_assignment,
    load_parameter_metadata,
    load_sample_matrix,
    load_tree_description,
    write_json,
)

__all__ = [
    # Run logs
    "open_run_log",
    "log_run_config",
    "run_summary",
    "append_run_summary",
    # File I/O
    "load_sample_matrix",
    "load_parameter_metadata",
    "load_label_assignment",
    "load_tree_description",
    "load_annotation_table",
    "write_json",
]
