"""Utility functions for CytoGate.

Provides value coercion helpers for the loosely typed outputs of the
external gating routine.
"""

from .coerce import as_float, as_int, is_number, is_sequence

__all__ = [
    "as_float",
    "as_int",
    "is_number",
    "is_sequence",
]
