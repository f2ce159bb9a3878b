"""Marker metadata and range summaries."""

from .metadata import MarkerMapping, extract_marker_metadata, first_marker_metadata
from .ranges import MarkerRange, extract_marker_ranges

__all__ = [
    "MarkerMapping",
    "extract_marker_metadata",
    "first_marker_metadata",
    "MarkerRange",
    "extract_marker_ranges",
]
