"""Sample preprocessing module.

Provides:
- combine_samples: Row-wise stacking of per-file sample matrices
- select_markers: Fail-open narrowing to the requested gating markers
"""

from .config import COLUMN_POLICIES, CombineConfig
from .merge import EmptyInputError, combine_samples, select_markers

__all__ = [
    "CombineConfig",
    "COLUMN_POLICIES",
    "EmptyInputError",
    "combine_samples",
    "select_markers",
]
