"""Configuration for sample combination."""

from dataclasses import dataclass

COLUMN_POLICIES = ("intersection", "union", "strict")


@dataclass
class CombineConfig:
    """Configuration for stacking per-file sample matrices.

    Attributes
    ----------
    column_policy : str
        How to reconcile differing marker columns across files:
        'intersection' keeps shared columns, 'union' keeps all columns and
        fills gaps with NaN, 'strict' raises on any mismatch
    drop_non_numeric : bool
        Drop columns that cannot be read as numbers
    """

    column_policy: str = "intersection"
    drop_non_numeric: bool = True

    def __post_init__(self) -> None:
        if self.column_policy not in COLUMN_POLICIES:
            raise ValueError(
                f"column_policy must be one of {COLUMN_POLICIES}, got '{self.column_policy}'"
            )
