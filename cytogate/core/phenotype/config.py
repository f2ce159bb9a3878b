"""Configuration for phenotype annotation."""

from dataclasses import dataclass


@dataclass
class PhenotypeConfig:
    """Column names and labels used when reading the annotation table.

    Attributes
    ----------
    population_column : str
        Annotation column holding the population id
    count_column : str
        Annotation column holding the population cell count
    proportion_column : str
        Annotation column holding the population proportion
    fallback_prefix : str
        Label prefix for populations without a phenotype (e.g. "Pop_4")
    positive_call : int
        Annotation value meaning the marker is positive
    negative_call : int
        Annotation value meaning the marker is negative
    """

    population_column: str = "labels"
    count_column: str = "count"
    proportion_column: str = "prop"
    fallback_prefix: str = "Pop_"
    positive_call: int = 1
    negative_call: int = 0
