"""File I/O for CytoGate.

Readers for the inputs of an analysis run (sample matrices, acquisition
metadata, routine outputs) and a JSON writer for the assembled result.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np
import pandas as pd
import yaml

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

STRUCTURED_SUFFIXES = (".json", ".yaml", ".yml")
LABEL_COLUMN_CANDIDATES = ("labels", "label", "population")


def _existing(path: PathLike, what: str) -> Path:
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"{what} not found: {file_path}")
    return file_path


def _read_structured(path: Path) -> Any:
    with path.open(encoding="utf-8") as handle:
        if path.suffix.lower() == ".json":
            return json.load(handle)
        return yaml.safe_load(handle)


def load_sample_matrix(path: PathLike) -> pd.DataFrame:
    """Read an events x markers matrix from CSV.

    Parameters
    ----------
    path : PathLike
        CSV file with one column per marker and a header row.

    Returns
    -------
    pd.DataFrame
        Matrix with pandas' default index; unnamed index columns written by
        ``DataFrame.to_csv`` are dropped.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    csv_path = _existing(path, "Sample matrix")
    df = pd.read_csv(csv_path)
    unnamed = [column for column in df.columns if str(column).startswith("Unnamed:")]
    if unnamed:
        df = df.drop(columns=unnamed)
    logger.debug("Loaded %s: %d events x %d columns", csv_path.name, *df.shape)
    return df


def load_parameter_metadata(path: PathLike) -> Dict[str, Any]:
    """Read an acquisition keyword dictionary (``$P1N``, ``$P1S``, ...).

    JSON and YAML files are supported. A YAML/JSON list of dictionaries
    (one per file) yields the first entry.
    """
    meta_path = _existing(path, "Parameter metadata")
    data = _read_structured(meta_path)
    if isinstance(data, list):
        data = next((item for item in data if isinstance(item, dict)), {})
    if not isinstance(data, dict):
        raise ValueError(f"Parameter metadata in {meta_path} is not a mapping")
    return data


def load_label_assignment(path: PathLike) -> np.ndarray:
    """Read the per-event population ids.

    CSV files use the ``labels``/``label``/``population`` column, else the
    first column. JSON/YAML files hold a plain list.
    """
    label_path = _existing(path, "Label assignment")
    if label_path.suffix.lower() in STRUCTURED_SUFFIXES:
        return np.asarray(_read_structured(label_path))

    df = pd.read_csv(label_path)
    column = next(
        (name for name in LABEL_COLUMN_CANDIDATES if name in df.columns),
        df.columns[0],
    )
    return df[column].to_numpy()


def load_tree_description(path: PathLike) -> Any:
    """Read a raw tree description without interpreting its shape.

    JSON/YAML content is returned as parsed (lists and dictionaries). CSV
    content is returned as a DataFrame; a split table is expected to carry a
    header row.
    """
    tree_path = _existing(path, "Tree description")
    if tree_path.suffix.lower() in STRUCTURED_SUFFIXES:
        return _read_structured(tree_path)
    return pd.read_csv(tree_path)


def load_annotation_table(path: PathLike) -> pd.DataFrame:
    """Read the per-population annotation table (CSV, or JSON/YAML records)."""
    annotation_path = _existing(path, "Annotation table")
    if annotation_path.suffix.lower() in STRUCTURED_SUFFIXES:
        return pd.DataFrame(_read_structured(annotation_path) or [])
    return pd.read_csv(annotation_path)


def write_json(payload: Dict[str, Any], path: PathLike) -> Path:
    """Write a JSON payload, creating the parent directory if needed."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, default=str)
        handle.write("\n")
    return output_path
