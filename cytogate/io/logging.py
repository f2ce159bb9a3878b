"""Run logs for CytoGate analyses.

A run writes its log messages to a timestamped file, the resolved analysis
configuration as a YAML document inside that log, and a one-line JSON
summary to a sibling ``.jsonl`` file.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Sequence, Tuple, Union

import yaml

PathLike = Union[str, Path]

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def open_run_log(
    log_file: PathLike, level: int = logging.INFO, name: str = "cytogate"
) -> Tuple[logging.Logger, Path]:
    """Send the ``cytogate`` logger to a new file named after the run start.

    analyze.log -> analyze_20251209_080530.log. An earlier run's file handler
    is closed; console output from the root logger is kept.
    """
    base = Path(log_file)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    path = base.parent / f"{base.stem}_{stamp}{base.suffix or '.log'}"
    path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    for handler in [h for h in logger.handlers if isinstance(h, logging.FileHandler)]:
        logger.removeHandler(handler)
        handler.close()
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    logger.addHandler(handler)
    return logger, path


def log_run_config(logger: logging.Logger, config: Dict[str, Any]) -> None:
    """Log the resolved analysis configuration as one YAML document."""
    text = yaml.safe_dump(config, sort_keys=False).rstrip("\n")
    logger.info("Analysis configuration:\n%s\n---", text)


def run_summary(samples: Sequence[str], payload: Dict[str, Any]) -> Dict[str, Any]:
    """Condense an analysis payload (or error payload) into a summary record."""
    summary: Dict[str, Any] = {
        "timestamp": datetime.now().isoformat(timespec="seconds"),
        "samples": [str(sample) for sample in samples],
        "ok": "error" not in payload,
    }
    if summary["ok"]:
        summary.update(
            cells=payload["cells"],
            populations=payload["populations"],
            tree_nodes=len(payload["treeNodes"]),
            strategy=payload["debug_info"].get("strategy", ""),
        )
    else:
        summary["error"] = payload["error"]
    return summary


def append_run_summary(path: PathLike, summary: Dict[str, Any]) -> Path:
    """Append one summary record to a JSON-lines file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as handle:
        handle.write(json.dumps(summary, default=str))
        handle.write("\n")
    return path
