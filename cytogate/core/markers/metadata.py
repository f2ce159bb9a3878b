"""Marker name mapping from acquisition metadata.

Acquisition files describe each measured parameter with a technical channel
name (``$P<n>N``, e.g. "FL1-A") and an optional biological stain name
(``$P<n>S``, e.g. "CD3"). Keys are matched case-insensitively.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

PARAMETER_NAME_PATTERN = re.compile(r"^\$P(\d+)N$", re.IGNORECASE)


@dataclass
class MarkerMapping:
    """Technical channel name and its biological label."""

    technical: str
    biological: str

    def to_dict(self) -> Dict[str, str]:
        return {"technical": self.technical, "biological": self.biological}


def _lookup(description: Mapping[str, Any], key: str) -> Optional[Any]:
    """Case-insensitive key lookup."""
    if key in description:
        return description[key]
    lowered = key.lower()
    for candidate, value in description.items():
        if str(candidate).lower() == lowered:
            return value
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value != value:
        return ""
    return str(value).strip()


def extract_marker_metadata(
    description: Optional[Mapping[str, Any]],
) -> Dict[str, MarkerMapping]:
    """Map technical channel names to biological marker names.

    Args:
        description: Acquisition keyword dictionary of one sample file

    Returns:
        Technical name -> mapping, inserted in parameter-index order. The
        biological name is ``$P<n>S`` when present and non-blank, otherwise
        the technical name. A channel name repeated at a higher index
        replaces the earlier entry.

    Examples:
        {"$P1N": "FL1-A", "$P1S": "CD3", "$P2N": "FSC-A"}
        -> {"FL1-A": FL1-A -> CD3, "FSC-A": FSC-A -> FSC-A}
    """
    if not description:
        return {}

    parameters: List[Tuple[int, str]] = []
    for key, value in description.items():
        match = PARAMETER_NAME_PATTERN.match(str(key))
        if match is None:
            continue
        technical = _text(value)
        if not technical:
            logger.debug("Skipping parameter %s with an empty channel name", key)
            continue
        parameters.append((int(match.group(1)), technical))

    mappings: Dict[str, MarkerMapping] = {}
    for index, technical in sorted(parameters, key=lambda item: item[0]):
        biological = _text(_lookup(description, f"$P{index}S"))
        mappings[technical] = MarkerMapping(
            technical=technical, biological=biological or technical
        )
    return mappings


def first_marker_metadata(
    descriptions: List[Optional[Mapping[str, Any]]],
) -> Dict[str, MarkerMapping]:
    """Marker mappings of the first file that supplies any."""
    for description in descriptions:
        mappings = extract_marker_metadata(description)
        if mappings:
            return mappings
    return {}
