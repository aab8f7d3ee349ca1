"""
OSM formation catalogue and pitch layout helpers.

Screenshots and model output spell formations many ways ("433A", "4-3-3 a",
"4 3 3 A"); everything is normalised to the catalogue codes below before it
reaches a TeamRecord.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Any, List, Optional, Tuple


class FormationCode(str, Enum):
    """Formations available in Online Soccer Manager"""
    F433A = "4-3-3 A"
    F433B = "4-3-3 B"
    F442A = "4-4-2 A"
    F442B = "4-4-2 B"
    F4231 = "4-2-3-1"
    F451 = "4-5-1"
    F424 = "4-2-4"
    F343A = "3-4-3 A"
    F343B = "3-4-3 B"
    F352A = "3-5-2 A"
    F352B = "3-5-2 B"
    F334 = "3-3-4"
    F532 = "5-3-2"
    F541 = "5-4-1"
    F523 = "5-2-3"
    F5311 = "5-3-1-1"
    F631 = "6-3-1"


_FORMATION_RE = re.compile(r"^\s*((?:\d\s*[-./]?\s*){3,4})([ab])?\s*$", re.IGNORECASE)
_OUTFIELD_PLAYERS = 10


def normalize_formation(raw: Any) -> Optional[FormationCode]:
    """Map a loosely written formation onto the catalogue, or None if unknown.

    A missing A/B variant resolves to the letterless code first, then to the
    A variant; an unknown variant falls back to the letterless code.
    """
    if isinstance(raw, FormationCode):
        return raw
    if not isinstance(raw, str):
        return None
    m = _FORMATION_RE.match(raw)
    if not m:
        return None
    digits = re.sub(r"\D", "", m.group(1))
    if sum(int(d) for d in digits) != _OUTFIELD_PLAYERS:
        return None
    base = "-".join(digits)
    variant = (m.group(2) or "").upper()
    candidates = [f"{base} {variant}", base] if variant else [base, f"{base} A"]
    for candidate in candidates:
        try:
            return FormationCode(candidate)
        except ValueError:
            continue
    return None


def formation_layers(code: FormationCode) -> List[int]:
    """Players per line from goal outwards, goalkeeper first: 4-3-3 A -> [1, 4, 3, 3]."""
    return [1] + [int(c) for c in code.value if c.isdigit()]


def pitch_positions(code: FormationCode, size: float = 100.0) -> List[Tuple[float, float]]:
    """Rough (x, y) spots for the eleven players on a size x size pitch.

    Lines are spread evenly from the goal line; players within a line are
    centred horizontally.
    """
    layers = formation_layers(code)
    section = size / (len(layers) + 1)
    positions: List[Tuple[float, float]] = []
    for layer_index, count in enumerate(layers):
        y = (layer_index + 0.8) * section
        for i in range(count):
            x = size * (i + 1) / (count + 1)
            positions.append((round(x, 2), round(y, 2)))
    return positions
