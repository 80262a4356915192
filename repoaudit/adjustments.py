"""Merging bounded external adjustments into deterministic scores.

This is the only place untrusted numbers reach the score surface, so every
value is checked here and every result is clamped to [0, 10].
"""

from __future__ import annotations

import math
from typing import Any, Dict, Mapping, Optional

from .categories import CATEGORY_KEYS, clamp_score

# Reviewers are asked to stay within this range; results are clamped regardless.
ADJUSTMENT_MIN = -2.0
ADJUSTMENT_MAX = 2.0


def is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def parse_adjustment_record(payload: Any) -> Optional[Dict[str, float]]:
    """Return the usable part of an untrusted adjustment payload.

    Non-mapping payloads yield None. Unknown categories and non-numeric
    values are dropped.
    """
    if not isinstance(payload, Mapping):
        return None
    record: Dict[str, float] = {}
    for key in CATEGORY_KEYS:
        value = payload.get(key)
        if is_finite_number(value):
            record[key] = float(value)
    return record


def merge_adjustments(
    deterministic: Mapping[str, float],
    adjustment: Any,
) -> Dict[str, float]:
    """Apply ``adjustment`` onto ``deterministic`` scores.

    Keys only present in ``adjustment`` are ignored and keys missing from it
    pass through unchanged, so the merge never adds or removes categories.
    """
    merged = dict(deterministic)
    if not isinstance(adjustment, Mapping):
        return merged
    for key, base in deterministic.items():
        if key not in adjustment:
            continue
        delta = adjustment[key]
        if not is_finite_number(delta) or not is_finite_number(base):
            continue
        merged[key] = clamp_score(float(base) + float(delta))
    return merged


__all__ = [
    "ADJUSTMENT_MAX",
    "ADJUSTMENT_MIN",
    "is_finite_number",
    "merge_adjustments",
    "parse_adjustment_record",
]
