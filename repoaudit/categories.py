"""Scoring categories, their weights, and the weighted total."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

# Bump whenever keys or weights change; stored results are only comparable within a scheme.
SCORING_SCHEME_VERSION = "1"


@dataclass(frozen=True)
class CategoryDef:
    """A scoring dimension with its display metadata and weight."""

    key: str
    name: str
    icon: str
    weight: float


# Weights sum to 1.00.
CATEGORIES: Tuple[CategoryDef, ...] = (
    CategoryDef("firstImpressions", "First Impressions", "◆", 0.07),
    CategoryDef("readme", "README Quality", "◈", 0.11),
    CategoryDef("documentation", "Documentation", "▣", 0.11),
    CategoryDef("codeQuality", "Code Quality", "⬡", 0.14),
    CategoryDef("testing", "Testing", "◎", 0.09),
    CategoryDef("cicd", "CI/CD", "◉", 0.07),
    CategoryDef("security", "Security", "◇", 0.09),
    CategoryDef("community", "Community", "⬢", 0.09),
    CategoryDef("maintenance", "Project Health", "○", 0.09),
    CategoryDef("dx", "Dev Experience", "▨", 0.09),
    CategoryDef("licensing", "Licensing", "§", 0.05),
)

CATEGORY_KEYS: Tuple[str, ...] = tuple(category.key for category in CATEGORIES)

_BY_KEY: Dict[str, CategoryDef] = {category.key: category for category in CATEGORIES}

MIN_SCORE = 0.0
MAX_SCORE = 10.0


def get_category(key: str) -> Optional[CategoryDef]:
    """Return the registered category for ``key`` or None."""
    return _BY_KEY.get(key)


def clamp_score(value: float) -> float:
    """Clamp a category score into [0, 10]."""
    return max(MIN_SCORE, min(MAX_SCORE, value))


def compute_total(
    scores: Mapping[str, Any],
    categories: Sequence[CategoryDef] = CATEGORIES,
) -> float:
    """Return the weighted average of ``scores`` over the registry.

    Missing, non-numeric and non-finite entries contribute 0. Each score is
    clamped before weighting so the total always lands in [0, 10].
    """
    denominator = math.fsum(category.weight for category in categories)
    if denominator <= 0:
        return 0.0
    numerator = math.fsum(
        category.weight * clamp_score(_numeric(scores.get(category.key)))
        for category in categories
    )
    # Rounding in the weighted sum can land a hair outside the range.
    return clamp_score(numerator / denominator)


def _numeric(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return float(value)


__all__ = [
    "CATEGORIES",
    "CATEGORY_KEYS",
    "CategoryDef",
    "MAX_SCORE",
    "MIN_SCORE",
    "SCORING_SCHEME_VERSION",
    "clamp_score",
    "compute_total",
    "get_category",
]
