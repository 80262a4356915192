"""Letter grades for weighted totals."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class GradeBand:
    """A named score range; ``minimum`` is inclusive."""

    letter: str
    color: str
    label: str
    minimum: float

    def to_dict(self) -> dict[str, object]:
        return {
            "letter": self.letter,
            "color": self.color,
            "label": self.label,
            "minimum": self.minimum,
        }


# Ordered high to low; the last band must start at 0.
GRADE_BANDS: Tuple[GradeBand, ...] = (
    GradeBand("S", "#00d4aa", "Exceptional", 8.5),
    GradeBand("A", "#4488ff", "Production-Ready", 7.0),
    GradeBand("B", "#e8c547", "Solid Foundation", 5.5),
    GradeBand("C", "#ff8844", "Needs Work", 4.0),
    GradeBand("D", "#ff4466", "Significant Gaps", 2.0),
    GradeBand("F", "#ff2244", "Critical Issues", 0.0),
)

_FALLBACK = GRADE_BANDS[-1]


def get_grade(total: float) -> GradeBand:
    """Return the first band whose minimum is at or below ``total``."""
    for band in GRADE_BANDS:
        if total >= band.minimum:
            return band
    return _FALLBACK


__all__ = ["GRADE_BANDS", "GradeBand", "get_grade"]
