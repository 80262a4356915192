"""Tests for letter grade classification."""

from __future__ import annotations

import pytest

from repoaudit.grades import GRADE_BANDS, get_grade


@pytest.mark.parametrize(
    ("total", "letter"),
    [
        (10.0, "S"),
        (8.5, "S"),
        (8.49, "A"),
        (7.0, "A"),
        (6.99, "B"),
        (5.5, "B"),
        (4.0, "C"),
        (3.99, "D"),
        (2.0, "D"),
        (1.99, "F"),
        (0.0, "F"),
    ],
)
def test_grade_boundaries_are_inclusive_upward(total: float, letter: str) -> None:
    assert get_grade(total).letter == letter


def test_grade_below_zero_falls_back_to_f() -> None:
    assert get_grade(-3.0).letter == "F"


def test_grade_bands_are_ordered_high_to_low() -> None:
    minimums = [band.minimum for band in GRADE_BANDS]
    assert minimums == sorted(minimums, reverse=True)
    assert GRADE_BANDS[-1].minimum == 0.0


def test_grade_to_dict_carries_presentation() -> None:
    assert get_grade(7.2).to_dict() == {
        "letter": "A",
        "color": "#4488ff",
        "label": "Production-Ready",
        "minimum": 7.0,
    }
