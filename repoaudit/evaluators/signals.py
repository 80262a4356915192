"""Declarative signal tables and the helpers that score them.

Evaluators describe their checks as data (substrings to look for, the points
awarded, and the detail recorded on success or failure) and hand them to the
helpers below, so every check shares the same matching semantics: a
case-insensitive "contains" test against lower-cased paths or README text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .base import Tally


@dataclass(frozen=True)
class PatternCheck:
    """Award ``points`` when any pattern is contained in the searched text."""

    patterns: Sequence[str]
    points: float
    found: Optional[str]
    missing: Optional[str] = None


@dataclass(frozen=True)
class Tier:
    """One rung of a tiered signal; ``detail`` may use ``{count}``."""

    threshold: float
    points: float
    detail: Optional[str]


def contains_any(haystack: Iterable[str], patterns: Sequence[str]) -> bool:
    """Return True when any entry of ``haystack`` contains any pattern."""
    return any(pattern in entry for entry in haystack for pattern in patterns)


def text_contains_any(text: str, patterns: Sequence[str]) -> bool:
    return any(pattern in text for pattern in patterns)


def score_check(tally: Tally, matched: bool, check: PatternCheck) -> bool:
    """Record the outcome of ``check`` given whether it matched."""
    if matched:
        tally.award(check.points, check.found)
    elif check.missing is not None:
        tally.note(check.missing)
    return matched


def score_paths(tally: Tally, paths: Iterable[str], checks: Sequence[PatternCheck]) -> None:
    """Score each check against a path collection, in table order."""
    entries = tuple(paths)
    for check in checks:
        score_check(tally, contains_any(entries, check.patterns), check)


def score_text(tally: Tally, text: str, checks: Sequence[PatternCheck]) -> None:
    """Score each check against a single lower-cased text blob."""
    for check in checks:
        score_check(tally, text_contains_any(text, check.patterns), check)


def score_tiers(
    tally: Tally,
    value: float,
    tiers: Sequence[Tier],
    *,
    fallback: Optional[str] = None,
    strict: bool = False,
) -> Optional[Tier]:
    """Award the first (highest) tier ``value`` reaches; tiers are exclusive.

    With ``strict`` the comparison is ``value > threshold`` instead of
    ``value >= threshold``.
    """
    for tier in tiers:
        reached = value > tier.threshold if strict else value >= tier.threshold
        if reached:
            detail = tier.detail.format(count=value) if tier.detail else None
            tally.award(tier.points, detail)
            return tier
    if fallback is not None:
        tally.note(fallback.format(count=value))
    return None


def is_external_homepage(url: Optional[str]) -> bool:
    """A homepage that is not just the repository page on github.com."""
    return bool(url) and "github.com" not in str(url)


__all__ = [
    "PatternCheck",
    "Tier",
    "contains_any",
    "is_external_homepage",
    "score_check",
    "score_paths",
    "score_text",
    "score_tiers",
    "text_contains_any",
]
