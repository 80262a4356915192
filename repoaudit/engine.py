"""Runs every category evaluator over a snapshot."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Dict, Iterable, List, Optional

from .categories import CATEGORY_KEYS
from .evaluators import Evaluator, build_evaluators
from .logging import get_logger
from .models import RepositorySnapshot, ScoreResult


class ScoreEngine:
    """Produces a complete ``ScoreResult`` for any snapshot.

    The engine holds no per-run state, so one instance can serve concurrent
    callers. ``now`` anchors the recency checks; pass it explicitly to get
    reproducible results.
    """

    def __init__(self, evaluators: Optional[Iterable[Evaluator]] = None) -> None:
        self.evaluators: List[Evaluator] = (
            list(evaluators) if evaluators is not None else build_evaluators()
        )
        self.logger = get_logger("engine")

    def score(self, snapshot: RepositorySnapshot, now: datetime | None = None) -> ScoreResult:
        moment = now or datetime.now(UTC)
        scores: Dict[str, float] = {}
        details: Dict[str, List[str]] = {}

        for evaluator in self.evaluators:
            outcome = evaluator.evaluate(snapshot, moment)
            scores[evaluator.key] = outcome.score
            details[evaluator.key] = list(outcome.details)
            self.logger.debug("Scored %s: %.2f", evaluator.key, outcome.score)

        # Output always carries every registered category.
        for key in CATEGORY_KEYS:
            scores.setdefault(key, 0.0)
            details.setdefault(key, [])

        return ScoreResult(
            scores={key: scores[key] for key in _ordered_keys(scores)},
            details={key: details[key] for key in _ordered_keys(details)},
        )


def _ordered_keys(mapping: Dict[str, object]) -> List[str]:
    registered = [key for key in CATEGORY_KEYS if key in mapping]
    extra = [key for key in mapping if key not in CATEGORY_KEYS]
    return registered + extra


_DEFAULT_ENGINE: ScoreEngine | None = None


def score_repository(snapshot: RepositorySnapshot, now: datetime | None = None) -> ScoreResult:
    """Score ``snapshot`` with the built-in evaluators."""
    global _DEFAULT_ENGINE
    if _DEFAULT_ENGINE is None:
        _DEFAULT_ENGINE = ScoreEngine()
    return _DEFAULT_ENGINE.score(snapshot, now)


__all__ = ["ScoreEngine", "score_repository"]
