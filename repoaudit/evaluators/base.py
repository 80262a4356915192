"""Base classes for category evaluators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from ..categories import MAX_SCORE
from ..models import CategoryScore, RepositorySnapshot


class Tally:
    """Per-invocation accumulator of points and detail strings."""

    def __init__(self) -> None:
        self.points = 0.0
        self.details: List[str] = []

    def award(self, points: float, detail: str | None = None) -> None:
        self.points += points
        if detail is not None:
            self.details.append(detail)

    def note(self, detail: str) -> None:
        self.details.append(detail)

    def cap(self, maximum: float) -> None:
        self.points = min(self.points, maximum)

    def prepend(self, detail: str) -> None:
        self.details.insert(0, detail)

    def result(self) -> CategoryScore:
        return CategoryScore(score=min(MAX_SCORE, self.points), details=list(self.details))


class Evaluator(ABC):
    """Contract for evaluators that score one category from a snapshot."""

    key: str = ""

    @abstractmethod
    def evaluate(self, snapshot: RepositorySnapshot, now: datetime) -> CategoryScore:
        """Return the category score and its ordered justification details."""
