"""Testing evaluator."""

from __future__ import annotations

from datetime import datetime

from ..models import CategoryScore, RepositorySnapshot
from .base import Evaluator, Tally
from .signals import PatternCheck, score_paths

TESTING_CHECKS = (
    PatternCheck(
        ("test/", "tests/", "__tests__/", "spec/", "_test.go", ".test.", ".spec."),
        3.0,
        "Has test files",
        "No tests found",
    ),
    PatternCheck(
        ("jest.config", "vitest.config", "pytest.ini", "phpunit", ".mocharc"),
        1.5,
        "Test framework config",
    ),
    PatternCheck(("cypress/", "playwright", "e2e/"), 1.5, "E2E tests"),
    PatternCheck(
        ("codecov", "coveralls", "coverage", ".nycrc"),
        1.5,
        "Coverage tracking",
        "No coverage config",
    ),
    PatternCheck(("benchmark", "bench/"), 1.0, "Benchmarks"),
    PatternCheck(("fixture", "mock", "__mocks__"), 0.5, "Test fixtures"),
)


class TestingSignalsEvaluator(Evaluator):
    key = "testing"

    def evaluate(self, snapshot: RepositorySnapshot, now: datetime) -> CategoryScore:
        tally = Tally()
        score_paths(tally, snapshot.all_paths, TESTING_CHECKS)
        return tally.result()
