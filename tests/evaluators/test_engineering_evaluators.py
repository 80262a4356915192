"""Tests for code quality, testing and CI/CD scoring."""

from __future__ import annotations

import json
from datetime import datetime

import pytest

from repoaudit.evaluators.cicd import CICDEvaluator
from repoaudit.evaluators.code_quality import (
    CodeQualityEvaluator,
    count_top_level_dirs,
    parse_compiler_options,
)
from repoaudit.evaluators.testing import TestingSignalsEvaluator
from repoaudit.models import RepositorySnapshot, snapshot_from_mapping
from tests._fixtures.snapshot_builder import SnapshotBuilder


def test_code_quality_for_seeded_repository(snapshot: RepositorySnapshot, now: datetime) -> None:
    outcome = CodeQualityEvaluator().evaluate(snapshot, now)

    assert outcome.score == pytest.approx(7.5)
    assert outcome.details == [
        "TypeScript",
        "Has linter/formatter",
        ".editorconfig",
        "Basic structure (3 dirs)",
        "No lockfile",
        "Language: TypeScript",
        "Has source directory",
        "Env template",
    ]


def test_code_quality_invalid_tsconfig_is_silent(builder: SnapshotBuilder, now: datetime) -> None:
    baseline = CodeQualityEvaluator().evaluate(builder.build(), now)
    broken = CodeQualityEvaluator().evaluate(
        SnapshotBuilder().set(tsconfig_content="{ not json").build(), now
    )

    assert broken == baseline


def test_code_quality_single_strict_flag(builder: SnapshotBuilder, now: datetime) -> None:
    snapshot = builder.set(
        tsconfig_content=json.dumps({"compilerOptions": {"strictNullChecks": True}})
    ).build()

    outcome = CodeQualityEvaluator().evaluate(snapshot, now)

    assert "Only 1/4 strict flags" in outcome.details
    assert outcome.score == pytest.approx(8.0)


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        (None, None),
        ("", None),
        ("[1, 2]", None),
        ("{oops", None),
        ('{"compilerOptions": "strict"}', {}),
        ("{}", {}),
        ('{"compilerOptions": {"strict": true}}', {"strict": True}),
    ],
)
def test_parse_compiler_options(content: str | None, expected: dict | None) -> None:
    assert parse_compiler_options(content) == expected


def test_count_top_level_dirs_ignores_root_files() -> None:
    paths = ["readme.md", "src/a.ts", "src/b/c.ts", "docs/x.md", ".github/workflows/ci.yml"]

    assert count_top_level_dirs(paths) == 3


def test_testing_for_seeded_repository(snapshot: RepositorySnapshot, now: datetime) -> None:
    outcome = TestingSignalsEvaluator().evaluate(snapshot, now)

    assert outcome.score == pytest.approx(4.5)
    assert outcome.details == ["Has test files", "E2E tests", "No coverage config"]


def test_testing_recognises_full_toolchain(now: datetime) -> None:
    snapshot = snapshot_from_mapping(
        {
            "all_paths": [
                "tests/test_app.py",
                "pytest.ini",
                "e2e/login.spec.ts",
                "codecov.yml",
                "bench/run.py",
                "tests/fixtures/data.json",
            ]
        }
    )

    outcome = TestingSignalsEvaluator().evaluate(snapshot, now)

    assert outcome.score == pytest.approx(9.0)
    assert outcome.details == [
        "Has test files",
        "Test framework config",
        "E2E tests",
        "Coverage tracking",
        "Benchmarks",
        "Test fixtures",
    ]


def test_cicd_for_seeded_repository(snapshot: RepositorySnapshot, now: datetime) -> None:
    outcome = CICDEvaluator().evaluate(snapshot, now)

    assert outcome.score == pytest.approx(6.5)
    assert outcome.details == ["3 GH Actions workflow(s)", "Dependency bot", "2 releases"]


def test_cicd_tiers_are_mutually_exclusive(now: datetime) -> None:
    files_only = snapshot_from_mapping(
        {"all_paths": [".github/workflows/ci.yml", ".travis.yml"]}
    )
    other_ci = snapshot_from_mapping({"all_paths": [".travis.yml"]})
    nothing = snapshot_from_mapping({})

    files_outcome = CICDEvaluator().evaluate(files_only, now)
    other_outcome = CICDEvaluator().evaluate(other_ci, now)
    nothing_outcome = CICDEvaluator().evaluate(nothing, now)

    assert files_outcome.details[0] == "Has workflow files"
    assert "Has CI config" not in files_outcome.details
    assert files_outcome.score == pytest.approx(2.5)
    assert other_outcome.details[0] == "Has CI config"
    assert other_outcome.score == pytest.approx(2.0)
    assert nothing_outcome.details == ["No CI/CD found", "No dependency automation", "No releases"]
    assert nothing_outcome.score == 0.0


def test_cicd_release_automation_replaces_release_count(
    builder: SnapshotBuilder, now: datetime
) -> None:
    snapshot = builder.add_paths([".changeset/config.json", "dockerfile"]).build()

    outcome = CICDEvaluator().evaluate(snapshot, now)

    assert "Release automation" in outcome.details
    assert "2 releases" not in outcome.details
    assert "Containerization" in outcome.details
    assert outcome.score == pytest.approx(8.5)
