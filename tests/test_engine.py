"""Behaviour tests for the score engine over whole snapshots."""

from __future__ import annotations

import json
from datetime import datetime

import pytest

from repoaudit.categories import CATEGORY_KEYS, compute_total
from repoaudit.engine import ScoreEngine, score_repository
from repoaudit.evaluators import build_evaluators
from repoaudit.grades import get_grade
from repoaudit.models import RepositorySnapshot
from tests._fixtures.snapshot_builder import SnapshotBuilder, empty_snapshot


def test_engine_returns_every_category_in_range(snapshot: RepositorySnapshot, now: datetime) -> None:
    result = ScoreEngine().score(snapshot, now)

    assert list(result.scores) == list(CATEGORY_KEYS)
    assert list(result.details) == list(CATEGORY_KEYS)
    for value in result.scores.values():
        assert 0.0 <= value <= 10.0


def test_engine_is_deterministic(snapshot: RepositorySnapshot, now: datetime) -> None:
    first = ScoreEngine().score(snapshot, now)
    second = ScoreEngine().score(snapshot, now)

    assert json.dumps(first.to_dict()) == json.dumps(second.to_dict())


def test_engine_handles_empty_snapshot(now: datetime) -> None:
    result = ScoreEngine().score(empty_snapshot(), now)

    assert set(result.scores) == set(CATEGORY_KEYS)
    assert result.scores["security"] == pytest.approx(1.0)
    assert "Minimal security posture" in result.details["security"]
    assert 0.0 <= compute_total(result.scores) <= 10.0


@pytest.mark.parametrize(
    "name",
    [
        "full_name",
        "topics",
        "star_count",
        "readme_text",
        "root_entries",
        "all_paths",
        "community_files",
        "releases",
        "workflow_count",
        "contributors",
        "commit_count",
    ],
)
def test_engine_scores_directly_built_snapshot_with_null_field(name: str, now: datetime) -> None:
    result = score_repository(RepositorySnapshot(**{name: None}), now)

    assert result == score_repository(RepositorySnapshot(), now)


def test_archived_repository_caps_maintenance(builder: SnapshotBuilder, now: datetime) -> None:
    snapshot = builder.set(is_archived=True, commit_count=50).build()

    result = ScoreEngine().score(snapshot, now)

    assert result.scores["maintenance"] <= 2.0
    assert result.details["maintenance"][0] == "ARCHIVED"


def test_missing_readme_and_license_are_flagged(builder: SnapshotBuilder, now: datetime) -> None:
    snapshot = builder.set(readme_text="", license=None).build()

    result = ScoreEngine().score(snapshot, now)

    assert any("No README" in detail or "thin" in detail for detail in result.details["readme"])
    assert "NO LICENSE FILE" in result.details["licensing"]


def test_tsconfig_strictness_details(builder: SnapshotBuilder, now: datetime) -> None:
    engine = ScoreEngine()

    strict = engine.score(
        builder.set(tsconfig_content=json.dumps({"compilerOptions": {"strict": True}})).build(),
        now,
    )
    partial = engine.score(
        SnapshotBuilder()
        .set(
            tsconfig_content=json.dumps(
                {
                    "compilerOptions": {
                        "noImplicitAny": True,
                        "strictNullChecks": True,
                        "strictFunctionTypes": True,
                    }
                }
            )
        )
        .build(),
        now,
    )
    weak = engine.score(
        SnapshotBuilder()
        .set(tsconfig_content=json.dumps({"compilerOptions": {"noImplicitAny": False}}))
        .build(),
        now,
    )
    absent = engine.score(SnapshotBuilder().build(), now)

    assert "strict mode enabled" in strict.details["codeQuality"]
    assert "3/4 strict flags" in partial.details["codeQuality"]
    assert "No strict flags in tsconfig" in weak.details["codeQuality"]
    assert "noImplicitAny disabled — weak typing" in weak.details["codeQuality"]
    assert "strict mode enabled" not in absent.details["codeQuality"]


def test_diataxis_structure_is_recognised(builder: SnapshotBuilder, now: datetime) -> None:
    snapshot = builder.add_paths(
        [
            "docs/tutorials/first-audit.md",
            "docs/how-to/workers-ai.md",
            "docs/reference/api.md",
            "docs/explanation/architecture.md",
        ]
    ).build()

    details = " ".join(ScoreEngine().score(snapshot, now).details["documentation"])

    assert "Diataxis" in details
    assert "tutorials" in details


def test_popular_but_undocumented_repository_lands_in_c_or_d(now: datetime) -> None:
    snapshot = (
        SnapshotBuilder()
        .set(
            description="A" * 50,
            topics=["cli", "http", "client", "typescript", "tools"],
            star_count=2000,
            fork_count=300,
            homepage_url="https://example.com",
            readme_text="",
            license=None,
            workflow_count=0,
            contributors=[{"contributions": 50}],
        )
        .drop_paths("test", ".github/workflows", "playwright", "dependabot", "license", "readme")
        .build()
    )

    result = ScoreEngine().score(snapshot, now)
    total = compute_total(result.scores)

    assert result.scores["firstImpressions"] > 5.0
    assert result.scores["dx"] > 0.0
    assert result.scores["readme"] == 0.0
    assert result.scores["testing"] == 0.0
    assert result.scores["cicd"] <= 1.0
    assert result.scores["licensing"] == 0.0
    assert 2.0 <= total < 5.5
    assert get_grade(total).letter in {"C", "D"}


def test_engine_accepts_a_subset_of_evaluators(snapshot: RepositorySnapshot, now: datetime) -> None:
    engine = ScoreEngine(build_evaluators(["readme", "licensing"]))

    result = engine.score(snapshot, now)

    assert list(result.scores) == list(CATEGORY_KEYS)
    assert result.scores["testing"] == 0.0
    assert result.details["testing"] == []
    assert result.scores["licensing"] > 0.0


def test_score_repository_uses_builtin_engine(snapshot: RepositorySnapshot, now: datetime) -> None:
    assert score_repository(snapshot, now) == ScoreEngine().score(snapshot, now)
