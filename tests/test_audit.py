"""Tests for the audit pipeline."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from repoaudit.audit import Auditor, build_auditor, build_reviewer
from repoaudit.categories import CATEGORY_KEYS, SCORING_SCHEME_VERSION, compute_total
from repoaudit.config import load_config
from repoaudit.github import GitHubApiError
from repoaudit.models import RepositorySnapshot
from repoaudit.reviewer import Review


class _StubClient:
    def __init__(self, snapshot: RepositorySnapshot | None = None, error: Exception | None = None):
        self.snapshot = snapshot
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def fetch_snapshot(self, owner: str, name: str) -> RepositorySnapshot:
        self.calls.append((owner, name))
        if self.error is not None:
            raise self.error
        assert self.snapshot is not None
        return self.snapshot


class _StubReviewer:
    def __init__(self, review: Review | None) -> None:
        self.result = review
        self.calls = 0

    def review(self, snapshot, scores):
        self.calls += 1
        return self.result


def _review() -> Review:
    return Review(
        adjustments={"testing": 9.0, "readme": -1.0},
        summary="Tidy project.",
        top_strength="Community",
        top_weakness="",
        recommendations=["Add coverage"],
        red_flags=["No lockfile committed"],
        model="stub-model",
    )


def test_audit_without_reviewer_is_deterministic(snapshot: RepositorySnapshot, now: datetime) -> None:
    auditor = Auditor(client=_StubClient(snapshot), clock=lambda: now)

    report = auditor.audit("a", "b")

    assert list(report.scores) == list(CATEGORY_KEYS)
    assert report.scores == report.deterministic_scores
    assert report.total == pytest.approx(compute_total(report.scores))
    assert report.grade.letter in {"S", "A", "B", "C", "D", "F"}
    assert report.summary is None
    assert report.model_used is None
    assert report.scheme_version == SCORING_SCHEME_VERSION
    assert report.meta.full_name == "a/b"
    assert report.meta.license == "MIT"
    assert report.meta.created_year == 2020
    assert report.file_tree.total_files == len(snapshot.all_paths)


def test_audit_applies_review_adjustments(snapshot: RepositorySnapshot, now: datetime) -> None:
    reviewer = _StubReviewer(_review())
    auditor = Auditor(client=_StubClient(snapshot), reviewer=reviewer, clock=lambda: now)

    report = auditor.audit("a", "b")

    assert reviewer.calls == 1
    assert report.scores["testing"] == 10.0
    assert report.scores["readme"] == pytest.approx(report.deterministic_scores["readme"] - 1.0)
    assert report.scores["cicd"] == report.deterministic_scores["cicd"]
    assert report.summary == "Tidy project."
    assert report.top_weakness is None
    assert report.red_flags == ["No lockfile committed"]
    assert report.model_used == "stub-model"


def test_audit_skips_reviewer_when_ai_disabled(snapshot: RepositorySnapshot, now: datetime) -> None:
    reviewer = _StubReviewer(_review())
    auditor = Auditor(client=_StubClient(snapshot), reviewer=reviewer, clock=lambda: now)

    report = auditor.audit("a", "b", use_ai=False)

    assert reviewer.calls == 0
    assert report.scores == report.deterministic_scores


def test_audit_with_failed_review_keeps_deterministic_scores(
    snapshot: RepositorySnapshot, now: datetime
) -> None:
    auditor = Auditor(
        client=_StubClient(snapshot), reviewer=_StubReviewer(None), clock=lambda: now
    )

    report = auditor.audit("a", "b")

    assert report.scores == report.deterministic_scores
    assert report.recommendations == []


def test_audit_propagates_fetch_errors() -> None:
    client = _StubClient(error=GitHubApiError("Repository not found.", 404))

    with pytest.raises(GitHubApiError):
        Auditor(client=client).audit("a", "missing")


def test_report_to_dict_is_json_ready(snapshot: RepositorySnapshot, now: datetime) -> None:
    report = Auditor(client=_StubClient(snapshot)).audit_snapshot(snapshot, now=now)

    data = report.to_dict()

    assert data["grade"]["letter"] == report.grade.letter
    assert data["meta"]["stars"] == 120
    assert data["file_tree"]["total_files"] == report.file_tree.total_files
    assert data["scheme_version"] == SCORING_SCHEME_VERSION


def test_build_reviewer_respects_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("REPOAUDIT_LLM_API_KEY", "OPENAI_API_KEY", "REPOAUDIT_LLM_BASE_URL", "OPENAI_BASE_URL"):
        monkeypatch.delenv(key, raising=False)
    config = load_config(tmp_path)

    assert build_reviewer(config) is None

    config.reviewer.api_key = "key"
    assert build_reviewer(config) is not None

    config.reviewer.enabled = False
    assert build_reviewer(config) is None


def test_build_auditor_uses_github_settings(tmp_path: Path) -> None:
    config = load_config(tmp_path)
    config.github.token = "cfg-token"
    config.github.api_base = "https://ghe.example.com/api/v3/"

    auditor = build_auditor(config)

    assert auditor.client.token == "cfg-token"
    assert auditor.client.api_base == "https://ghe.example.com/api/v3"
