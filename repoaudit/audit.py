"""Audit pipeline: snapshot, deterministic score, optional review, grade."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Callable, Dict, List, Optional

from .adjustments import merge_adjustments
from .categories import CATEGORY_KEYS, SCORING_SCHEME_VERSION, compute_total
from .config import AuditConfig
from .engine import ScoreEngine
from .file_tree import FileTreeSummary, build_file_tree
from .github import GitHubClient
from .grades import GradeBand, get_grade
from .logging import get_logger
from .models import RepositorySnapshot
from .reviewer import AIReviewer, LLMRunner, Review


@dataclass
class RepoMeta:
    """Headline repository facts shown next to a report."""

    full_name: str
    description: Optional[str]
    stars: int
    forks: int
    open_issues: int
    language: Optional[str]
    license: Optional[str]
    homepage: Optional[str]
    created_year: Optional[int]
    archived: bool

    @classmethod
    def from_snapshot(cls, snapshot: RepositorySnapshot) -> "RepoMeta":
        return cls(
            full_name=snapshot.full_name,
            description=snapshot.description,
            stars=snapshot.star_count,
            forks=snapshot.fork_count,
            open_issues=snapshot.open_issue_count,
            language=snapshot.primary_language,
            license=snapshot.license.spdx_id if snapshot.license else None,
            homepage=snapshot.homepage_url,
            created_year=snapshot.created_at.year if snapshot.created_at else None,
            archived=snapshot.is_archived,
        )


@dataclass
class AuditReport:
    """Final, presentable audit result."""

    meta: RepoMeta
    scores: Dict[str, float]
    details: Dict[str, List[str]]
    deterministic_scores: Dict[str, float]
    total: float
    grade: GradeBand
    file_tree: FileTreeSummary
    summary: Optional[str] = None
    top_strength: Optional[str] = None
    top_weakness: Optional[str] = None
    recommendations: List[str] = field(default_factory=list)
    red_flags: List[str] = field(default_factory=list)
    model_used: Optional[str] = None
    scheme_version: str = SCORING_SCHEME_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "meta": vars(self.meta).copy(),
            "scores": dict(self.scores),
            "details": {key: list(items) for key, items in self.details.items()},
            "deterministic_scores": dict(self.deterministic_scores),
            "total": self.total,
            "grade": self.grade.to_dict(),
            "summary": self.summary,
            "top_strength": self.top_strength,
            "top_weakness": self.top_weakness,
            "recommendations": list(self.recommendations),
            "red_flags": list(self.red_flags),
            "model_used": self.model_used,
            "file_tree": self.file_tree.to_dict(),
            "scheme_version": self.scheme_version,
        }


class Auditor:
    """Coordinates the snapshot producer, the engine and the reviewer."""

    def __init__(
        self,
        client: GitHubClient | None = None,
        engine: ScoreEngine | None = None,
        reviewer: AIReviewer | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.client = client or GitHubClient()
        self.engine = engine or ScoreEngine()
        self.reviewer = reviewer
        self._clock = clock or (lambda: datetime.now(UTC))
        self.logger = get_logger("audit")

    def audit(self, owner: str, name: str, *, use_ai: bool = True) -> AuditReport:
        """Fetch ``owner/name`` and audit it.

        ``GitHubApiError`` from the snapshot producer propagates: scoring
        never runs on a snapshot that could not be fetched.
        """
        self.logger.info("Auditing %s/%s", owner, name)
        snapshot = self.client.fetch_snapshot(owner, name)
        return self.audit_snapshot(snapshot, use_ai=use_ai)

    def audit_snapshot(
        self,
        snapshot: RepositorySnapshot,
        *,
        use_ai: bool = True,
        now: datetime | None = None,
    ) -> AuditReport:
        result = self.engine.score(snapshot, now or self._clock())
        deterministic = dict(result.scores)

        review: Optional[Review] = None
        if use_ai and self.reviewer is not None:
            review = self.reviewer.review(snapshot, deterministic)

        scores = merge_adjustments(deterministic, review.adjustments if review else None)
        details = {key: list(items) for key, items in result.details.items()}
        for key in CATEGORY_KEYS:
            scores.setdefault(key, 0.0)
            details.setdefault(key, [])

        total = compute_total(scores)
        grade = get_grade(total)
        self.logger.debug("%s total %.2f (%s)", snapshot.full_name or "snapshot", total, grade.letter)

        return AuditReport(
            meta=RepoMeta.from_snapshot(snapshot),
            scores=scores,
            details=details,
            deterministic_scores=deterministic,
            total=total,
            grade=grade,
            file_tree=build_file_tree(snapshot.all_paths),
            summary=(review.summary or None) if review else None,
            top_strength=(review.top_strength or None) if review else None,
            top_weakness=(review.top_weakness or None) if review else None,
            recommendations=list(review.recommendations) if review else [],
            red_flags=list(review.red_flags) if review else [],
            model_used=review.model if review else None,
        )


def build_reviewer(config: AuditConfig) -> AIReviewer | None:
    """Return a reviewer when one is enabled and reachable with credentials."""
    settings = config.reviewer
    if not settings.enabled:
        return None
    runner = LLMRunner(
        model=settings.model,
        temperature=settings.temperature if settings.temperature is not None else 0.2,
        max_tokens=settings.max_tokens,
        request_timeout=settings.request_timeout or 30.0,
        **_runner_endpoint_kwargs(settings.base_url, settings.api_key),
    )
    if runner.api_key is None and settings.base_url is None:
        get_logger("audit").debug("No reviewer credentials configured; AI review disabled")
        return None
    return AIReviewer(runner)


def build_auditor(config: AuditConfig) -> Auditor:
    """Create an ``Auditor`` wired from configuration."""
    client = GitHubClient(
        **({"token": config.github.token} if config.github.token else {}),
        api_base=config.github.api_base,
        request_timeout=config.github.request_timeout,
        max_workers=config.github.max_workers,
    )
    return Auditor(client=client, reviewer=build_reviewer(config))


def _runner_endpoint_kwargs(base_url: Optional[str], api_key: Optional[str]) -> Dict[str, str]:
    # Unset values fall back to the runner's environment lookup.
    kwargs: Dict[str, str] = {}
    if base_url:
        kwargs["base_url"] = base_url
    if api_key:
        kwargs["api_key"] = api_key
    return kwargs


__all__ = ["AuditReport", "Auditor", "RepoMeta", "build_auditor", "build_reviewer"]
