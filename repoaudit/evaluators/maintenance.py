"""Project health evaluator: activity, releases, backlog and bus factor.

This is the only evaluator with a hard cap: archived repositories are
limited to ``ARCHIVED_MAX_SCORE`` after every other signal has been scored,
and the ``ARCHIVED`` marker is always the first detail.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime

from ..models import CategoryScore, RepositorySnapshot
from .base import Evaluator, Tally
from .signals import Tier, score_tiers

SECONDS_PER_DAY = 86400.0

RECENCY_TIERS = (
    (7, 3.0, "Active this week"),
    (30, 2.5, "Active this month"),
    (90, 1.5, "Active this quarter"),
    (365, 0.5, "Last commit {days}d ago"),
)
STALE_DETAIL = "Stale: {days} days idle"

RELEASE_TIERS = (
    Tier(5, 2.0, "{count} releases"),
    Tier(2, 1.5, "{count} releases"),
    Tier(1, 0.5, "1 release"),
)

# Fewer open issues is better.
OPEN_ISSUE_TIERS = (
    (10, 1.5, "{count} open issues"),
    (50, 1.0, "{count} issues"),
)
BACKLOG_DETAIL = "{count} open issues (backlog)"

BUS_FACTOR_MIN_CONTRIBUTIONS = 10
BUS_FACTOR_TIERS = (
    Tier(5, 2.0, "Strong bus factor ({count})"),
    Tier(2, 1.0, "Bus factor: {count}"),
)
LOW_BUS_FACTOR_POINTS = 0.25

ACTIVE_HISTORY_COMMITS = 20
ACTIVE_HISTORY_BONUS = 0.5

ARCHIVED_MARKER = "ARCHIVED"
ARCHIVED_MAX_SCORE = 2.0


def days_since(moment: datetime, now: datetime) -> float:
    # Naive timestamps are taken to be UTC.
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return (now - moment).total_seconds() / SECONDS_PER_DAY


def bus_factor(snapshot: RepositorySnapshot) -> int:
    """Contributors with more than ``BUS_FACTOR_MIN_CONTRIBUTIONS`` contributions."""
    return sum(
        1
        for contributor in snapshot.contributors
        if contributor.contribution_count > BUS_FACTOR_MIN_CONTRIBUTIONS
    )


class MaintenanceEvaluator(Evaluator):
    key = "maintenance"

    def evaluate(self, snapshot: RepositorySnapshot, now: datetime) -> CategoryScore:
        tally = Tally()

        self._score_recency(tally, snapshot, now)
        score_tiers(tally, len(snapshot.releases), RELEASE_TIERS, fallback="No releases")
        self._score_backlog(tally, snapshot.open_issue_count)

        factor = bus_factor(snapshot)
        if score_tiers(tally, factor, BUS_FACTOR_TIERS) is None:
            tally.award(LOW_BUS_FACTOR_POINTS, "Low bus factor")

        if snapshot.commit_count >= ACTIVE_HISTORY_COMMITS:
            tally.award(ACTIVE_HISTORY_BONUS)

        if snapshot.is_archived:
            tally.cap(ARCHIVED_MAX_SCORE)
            tally.prepend(ARCHIVED_MARKER)

        return tally.result()

    @staticmethod
    def _score_recency(tally: Tally, snapshot: RepositorySnapshot, now: datetime) -> None:
        if snapshot.most_recent_commit_at is None:
            tally.note("No commit data")
            return
        days = days_since(snapshot.most_recent_commit_at, now)
        whole_days = math.floor(days)
        for limit, points, detail in RECENCY_TIERS:
            if days < limit:
                tally.award(points, detail.format(days=whole_days))
                return
        tally.note(STALE_DETAIL.format(days=whole_days))

    @staticmethod
    def _score_backlog(tally: Tally, open_issues: int) -> None:
        for limit, points, detail in OPEN_ISSUE_TIERS:
            if open_issues < limit:
                tally.award(points, detail.format(count=open_issues))
                return
        tally.note(BACKLOG_DETAIL.format(count=open_issues))
