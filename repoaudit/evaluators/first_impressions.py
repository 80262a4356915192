"""First impressions: description, topics, popularity and homepage."""

from __future__ import annotations

from datetime import datetime

from ..models import CategoryScore, RepositorySnapshot
from .base import Evaluator, Tally
from .signals import Tier, score_tiers

MIN_DESCRIPTION_LENGTH = 10
LONG_DESCRIPTION_LENGTH = 40
LONG_DESCRIPTION_BONUS = 0.5
HOMEPAGE_POINTS = 1.5

TOPIC_TIERS = (
    Tier(3, 2.0, "{count} topics"),
    Tier(1, 1.0, "Only {count} topic(s)"),
)
STAR_TIERS = (
    Tier(1000, 2.0, None),
    Tier(100, 1.5, None),
    Tier(10, 1.0, None),
)
FORK_TIERS = (
    Tier(100, 1.0, None),
    Tier(10, 0.5, None),
)


class FirstImpressionsEvaluator(Evaluator):
    """Scores what a visitor sees before opening any file."""

    key = "firstImpressions"

    def evaluate(self, snapshot: RepositorySnapshot, now: datetime) -> CategoryScore:
        tally = Tally()
        description = snapshot.description or ""

        if len(description) > MIN_DESCRIPTION_LENGTH:
            tally.award(2.0, "Has description")
        else:
            tally.note("Missing or weak description")

        score_tiers(tally, len(snapshot.topics), TOPIC_TIERS, fallback="No topics/tags")

        score_tiers(tally, snapshot.star_count, STAR_TIERS)
        tally.note(f"{snapshot.star_count} stars, {snapshot.fork_count} forks")
        score_tiers(tally, snapshot.fork_count, FORK_TIERS)

        if snapshot.homepage_url:
            tally.award(HOMEPAGE_POINTS, "Has homepage link")
        else:
            tally.note("No homepage link")

        if len(description) > LONG_DESCRIPTION_LENGTH:
            tally.award(LONG_DESCRIPTION_BONUS)

        return tally.result()
