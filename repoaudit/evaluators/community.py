"""Community health evaluator."""

from __future__ import annotations

from datetime import datetime

from ..models import CategoryScore, RepositorySnapshot
from .base import Evaluator, Tally
from .signals import PatternCheck, Tier, contains_any, score_text, score_tiers

CONTRIBUTING_REGISTERED_POINTS = 2.0
CONTRIBUTING_ROOT_FILE_POINTS = 1.5
CODE_OF_CONDUCT_POINTS = 1.0
ISSUE_TEMPLATE_POINTS = 1.5
PR_TEMPLATE_POINTS = 1.0
DISCUSSIONS_POINTS = 1.0

CHAT_LINKS = PatternCheck(("discord", "slack"), 0.5, "Community links")

CONTRIBUTOR_TIERS = (
    Tier(10, 1.5, "{count} contributors"),
    Tier(3, 0.75, "{count} contributors"),
)


class CommunityEvaluator(Evaluator):
    key = "community"

    def evaluate(self, snapshot: RepositorySnapshot, now: datetime) -> CategoryScore:
        tally = Tally()
        paths = snapshot.all_paths

        if snapshot.has_community_file("contributing"):
            tally.award(CONTRIBUTING_REGISTERED_POINTS, "CONTRIBUTING.md")
        elif contains_any(snapshot.root_entries, ("contributing",)):
            tally.award(CONTRIBUTING_ROOT_FILE_POINTS, "Contributing file")
        else:
            tally.note("No CONTRIBUTING.md")

        if snapshot.has_community_file("code_of_conduct"):
            tally.award(CODE_OF_CONDUCT_POINTS, "Code of Conduct")
        else:
            tally.note("No Code of Conduct")

        if snapshot.has_community_file("issue_template") or contains_any(
            paths, (".github/issue_template",)
        ):
            tally.award(ISSUE_TEMPLATE_POINTS, "Issue templates")
        else:
            tally.note("No issue templates")

        if snapshot.has_community_file("pull_request_template") or contains_any(
            paths, ("pull_request_template",)
        ):
            tally.award(PR_TEMPLATE_POINTS, "PR template")
        else:
            tally.note("No PR template")

        if snapshot.has_discussions:
            tally.award(DISCUSSIONS_POINTS, "Discussions enabled")

        score_text(tally, snapshot.readme_text.lower(), (CHAT_LINKS,))

        score_tiers(
            tally,
            len(snapshot.contributors),
            CONTRIBUTOR_TIERS,
            fallback="Few contributors",
        )

        return tally.result()
