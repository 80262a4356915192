"""Security posture evaluator."""

from __future__ import annotations

from datetime import datetime

from ..models import CategoryScore, RepositorySnapshot
from .base import Evaluator, Tally
from .signals import PatternCheck, contains_any, score_paths

POLICY_REGISTERED_POINTS = 2.5
POLICY_ROOT_FILE_POINTS = 2.0

HYGIENE_CHECKS = (
    PatternCheck(("dependabot.yml", "renovate"), 1.5, "Dependency scanning"),
    PatternCheck((".github/codeowners",), 1.0, "CODEOWNERS"),
    PatternCheck((".gitignore",), 0.5, ".gitignore"),
    PatternCheck((".env.example", ".dev.vars.example"), 0.5, "Env templated"),
    PatternCheck(("snyk", ".trivy"), 1.5, "Security scanning"),
)

FORKING_POINTS = 0.5
# Floor applies while no more than this many details have been recorded.
MINIMAL_POSTURE_MAX_DETAILS = 1
MINIMAL_POSTURE_POINTS = 0.5


class SecurityEvaluator(Evaluator):
    key = "security"

    def evaluate(self, snapshot: RepositorySnapshot, now: datetime) -> CategoryScore:
        tally = Tally()

        if snapshot.has_community_file("security"):
            tally.award(POLICY_REGISTERED_POINTS, "SECURITY.md")
        elif contains_any(snapshot.root_entries, ("security",)):
            tally.award(POLICY_ROOT_FILE_POINTS, "Security file")
        else:
            tally.note("No SECURITY.md")

        score_paths(tally, snapshot.all_paths, HYGIENE_CHECKS)

        if snapshot.allows_forking is not False:
            tally.award(FORKING_POINTS)

        if len(tally.details) <= MINIMAL_POSTURE_MAX_DETAILS:
            tally.award(MINIMAL_POSTURE_POINTS, "Minimal security posture")

        return tally.result()
