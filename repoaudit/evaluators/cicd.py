"""CI/CD evaluator."""

from __future__ import annotations

from datetime import datetime

from ..models import CategoryScore, RepositorySnapshot
from .base import Evaluator, Tally
from .signals import PatternCheck, contains_any, score_check, score_paths

WORKFLOW_POINTS = 3.0
WORKFLOW_FILES = PatternCheck((".github/workflows/",), 2.5, "Has workflow files")
OTHER_CI = PatternCheck((".travis.yml", ".circleci", ".gitlab-ci"), 2.0, "Has CI config")
MANY_WORKFLOWS = 3
MANY_WORKFLOWS_BONUS = 1.0

DEPENDENCY_BOT = PatternCheck(
    ("dependabot.yml", "renovate.json"), 1.5, "Dependency bot", "No dependency automation"
)
RELEASE_AUTOMATION = PatternCheck(
    (".changeset", ".releaserc", "semantic-release"), 2.0, "Release automation"
)
RELEASE_FALLBACK_POINTS = 1.0
CONTAINERS = PatternCheck(("dockerfile", "docker-compose", ".devcontainer"), 1.0, "Containerization")


class CICDEvaluator(Evaluator):
    key = "cicd"

    def evaluate(self, snapshot: RepositorySnapshot, now: datetime) -> CategoryScore:
        tally = Tally()
        paths = snapshot.all_paths
        workflows = snapshot.workflow_count

        # Only the strongest CI signal counts.
        if workflows > 0:
            tally.award(WORKFLOW_POINTS, f"{workflows} GH Actions workflow(s)")
        elif contains_any(paths, WORKFLOW_FILES.patterns):
            score_check(tally, True, WORKFLOW_FILES)
        elif contains_any(paths, OTHER_CI.patterns):
            score_check(tally, True, OTHER_CI)
        else:
            tally.note("No CI/CD found")

        if workflows >= MANY_WORKFLOWS:
            tally.award(MANY_WORKFLOWS_BONUS)

        score_paths(tally, paths, (DEPENDENCY_BOT,))

        release_count = len(snapshot.releases)
        if contains_any(paths, RELEASE_AUTOMATION.patterns):
            score_check(tally, True, RELEASE_AUTOMATION)
        elif release_count > 0:
            tally.award(RELEASE_FALLBACK_POINTS, f"{release_count} releases")
        else:
            tally.note("No releases")

        score_paths(tally, paths, (CONTAINERS,))

        return tally.result()
