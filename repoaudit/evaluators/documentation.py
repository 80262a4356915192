"""Documentation evaluator: docs trees, Diataxis structure, external sites."""

from __future__ import annotations

from datetime import datetime
from typing import List

from ..models import CategoryScore, RepositorySnapshot
from .base import Evaluator, Tally
from .signals import PatternCheck, contains_any, is_external_homepage, score_check, score_paths

DOCS_DIRECTORY = PatternCheck(
    ("docs/", "documentation/"), 2.0, "Has docs directory", "No docs directory"
)

# (path fragment, label) for each Diataxis documentation mode.
DIATAXIS_SECTIONS = (
    ("docs/tutorials/", "tutorials"),
    ("docs/how-to/", "how-to"),
    ("docs/reference/", "reference"),
    ("docs/explanation/", "explanation"),
)
DIATAXIS_FULL = 3
DIATAXIS_FULL_POINTS = 2.0
DIATAXIS_PARTIAL_POINTS = 1.0

EXTERNAL_SITE_POINTS = 2.0
WIKI_POINTS = 0.5

REFERENCE_CHECKS = (
    PatternCheck(("api.md", "api-reference", "openapi", "swagger"), 1.5, "Has API docs"),
    PatternCheck(("guide", "tutorial", "cookbook"), 1.5, "Has guides"),
    PatternCheck(("changelog", "changes.md"), 1.0, "Has changelog", "No changelog"),
    PatternCheck(("migration", "upgrade"), 1.0, "Migration guide"),
)


def diataxis_sections(paths: frozenset[str]) -> List[str]:
    """Return the Diataxis modes present under ``docs/``, in canonical order."""
    return [label for fragment, label in DIATAXIS_SECTIONS if contains_any(paths, (fragment,))]


class DocumentationEvaluator(Evaluator):
    key = "documentation"

    def evaluate(self, snapshot: RepositorySnapshot, now: datetime) -> CategoryScore:
        tally = Tally()
        paths = snapshot.all_paths

        score_check(tally, contains_any(paths, DOCS_DIRECTORY.patterns), DOCS_DIRECTORY)

        found = diataxis_sections(paths)
        if len(found) >= DIATAXIS_FULL:
            tally.award(DIATAXIS_FULL_POINTS, f"Docs structured (Diataxis: {', '.join(found)})")
        elif found:
            tally.award(
                DIATAXIS_PARTIAL_POINTS,
                f"Partial docs structure (Diataxis: {', '.join(found)})",
            )
        else:
            tally.note("Docs not structured (Diataxis)")

        if is_external_homepage(snapshot.homepage_url):
            tally.award(EXTERNAL_SITE_POINTS, "Has external homepage")
        else:
            tally.note("No dedicated docs site")

        if snapshot.has_wiki:
            tally.award(WIKI_POINTS, "Wiki enabled")

        score_paths(tally, paths, REFERENCE_CHECKS)

        return tally.result()
