"""README quality evaluator."""

from __future__ import annotations

from datetime import datetime

from ..models import CategoryScore, RepositorySnapshot
from .base import Evaluator, Tally
from .signals import PatternCheck, Tier, score_text, score_tiers

CODE_FENCE = "```"

LENGTH_TIERS = (
    Tier(5000, 2.0, "Comprehensive length"),
    Tier(1000, 1.0, "Adequate length"),
    Tier(200, 0.5, "Brief README"),
)

CODE_BLOCK_TIERS = (
    Tier(3, 1.5, "{count} code blocks"),
    Tier(1, 0.75, "Has code blocks"),
)

INSTRUCTION_CHECKS = (
    PatternCheck(
        ("install", "getting started", "setup"),
        1.5,
        "Has setup section",
        "Missing install instructions",
    ),
    PatternCheck(
        ("usage", "example", "how to"),
        1.0,
        "Has usage info",
        "Missing usage examples",
    ),
)

PRESENTATION_CHECKS = (
    PatternCheck(("shields.io", "badgen", "[!["), 1.0, "Has badges", "No badges"),
    PatternCheck(("## ", "# "), 0.5, "Structured headers"),
    PatternCheck(
        (".gif", ".png", ".jpg", "screenshot", ".svg"),
        1.0,
        "Has visual media",
        "No screenshots/demos",
    ),
    PatternCheck(("license",), 0.5, "References license"),
)


def count_code_blocks(text: str) -> int:
    """Complete fenced blocks; an unmatched trailing fence is not counted."""
    return text.count(CODE_FENCE) // 2


class ReadmeEvaluator(Evaluator):
    key = "readme"

    def evaluate(self, snapshot: RepositorySnapshot, now: datetime) -> CategoryScore:
        tally = Tally()
        readme = snapshot.readme_text or ""
        lowered = readme.lower()

        score_tiers(
            tally,
            len(readme),
            LENGTH_TIERS,
            fallback="No README or very thin",
            strict=True,
        )
        score_text(tally, lowered, INSTRUCTION_CHECKS)
        score_tiers(
            tally,
            count_code_blocks(lowered),
            CODE_BLOCK_TIERS,
            fallback="No code examples",
        )
        score_text(tally, lowered, PRESENTATION_CHECKS)

        return tally.result()
