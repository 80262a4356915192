"""Qualitative repository review by a language model.

The reviewer never fails an audit: any transport, parsing or shape problem
is logged and reported as "no review" (``None``).
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol

from ..adjustments import ADJUSTMENT_MAX, ADJUSTMENT_MIN, parse_adjustment_record
from ..categories import CATEGORY_KEYS
from ..logging import get_logger
from ..models import RepositorySnapshot

README_EXCERPT_CHARS = 4000
PATH_EXCERPT_COUNT = 120

SYSTEM_PROMPT = "You score open-source repos. Return ONLY valid JSON. No markdown."

_CODE_FENCE = re.compile(r"```json\s?|```")


class PromptRunner(Protocol):
    model: str

    def run(self, prompt: str, *, system: str | None = None) -> str: ...


@dataclass
class Review:
    """Narrative feedback plus per-category score nudges."""

    adjustments: Dict[str, float]
    summary: str = ""
    top_strength: str = ""
    top_weakness: str = ""
    recommendations: List[str] = field(default_factory=list)
    red_flags: List[str] = field(default_factory=list)
    model: Optional[str] = None


def response_schema() -> Dict[str, Any]:
    """The JSON shape the model is asked to return."""
    return {
        "adjustments": {key: 0 for key in CATEGORY_KEYS},
        "summary": "One paragraph.",
        "topStrength": "Best thing.",
        "topWeakness": "Biggest gap.",
        "recommendations": ["rec1", "rec2", "rec3"],
        "redFlags": [],
    }


def build_prompt(snapshot: RepositorySnapshot, scores: Mapping[str, float]) -> str:
    topics = ", ".join(snapshot.topics) or "none"
    paths = "\n".join(sorted(snapshot.all_paths)[:PATH_EXCERPT_COUNT])
    return (
        f"{json.dumps(response_schema())}\n\n"
        f"Each adjustment: float {ADJUSTMENT_MIN:g} to +{ADJUSTMENT_MAX:g}.\n"
        f"Scores: {json.dumps(dict(scores))}\n"
        f"Repo: {snapshot.full_name}\n"
        f"Desc: {snapshot.description or 'none'}\n"
        f"Stars: {snapshot.star_count} Lang: {snapshot.primary_language}\n"
        f"Topics: {topics}\n"
        f"Homepage: {snapshot.homepage_url or 'none'}\n\n"
        f"README:\n{snapshot.readme_text[:README_EXCERPT_CHARS]}\n\n"
        f"Files:\n{paths}"
    )


def extract_json_object(text: str) -> Any:
    """Parse the outermost JSON object in ``text``, ignoring code fences."""
    cleaned = _CODE_FENCE.sub("", text).strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise ValueError("No JSON object in model response")
    return json.loads(cleaned[start : end + 1])


def review_from_payload(payload: Any, *, model: Optional[str] = None) -> Optional[Review]:
    """Validate a decoded model response; None when its shape is unusable."""
    if not isinstance(payload, dict):
        return None
    adjustments = parse_adjustment_record(payload.get("adjustments", {}))
    if adjustments is None:
        return None
    return Review(
        adjustments=adjustments,
        summary=_text(payload.get("summary")),
        top_strength=_text(payload.get("topStrength")),
        top_weakness=_text(payload.get("topWeakness")),
        recommendations=_text_list(payload.get("recommendations")),
        red_flags=_text_list(payload.get("redFlags")),
        model=model,
    )


class AIReviewer:
    """Asks a language model for a review of the deterministic result."""

    def __init__(self, runner: PromptRunner) -> None:
        self.runner = runner
        self.logger = get_logger("reviewer")

    def review(
        self, snapshot: RepositorySnapshot, scores: Mapping[str, float]
    ) -> Optional[Review]:
        prompt = build_prompt(snapshot, scores)
        model = getattr(self.runner, "model", None)
        try:
            response = self.runner.run(prompt, system=SYSTEM_PROMPT)
            payload = extract_json_object(str(response))
        except (RuntimeError, ValueError, OSError) as exc:
            self.logger.warning("AI review unavailable for %s: %s", snapshot.full_name, exc)
            return None

        review = review_from_payload(payload, model=model)
        if review is None:
            self.logger.warning("AI review for %s had an unexpected shape", snapshot.full_name)
        return review


def _text(value: Any) -> str:
    if value is None or value is False:
        return ""
    return str(value)


def _text_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value]


__all__ = [
    "AIReviewer",
    "Review",
    "build_prompt",
    "extract_json_object",
    "response_schema",
    "review_from_payload",
]
