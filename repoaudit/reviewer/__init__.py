"""AI reviewer and its chat completion transport."""

from .review import AIReviewer, Review
from .runner import LLMRunner

__all__ = ["AIReviewer", "LLMRunner", "Review"]
