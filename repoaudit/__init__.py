"""Deterministic quality scoring for public source repositories."""

from .adjustments import merge_adjustments
from .audit import AuditReport, Auditor
from .categories import CATEGORIES, SCORING_SCHEME_VERSION, compute_total
from .engine import ScoreEngine, score_repository
from .grades import get_grade
from .models import RepositorySnapshot, ScoreResult, snapshot_from_mapping

__all__ = [
    "AuditReport",
    "Auditor",
    "CATEGORIES",
    "RepositorySnapshot",
    "SCORING_SCHEME_VERSION",
    "ScoreEngine",
    "ScoreResult",
    "compute_total",
    "get_grade",
    "merge_adjustments",
    "score_repository",
    "snapshot_from_mapping",
]
