"""Category evaluators and the registry the engine iterates over."""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence

from ..categories import CATEGORY_KEYS
from .base import Evaluator, Tally
from .cicd import CICDEvaluator
from .code_quality import CodeQualityEvaluator
from .community import CommunityEvaluator
from .developer_experience import DeveloperExperienceEvaluator
from .documentation import DocumentationEvaluator
from .first_impressions import FirstImpressionsEvaluator
from .licensing import LicensingEvaluator
from .maintenance import MaintenanceEvaluator
from .readme import ReadmeEvaluator
from .security import SecurityEvaluator
from .testing import TestingSignalsEvaluator

_BUILTIN_FACTORIES: Dict[str, Callable[[], Evaluator]] = {
    "firstImpressions": FirstImpressionsEvaluator,
    "readme": ReadmeEvaluator,
    "documentation": DocumentationEvaluator,
    "codeQuality": CodeQualityEvaluator,
    "testing": TestingSignalsEvaluator,
    "cicd": CICDEvaluator,
    "security": SecurityEvaluator,
    "community": CommunityEvaluator,
    "maintenance": MaintenanceEvaluator,
    "dx": DeveloperExperienceEvaluator,
    "licensing": LicensingEvaluator,
}


def build_evaluators(keys: Sequence[str] = CATEGORY_KEYS) -> List[Evaluator]:
    """Return one instantiated evaluator per category key, in ``keys`` order."""
    unknown = [key for key in keys if key not in _BUILTIN_FACTORIES]
    if unknown:
        raise ValueError(f"Unknown evaluator categories requested: {', '.join(unknown)}")

    evaluators: List[Evaluator] = []
    for key in keys:
        instance = _BUILTIN_FACTORIES[key]()
        if instance.key != key:
            raise TypeError(f"Evaluator for '{key}' reports key '{instance.key}'")
        evaluators.append(instance)
    return evaluators


__all__ = [
    "Evaluator",
    "Tally",
    "build_evaluators",
]
