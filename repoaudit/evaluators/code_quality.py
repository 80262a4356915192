"""Code quality evaluator, including a light read of tsconfig strictness."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from ..models import CategoryScore, RepositorySnapshot
from .base import Evaluator, Tally
from .signals import PatternCheck, Tier, score_check, contains_any, score_paths, score_tiers

TYPESCRIPT = PatternCheck(("tsconfig", ".ts", ".tsx"), 2.0, "TypeScript", "No TypeScript")

STRICT_MODE_POINTS = 1.5
STRICT_FLAGS = ("noImplicitAny", "strictNullChecks", "strictFunctionTypes", "noImplicitReturns")
STRICT_FLAG_TIERS = (
    Tier(3, 1.0, "{count}/4 strict flags"),
    Tier(1, 0.5, "Only {count}/4 strict flags"),
)

TOOLING_CHECKS = (
    PatternCheck(
        (".eslintrc", "eslint.config", "biome.json", ".prettierrc", "prettier.config", "deno.json"),
        1.5,
        "Has linter/formatter",
        "No linter config",
    ),
    PatternCheck((".editorconfig",), 0.5, ".editorconfig"),
)

DIRECTORY_TIERS = (
    Tier(5, 1.5, "Well-organized ({count} dirs)"),
    Tier(3, 1.0, "Basic structure ({count} dirs)"),
)

LOCKFILE = PatternCheck(
    ("package-lock.json", "yarn.lock", "pnpm-lock.yaml", "bun.lockb", "cargo.lock", "go.sum"),
    1.0,
    "Has lockfile",
    "No lockfile",
)

LANGUAGE_POINTS = 0.5

LAYOUT_CHECKS = (
    PatternCheck(("src/", "lib/", "pkg/"), 1.5, "Has source directory"),
    PatternCheck((".env.example", ".env.template", ".dev.vars.example"), 0.5, "Env template"),
)


def count_top_level_dirs(paths: Iterable[str]) -> int:
    """Distinct first segments among paths that live inside a directory."""
    return len({path.split("/", 1)[0] for path in paths if "/" in path})


def parse_compiler_options(content: Optional[str]) -> Optional[Dict[str, Any]]:
    """Return ``compilerOptions`` from tsconfig text, or None when unreadable."""
    if not content:
        return None
    try:
        parsed = json.loads(content)
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None
    options = parsed.get("compilerOptions")
    return options if isinstance(options, dict) else {}


def score_strictness(tally: Tally, options: Dict[str, Any]) -> None:
    strict = options.get("strict") is True
    if strict:
        tally.award(STRICT_MODE_POINTS, "strict mode enabled")
    else:
        enabled = sum(1 for flag in STRICT_FLAGS if options.get(flag) is True)
        score_tiers(tally, enabled, STRICT_FLAG_TIERS, fallback="No strict flags in tsconfig")
    if not strict and options.get("noImplicitAny") is False:
        tally.note("noImplicitAny disabled — weak typing")


class CodeQualityEvaluator(Evaluator):
    key = "codeQuality"

    def evaluate(self, snapshot: RepositorySnapshot, now: datetime) -> CategoryScore:
        tally = Tally()
        paths = snapshot.all_paths

        score_check(tally, contains_any(paths, TYPESCRIPT.patterns), TYPESCRIPT)

        options = parse_compiler_options(snapshot.tsconfig_content)
        if options is not None:
            score_strictness(tally, options)

        score_paths(tally, paths, TOOLING_CHECKS)
        score_tiers(
            tally,
            count_top_level_dirs(paths),
            DIRECTORY_TIERS,
            fallback="Flat structure",
        )
        score_check(tally, contains_any(paths, LOCKFILE.patterns), LOCKFILE)

        if snapshot.primary_language:
            tally.award(LANGUAGE_POINTS, f"Language: {snapshot.primary_language}")

        score_paths(tally, paths, LAYOUT_CHECKS)

        return tally.result()
