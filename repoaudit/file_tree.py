"""Summarise a repository's file layout for presentation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Pattern, Tuple

GROUPS: Tuple[str, ...] = ("source", "tests", "config", "docs", "ci", "assets", "build", "other")

# First matching rule wins, so more specific groups come first.
_GROUP_RULES: Tuple[Tuple[Pattern[str], str], ...] = (
    (re.compile(r"^src/|^lib/|^pkg/|^app/|^packages/"), "source"),
    (re.compile(r"^tests?/|^__tests__/|^spec/|\.test\.|\.spec\.|_test\.go"), "tests"),
    (re.compile(r"^docs?/|^documentation/|^wiki/"), "docs"),
    (re.compile(r"^\.github/|^\.gitlab-ci|^\.circleci|^\.travis"), "ci"),
    (re.compile(r"^dist/|^build/|^out/|^\.next/|^target/"), "build"),
    (re.compile(r"^assets?/|^static/|^public/|^images?/|^media/"), "assets"),
    (re.compile(r"^\."), "config"),
    (re.compile(r"\.(json|ya?ml|toml|ini|cfg)$"), "config"),
    (re.compile(r"^(readme|license|changelog|contributing|code_of_conduct|security)"), "docs"),
)

DIR_LABELS: Dict[str, str] = {
    "src/": "Source code",
    "lib/": "Library code",
    "app/": "Application code",
    "pkg/": "Packages",
    "packages/": "Monorepo packages",
    "test/": "Tests",
    "tests/": "Tests",
    "__tests__/": "Tests",
    "spec/": "Test specs",
    "docs/": "Documentation",
    "doc/": "Documentation",
    ".github/": "GitHub config & CI",
    "dist/": "Build output",
    "build/": "Build output",
    "out/": "Build output",
    "public/": "Static assets",
    "static/": "Static assets",
    "assets/": "Assets",
    "examples/": "Usage examples",
    "example/": "Usage examples",
    "scripts/": "Build/dev scripts",
    "bin/": "CLI binaries",
    "cmd/": "CLI commands (Go)",
    "internal/": "Internal packages (Go)",
    "migrations/": "DB migrations",
    ".vscode/": "VS Code config",
    ".devcontainer/": "Dev container",
    "cypress/": "E2E tests (Cypress)",
    "e2e/": "E2E tests",
    "fixtures/": "Test fixtures",
    "vendor/": "Vendored deps",
    "node_modules/": "Dependencies",
}

HEAVY_CONFIG_PERCENT = 30


@dataclass
class TreeEntry:
    """A top-level file or directory (directories end with ``/``)."""

    path: str
    group: str
    label: Optional[str] = None


@dataclass
class FileTreeSummary:
    total_files: int
    groups: Dict[str, int]
    top_dirs: List[TreeEntry] = field(default_factory=list)
    highlights: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "total_files": self.total_files,
            "groups": dict(self.groups),
            "top_dirs": [
                {"path": entry.path, "group": entry.group, "label": entry.label}
                for entry in self.top_dirs
            ],
            "highlights": list(self.highlights),
        }


def classify(path: str) -> str:
    lowered = path.lower()
    for pattern, group in _GROUP_RULES:
        if pattern.search(lowered):
            return group
    return "other"


def build_file_tree(paths: Iterable[str]) -> FileTreeSummary:
    """Group ``paths`` by role and describe the top-level layout."""
    ordered = sorted(paths)
    groups = {name: 0 for name in GROUPS}
    top_level: Dict[str, str] = {}

    for path in ordered:
        group = classify(path)
        groups[group] += 1
        slash = path.find("/")
        entry = path if slash == -1 else path[: slash + 1]
        top_level.setdefault(entry, group)

    top_dirs = [
        TreeEntry(path=entry, group=group, label=DIR_LABELS.get(entry.lower()))
        for entry, group in top_level.items()
    ]
    top_dirs.sort(key=lambda item: (0 if item.path.endswith("/") else 1, item.path))

    return FileTreeSummary(
        total_files=len(ordered),
        groups=groups,
        top_dirs=top_dirs,
        highlights=_highlights(groups, len(ordered)),
    )


def _highlights(groups: Dict[str, int], total: int) -> List[str]:
    if total == 0:
        return []
    highlights: List[str] = []
    source_pct = _percent(groups["source"], total)
    test_pct = _percent(groups["tests"], total)
    config_pct = _percent(groups["config"], total)

    if source_pct > 0:
        highlights.append(f"{source_pct}% source code")
    highlights.append(f"{test_pct}% tests")
    if config_pct > HEAVY_CONFIG_PERCENT:
        highlights.append(f"{config_pct}% config (heavy)")
    if groups["docs"] > 0:
        highlights.append(f"{groups['docs']} doc files")
    if groups["tests"] == 0 and groups["source"] > 0:
        highlights.append("No test files detected")
    return highlights


def _percent(part: int, total: int) -> int:
    # Half-up rounding, matching what a browser client would display.
    return int(part * 100 / total + 0.5)


__all__ = ["FileTreeSummary", "TreeEntry", "build_file_tree", "classify"]
