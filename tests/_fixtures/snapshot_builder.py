"""Helper utilities for constructing repository snapshots in tests."""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable

from repoaudit.models import RepositorySnapshot, snapshot_from_mapping

BASE_README = (
    "## Install\n\n```sh\nnpm i\n```\n\n## Usage\n\nExample.\n\n"
    "![screenshot](x.png)\n\nLicense: MIT\nDiscord"
)

BASE_PAYLOAD: Dict[str, Any] = {
    "full_name": "a/b",
    "description": "A useful thing",
    "topics": ["x", "y", "z"],
    "star_count": 120,
    "fork_count": 15,
    "open_issue_count": 4,
    "homepage_url": "https://example.com",
    "primary_language": "TypeScript",
    "license": {"spdx_id": "MIT", "name": "MIT License"},
    "has_wiki": True,
    "has_discussions": True,
    "allows_forking": True,
    "is_archived": False,
    "readme_text": BASE_README,
    "root_entries": ["readme.md", "license", "package-lock.json", ".gitignore", "src"],
    "all_paths": [
        "src/index.ts",
        "src/foo.test.ts",
        ".github/workflows/ci.yml",
        "docs/index.md",
        "changelog.md",
        "dependabot.yml",
        "playwright.config.ts",
        ".eslintrc",
        ".editorconfig",
        ".env.example",
    ],
    "community_files": {
        "security": True,
        "contributing": True,
        "code_of_conduct": True,
        "issue_template": True,
        "pull_request_template": True,
    },
    "releases": [{"id": 1}, {"id": 2}],
    "workflow_count": 3,
    "contributors": [{"contributions": 50}, {"contributions": 20}, {"contributions": 1}],
    "most_recent_commit_at": "2026-02-10T00:00:00Z",
    "commit_count": 1,
    "tsconfig_content": None,
    "created_at": "2020-01-02T00:00:00Z",
}


class SnapshotBuilder:
    """Start from a well-kept TypeScript repository and tweak individual facts."""

    def __init__(self) -> None:
        self.payload = copy.deepcopy(BASE_PAYLOAD)

    def set(self, **fields: Any) -> "SnapshotBuilder":
        """Override top-level snapshot fields."""
        self.payload.update(fields)
        return self

    def add_paths(self, paths: Iterable[str]) -> "SnapshotBuilder":
        self.payload["all_paths"] = list(self.payload["all_paths"]) + list(paths)
        return self

    def drop_paths(self, *fragments: str) -> "SnapshotBuilder":
        """Remove every path containing any of ``fragments``."""
        for key in ("all_paths", "root_entries"):
            self.payload[key] = [
                path
                for path in self.payload[key]
                if not any(fragment in path for fragment in fragments)
            ]
        return self

    def community(self, **flags: bool) -> "SnapshotBuilder":
        self.payload["community_files"] = {**self.payload["community_files"], **flags}
        return self

    def build(self) -> RepositorySnapshot:
        return snapshot_from_mapping(self.payload)


def empty_snapshot() -> RepositorySnapshot:
    """A snapshot with every fact absent."""
    return snapshot_from_mapping({})


__all__ = ["BASE_PAYLOAD", "BASE_README", "SnapshotBuilder", "empty_snapshot"]
