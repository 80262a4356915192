"""Core data models shared across repoaudit components."""

from __future__ import annotations

import math
from dataclasses import MISSING, dataclass, field, fields
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

COMMUNITY_FILE_KEYS: Tuple[str, ...] = (
    "security",
    "contributing",
    "code_of_conduct",
    "issue_template",
    "pull_request_template",
)


class SnapshotError(ValueError):
    """Raised when a snapshot payload is not a mapping at all."""


@dataclass(frozen=True)
class LicenseInfo:
    """License reported by the hosting provider."""

    spdx_id: Optional[str]
    name: Optional[str]

    @property
    def label(self) -> str:
        return self.spdx_id or self.name or "unknown"


@dataclass(frozen=True)
class Contributor:
    """A contributor entry; only the contribution count is scored."""

    contribution_count: int


@dataclass(frozen=True)
class RepositorySnapshot:
    """Normalized, immutable facts about one repository.

    Every field has an "absent" default so a snapshot for an empty or
    unreachable repository is still valid input for the engine.
    """

    full_name: str = ""
    description: Optional[str] = None
    topics: Tuple[str, ...] = ()
    star_count: int = 0
    fork_count: int = 0
    open_issue_count: int = 0
    homepage_url: Optional[str] = None
    primary_language: Optional[str] = None
    license: Optional[LicenseInfo] = None
    has_wiki: bool = False
    has_discussions: bool = False
    allows_forking: Optional[bool] = None
    is_archived: bool = False
    readme_text: str = ""
    root_entries: FrozenSet[str] = frozenset()
    all_paths: FrozenSet[str] = frozenset()
    community_files: Mapping[str, bool] = field(default_factory=dict)
    releases: Tuple[Any, ...] = ()
    workflow_count: int = 0
    contributors: Tuple[Contributor, ...] = ()
    most_recent_commit_at: Optional[datetime] = None
    commit_count: int = 0
    tsconfig_content: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        # None in a defaulted field means "absent"; restore the empty default.
        for item in fields(self):
            if getattr(self, item.name) is not None:
                continue
            if item.default_factory is not MISSING:
                object.__setattr__(self, item.name, item.default_factory())
            elif item.default is not None:
                object.__setattr__(self, item.name, item.default)
        object.__setattr__(self, "community_files", MappingProxyType(dict(self.community_files)))

    def has_community_file(self, name: str) -> bool:
        return bool(self.community_files.get(name, False))


@dataclass
class CategoryScore:
    """Outcome of a single category evaluator."""

    score: float
    details: List[str] = field(default_factory=list)


@dataclass
class ScoreResult:
    """Deterministic scores and their justifications, keyed by category."""

    scores: Dict[str, float]
    details: Dict[str, List[str]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scores": dict(self.scores),
            "details": {key: list(items) for key, items in self.details.items()},
        }


# ----------------------------------------------------------------------
# Snapshot construction from untrusted JSON-like payloads


_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "full_name": ("full_name", "fullName"),
    "description": ("description",),
    "topics": ("topics",),
    "star_count": ("star_count", "starCount", "stargazers_count"),
    "fork_count": ("fork_count", "forkCount", "forks_count"),
    "open_issue_count": ("open_issue_count", "openIssueCount", "open_issues_count"),
    "homepage_url": ("homepage_url", "homepageUrl", "homepage"),
    "primary_language": ("primary_language", "primaryLanguage", "language"),
    "license": ("license",),
    "has_wiki": ("has_wiki", "hasWiki"),
    "has_discussions": ("has_discussions", "hasDiscussions"),
    "allows_forking": ("allows_forking", "allowsForking", "allow_forking"),
    "is_archived": ("is_archived", "isArchived", "archived"),
    "readme_text": ("readme_text", "readmeText", "readme"),
    "root_entries": ("root_entries", "rootEntries", "rootFiles"),
    "all_paths": ("all_paths", "allPaths"),
    "community_files": ("community_files", "communityFiles"),
    "releases": ("releases",),
    "workflow_count": ("workflow_count", "workflowCount"),
    "contributors": ("contributors",),
    "most_recent_commit_at": (
        "most_recent_commit_at",
        "mostRecentCommitTimestamp",
        "mostRecentCommitAt",
    ),
    "commit_count": ("commit_count", "commitCount"),
    "tsconfig_content": ("tsconfig_content", "tsconfigContent"),
    "created_at": ("created_at", "createdAt"),
}


def snapshot_from_mapping(data: Any) -> RepositorySnapshot:
    """Build a snapshot from a JSON-like mapping, coercing malformed fields.

    Accepts both snake_case names and the camelCase names used by the web
    client. A field with the wrong type is treated as absent rather than
    rejected; only a payload that is not a mapping raises ``SnapshotError``.
    """
    if not isinstance(data, Mapping):
        raise SnapshotError("Snapshot payload must be a JSON object")

    def pick(name: str) -> Any:
        for alias in _FIELD_ALIASES[name]:
            if alias in data:
                return data[alias]
        return None

    root_entries = _as_path_set(pick("root_entries"))
    all_paths = _as_path_set(pick("all_paths")) or root_entries

    return RepositorySnapshot(
        full_name=_as_str(pick("full_name")) or "",
        description=_as_str(pick("description")),
        topics=tuple(_as_str_list(pick("topics"))),
        star_count=_as_count(pick("star_count")),
        fork_count=_as_count(pick("fork_count")),
        open_issue_count=_as_count(pick("open_issue_count")),
        homepage_url=_as_str(pick("homepage_url")) or None,
        primary_language=_as_str(pick("primary_language")) or None,
        license=_as_license(pick("license")),
        has_wiki=_as_flag(pick("has_wiki")),
        has_discussions=_as_flag(pick("has_discussions")),
        allows_forking=_as_optional_flag(pick("allows_forking")),
        is_archived=_as_flag(pick("is_archived")),
        readme_text=_as_str(pick("readme_text")) or "",
        root_entries=root_entries,
        all_paths=all_paths,
        community_files=_as_community_files(pick("community_files")),
        releases=tuple(_as_list(pick("releases"))),
        workflow_count=_as_workflow_count(pick("workflow_count"), data.get("workflows")),
        contributors=_as_contributors(pick("contributors")),
        most_recent_commit_at=_as_datetime(pick("most_recent_commit_at")),
        commit_count=_as_count(pick("commit_count")),
        tsconfig_content=_as_str(pick("tsconfig_content")),
        created_at=_as_datetime(pick("created_at")),
    )


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def _as_str_list(value: Any) -> List[str]:
    return [item for item in _as_list(value) if isinstance(item, str)]


def _as_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float) and math.isfinite(value):
        return max(int(value), 0)
    return 0


def _as_flag(value: Any) -> bool:
    return value is True


def _as_optional_flag(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def _as_path_set(value: Any) -> FrozenSet[str]:
    if isinstance(value, (set, frozenset)):
        value = list(value)
    return frozenset(item.lower() for item in _as_str_list(value) if item)


def _as_license(value: Any) -> Optional[LicenseInfo]:
    if isinstance(value, str) and value:
        return LicenseInfo(spdx_id=value, name=value)
    if not isinstance(value, Mapping):
        return None
    spdx_id = _as_str(value.get("spdx_id", value.get("spdxId")))
    name = _as_str(value.get("name"))
    if not spdx_id and not name:
        return None
    return LicenseInfo(spdx_id=spdx_id, name=name)


def _as_community_files(value: Any) -> Dict[str, bool]:
    if not isinstance(value, Mapping):
        return {key: False for key in COMMUNITY_FILE_KEYS}
    # Provider payloads report each file as an object or null; plain flags are accepted too.
    return {key: bool(value.get(key)) for key in COMMUNITY_FILE_KEYS}


def _as_workflow_count(value: Any, workflows: Any) -> int:
    if value is None and isinstance(workflows, (list, tuple)):
        return len(workflows)
    return _as_count(value)


def _as_contributors(value: Any) -> Tuple[Contributor, ...]:
    contributors: List[Contributor] = []
    for item in _as_list(value):
        if isinstance(item, Contributor):
            contributors.append(item)
        elif isinstance(item, Mapping):
            raw = item.get("contribution_count", item.get("contributionCount", item.get("contributions")))
            contributors.append(Contributor(contribution_count=_as_count(raw)))
        elif isinstance(item, int) and not isinstance(item, bool):
            contributors.append(Contributor(contribution_count=max(item, 0)))
    return tuple(contributors)


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    elif isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        # Epoch milliseconds, as produced by JavaScript clients.
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


__all__ = [
    "COMMUNITY_FILE_KEYS",
    "CategoryScore",
    "Contributor",
    "LicenseInfo",
    "RepositorySnapshot",
    "ScoreResult",
    "SnapshotError",
    "snapshot_from_mapping",
]
