"""GitHub REST client that assembles a ``RepositorySnapshot``.

Only the repository metadata request is mandatory. Every other slice
(README, community profile, releases, ...) is fetched independently and
falls back to an empty default when it fails, so a partially reachable
repository still produces a snapshot.
"""

from __future__ import annotations

import base64
import json
import math
import os
import re
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from .logging import get_logger
from .models import COMMUNITY_FILE_KEYS, RepositorySnapshot, snapshot_from_mapping

_AUTO_TOKEN = object()

REPO_SLUG = re.compile(r"^([A-Za-z0-9_.-]+)/([A-Za-z0-9_.-]+)$")


class GitHubApiError(RuntimeError):
    """Raised when the mandatory repository request fails."""

    def __init__(
        self, message: str, status: int, retry_after_seconds: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.status = status
        self.retry_after_seconds = retry_after_seconds


def parse_repo_slug(value: str) -> Optional[tuple[str, str]]:
    """Split ``owner/name`` (a trailing slash is tolerated) or return None."""
    match = REPO_SLUG.match(value.strip().rstrip("/"))
    if match is None:
        return None
    return match.group(1), match.group(2)


class GitHubClient:
    """Fetches repository facts from the GitHub REST API."""

    DEFAULT_API_BASE = "https://api.github.com"
    ENV_TOKEN_KEYS = ("REPOAUDIT_GITHUB_TOKEN", "GITHUB_TOKEN")
    USER_AGENT = "repoaudit"

    RELEASES_PER_PAGE = 10
    CONTRIBUTORS_PER_PAGE = 30
    COMMITS_PER_PAGE = 30

    def __init__(
        self,
        token: str | None | object = _AUTO_TOKEN,
        *,
        api_base: str | None = None,
        request_timeout: float | None = 15.0,
        max_workers: int | None = 7,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.token = self._resolve_token(token)
        self.api_base = (api_base or self.DEFAULT_API_BASE).rstrip("/")
        self.request_timeout = request_timeout or 15.0
        self.max_workers = max_workers or 7
        self._clock = clock
        self.logger = get_logger("github")

    # ------------------------------------------------------------------
    # Public API

    def fetch_snapshot(self, owner: str, name: str) -> RepositorySnapshot:
        """Assemble a snapshot for ``owner/name``.

        Raises ``GitHubApiError`` only when the repository itself cannot be
        read (missing, forbidden, rate limited, unreachable).
        """
        base = f"/repos/{quote(owner)}/{quote(name)}"
        meta = self.fetch_json(base)
        if not isinstance(meta, dict):
            raise GitHubApiError("GitHub API returned an unexpected repository payload", 502)

        requests = {
            "community": f"{base}/community/profile",
            "readme": f"{base}/readme",
            "contents": f"{base}/contents/",
            "releases": f"{base}/releases?per_page={self.RELEASES_PER_PAGE}",
            "workflows": f"{base}/actions/workflows",
            "contributors": f"{base}/contributors?per_page={self.CONTRIBUTORS_PER_PAGE}",
            "commits": f"{base}/commits?per_page={self.COMMITS_PER_PAGE}",
        }
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = {key: pool.submit(self._fetch_optional, path) for key, path in requests.items()}
            results = {key: future.result() for key, future in futures.items()}

        root_entries = [
            str(item.get("name") or "").lower()
            for item in _as_list(results["contents"])
            if isinstance(item, dict)
        ]
        all_paths = self._fetch_tree_paths(base, str(meta.get("default_branch") or "main"))
        if all_paths is None:
            self.logger.debug("Full tree unavailable for %s/%s; using root entries", owner, name)
            all_paths = list(root_entries)

        tsconfig = None
        if "tsconfig.json" in root_entries:
            tsconfig = _decode_content(self._fetch_optional(f"{base}/contents/tsconfig.json"))

        commits = [item for item in _as_list(results["commits"]) if isinstance(item, dict)]
        community = results["community"] if isinstance(results["community"], dict) else {}
        workflows = results["workflows"] if isinstance(results["workflows"], dict) else {}

        return snapshot_from_mapping(
            {
                "full_name": meta.get("full_name") or f"{owner}/{name}",
                "description": meta.get("description"),
                "topics": meta.get("topics"),
                "star_count": meta.get("stargazers_count"),
                "fork_count": meta.get("forks_count"),
                "open_issue_count": meta.get("open_issues_count"),
                "homepage_url": meta.get("homepage"),
                "primary_language": meta.get("language"),
                "license": meta.get("license"),
                "has_wiki": meta.get("has_wiki"),
                "has_discussions": meta.get("has_discussions"),
                "allows_forking": meta.get("allow_forking"),
                "is_archived": meta.get("archived"),
                "readme_text": _decode_content(results["readme"]) or "",
                "root_entries": root_entries,
                "all_paths": all_paths,
                "community_files": _community_files(community),
                "releases": [
                    item.get("id") for item in _as_list(results["releases"]) if isinstance(item, dict)
                ],
                "workflow_count": len(_as_list(workflows.get("workflows"))),
                "contributors": _as_list(results["contributors"]),
                "most_recent_commit_at": _commit_date(commits[0]) if commits else None,
                "commit_count": len(commits),
                "tsconfig_content": tsconfig,
                "created_at": meta.get("created_at"),
            }
        )

    def fetch_json(self, path: str) -> Any:
        """GET ``path`` relative to the API base and decode the JSON body."""
        url = path if path.startswith("http") else f"{self.api_base}{path}"
        request = Request(url, headers=self._headers(), method="GET")
        try:
            with urlopen(request, timeout=self.request_timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            raise self._error_for(exc) from exc
        except (URLError, TimeoutError, OSError) as exc:
            raise GitHubApiError("Network error fetching GitHub API", 502) from exc

        if not raw:
            return None
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise GitHubApiError("GitHub API returned invalid JSON", 502) from exc

    # ------------------------------------------------------------------
    # Internal helpers

    def _fetch_optional(self, path: str) -> Any:
        try:
            return self.fetch_json(path)
        except GitHubApiError as exc:
            self.logger.debug("Optional GitHub request %s failed: %s", path, exc)
            return None

    def _fetch_tree_paths(self, base: str, branch: str) -> Optional[List[str]]:
        ref = quote(branch, safe="")
        # Branch names resolve directly in most repositories.
        tree = self._fetch_optional(f"{base}/git/trees/{ref}?recursive=1")
        paths = _tree_paths(tree)
        if paths is not None:
            return paths

        head = self._fetch_optional(f"{base}/git/refs/heads/{ref}")
        commit_sha = _dig(head, "object", "sha")
        if not commit_sha:
            return None
        commit = self._fetch_optional(f"{base}/git/commits/{quote(str(commit_sha))}")
        tree_sha = _dig(commit, "tree", "sha")
        if not tree_sha:
            return None
        return _tree_paths(self._fetch_optional(f"{base}/git/trees/{quote(str(tree_sha))}?recursive=1"))

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": self.USER_AGENT,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _error_for(self, exc: HTTPError) -> GitHubApiError:
        if exc.code == 404:
            return GitHubApiError("Repository not found. Make sure it exists and is public.", 404)
        if exc.code == 403:
            remaining = exc.headers.get("x-ratelimit-remaining") if exc.headers else None
            reset = exc.headers.get("x-ratelimit-reset") if exc.headers else None
            try:
                body = exc.read().decode("utf-8", errors="ignore")
            except (OSError, AttributeError):
                body = ""
            if remaining == "0" or re.search("rate limit", body, re.IGNORECASE):
                return GitHubApiError(
                    "GitHub API rate limit exceeded. Try again later or use a token.",
                    429,
                    self._retry_after(reset),
                )
            return GitHubApiError("GitHub API forbidden.", 403)
        return GitHubApiError(f"GitHub API error: {exc.code}", exc.code)

    def _retry_after(self, reset: Optional[str]) -> Optional[int]:
        try:
            reset_epoch = int(reset) if reset else 0
        except ValueError:
            return None
        if reset_epoch <= 0:
            return None
        return max(0, math.ceil(reset_epoch - self._clock()))

    def _resolve_token(self, token: str | None | object) -> Optional[str]:
        if token is not _AUTO_TOKEN:
            return token or None  # type: ignore[return-value]
        for key in self.ENV_TOKEN_KEYS:
            value = os.getenv(key)
            if value:
                return value
        return None


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _dig(payload: Any, *keys: str) -> Any:
    current = payload
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _tree_paths(tree: Any) -> Optional[List[str]]:
    entries = _dig(tree, "tree")
    if not isinstance(entries, list):
        return None
    return [str(entry.get("path") or "").lower() for entry in entries if isinstance(entry, dict)]


def _decode_content(payload: Any) -> Optional[str]:
    content = _dig(payload, "content")
    if not isinstance(content, str):
        return None
    try:
        raw = base64.b64decode("".join(content.split()))
    except ValueError:
        return None
    return raw.decode("utf-8", errors="replace")


def _community_files(profile: Dict[str, Any]) -> Dict[str, bool]:
    files = profile.get("files")
    if not isinstance(files, dict):
        return {key: False for key in COMMUNITY_FILE_KEYS}
    return {key: bool(files.get(key)) for key in COMMUNITY_FILE_KEYS}


def _commit_date(commit: Dict[str, Any]) -> Optional[str]:
    return _dig(commit, "commit", "author", "date") or _dig(commit, "commit", "committer", "date")


__all__ = ["GitHubApiError", "GitHubClient", "parse_repo_slug"]
