"""Configuration loading for repoaudit (.repoaudit.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILENAME = ".repoaudit.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class GitHubConfig:
    """Settings for the GitHub snapshot producer."""

    token: Optional[str] = None
    api_base: Optional[str] = None
    request_timeout: Optional[float] = None
    max_workers: Optional[int] = None


@dataclass
class ReviewerConfig:
    """Settings for the optional AI reviewer."""

    enabled: bool = True
    model: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    request_timeout: Optional[float] = None


@dataclass
class RateLimitConfig:
    """Per-client request budgets for the HTTP service."""

    ai_per_minute: int = 6
    deterministic_per_minute: int = 30
    window_seconds: int = 60


@dataclass
class AuditConfig:
    """Represents the settings defined in .repoaudit.yml."""

    root: Path
    github: GitHubConfig = field(default_factory=GitHubConfig)
    reviewer: ReviewerConfig = field(default_factory=ReviewerConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)


def load_config(config_path: Path) -> AuditConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return AuditConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    github_data = _as_dict(data.get("github"))
    github = GitHubConfig(
        token=_as_str(github_data.get("token")),
        api_base=_as_str(github_data.get("api_base")),
        request_timeout=_as_float(github_data.get("request_timeout")),
        max_workers=_as_int(github_data.get("max_workers")),
    )

    reviewer_data = _as_dict(data.get("reviewer"))
    enabled = _as_bool(reviewer_data.get("enabled"))
    reviewer = ReviewerConfig(
        enabled=True if enabled is None else enabled,
        model=_as_str(reviewer_data.get("model")),
        base_url=_as_str(reviewer_data.get("base_url")),
        api_key=_as_str(reviewer_data.get("api_key")),
        temperature=_as_float(reviewer_data.get("temperature")),
        max_tokens=_as_int(reviewer_data.get("max_tokens")),
        request_timeout=_as_float(reviewer_data.get("request_timeout")),
    )

    service_data = _as_dict(data.get("service"))
    limits_data = _as_dict(service_data.get("rate_limit"))
    defaults = RateLimitConfig()
    rate_limit = RateLimitConfig(
        ai_per_minute=_positive(limits_data.get("ai_per_minute"), defaults.ai_per_minute),
        deterministic_per_minute=_positive(
            limits_data.get("deterministic_per_minute"), defaults.deterministic_per_minute
        ),
        window_seconds=_positive(limits_data.get("window_seconds"), defaults.window_seconds),
    )

    return AuditConfig(root=root, github=github, reviewer=reviewer, rate_limit=rate_limit)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _positive(value: Any, default: int) -> int:
    parsed = _as_int(value)
    return parsed if parsed is not None and parsed > 0 else default


__all__ = [
    "AuditConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "GitHubConfig",
    "RateLimitConfig",
    "ReviewerConfig",
    "load_config",
]
