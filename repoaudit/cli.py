"""CLI entrypoints for repoaudit commands."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .audit import AuditReport, build_auditor
from .categories import SCORING_SCHEME_VERSION, compute_total, get_category
from .config import AuditConfig, ConfigError, load_config
from .engine import ScoreEngine
from .github import GitHubApiError, parse_repo_slug
from .grades import get_grade
from .logging import configure_logging
from .models import SnapshotError, snapshot_from_mapping


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_json_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON instead of a text report.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repoaudit",
        description="Score public repositories across eleven quality categories.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .repoaudit.yml or the directory containing it (defaults to current directory).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    audit_parser = subparsers.add_parser(
        "audit",
        help="Fetch a GitHub repository and audit it.",
    )
    _add_verbose_option(audit_parser, suppress_default=True)
    _add_json_option(audit_parser)
    audit_parser.add_argument("repo", help="Repository in owner/name form.")
    audit_parser.add_argument(
        "--no-ai",
        dest="ai",
        action="store_false",
        help="Skip the AI review and report deterministic scores only.",
    )
    audit_parser.add_argument(
        "--token",
        default=None,
        help="GitHub token (overrides config and environment).",
    )

    score_parser = subparsers.add_parser(
        "score",
        help="Score a snapshot JSON file without network access.",
    )
    _add_verbose_option(score_parser, suppress_default=True)
    _add_json_option(score_parser)
    score_parser.add_argument("snapshot", help="Path to a snapshot JSON file.")
    score_parser.add_argument(
        "--now",
        default=None,
        help="ISO-8601 timestamp to evaluate recency against (defaults to the current time).",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="0.0.0.0", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for repoaudit commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "audit":
        _run_audit(parser, args, config)
    elif args.command == "score":
        _run_score(parser, args)
    elif args.command == "serve":
        from .service import run_service

        run_service(args.host, args.port, config=config)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_audit(
    parser: argparse.ArgumentParser, args: argparse.Namespace, config: AuditConfig
) -> None:
    slug = parse_repo_slug(args.repo)
    if slug is None:
        parser.exit(1, f"Invalid repo {args.repo!r}. Use owner/name format.\n")
    if args.token:
        config.github.token = args.token

    auditor = build_auditor(config)
    try:
        report = auditor.audit(*slug, use_ai=bool(args.ai))
    except GitHubApiError as exc:
        parser.exit(1, f"repoaudit audit failed: {exc}\n")

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(format_report(report))


def _run_score(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    now = _parse_now(parser, args.now)
    try:
        payload = json.loads(Path(args.snapshot).read_text(encoding="utf-8"))
        snapshot = snapshot_from_mapping(payload)
    except OSError as exc:
        parser.exit(1, f"Failed to read {args.snapshot}: {exc}\n")
    except (json.JSONDecodeError, SnapshotError) as exc:
        parser.exit(1, f"Invalid snapshot {args.snapshot}: {exc}\n")

    result = ScoreEngine().score(snapshot, now)
    total = compute_total(result.scores)
    grade = get_grade(total)

    if args.json:
        data = result.to_dict()
        data.update(
            total=total, grade=grade.to_dict(), scheme_version=SCORING_SCHEME_VERSION
        )
        print(json.dumps(data, indent=2))
        return

    lines = [f"Grade {grade.letter} ({grade.label})  {total:.2f}/10", ""]
    lines.extend(_category_lines(result.scores, result.details))
    print("\n".join(lines))


def _parse_now(parser: argparse.ArgumentParser, value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    try:
        moment = datetime.fromisoformat(value)
    except ValueError:
        parser.error(f"--now must be an ISO-8601 timestamp, got {value!r}")
    return moment if moment.tzinfo else moment.replace(tzinfo=UTC)


def format_report(report: AuditReport) -> str:
    """Render an audit report as plain text."""
    meta = report.meta
    header = meta.full_name
    if meta.archived:
        header += " [archived]"
    lines = [
        header,
        f"  {meta.stars} stars, {meta.forks} forks, {meta.open_issues} open issues"
        f", {meta.language or 'unknown language'}, license {meta.license or 'none'}",
        "",
        f"Grade {report.grade.letter} ({report.grade.label})  {report.total:.2f}/10",
        "",
    ]
    lines.extend(_category_lines(report.scores, report.details, report.deterministic_scores))

    if report.summary:
        lines.extend(["", report.summary])
    if report.top_strength:
        lines.append(f"Strength: {report.top_strength}")
    if report.top_weakness:
        lines.append(f"Weakness: {report.top_weakness}")
    if report.recommendations:
        lines.append("Recommendations:")
        lines.extend(f"  - {item}" for item in report.recommendations)
    if report.red_flags:
        lines.append("Red flags:")
        lines.extend(f"  ! {item}" for item in report.red_flags)
    if report.file_tree.highlights:
        lines.extend(["", "Layout: " + ", ".join(report.file_tree.highlights)])
    if report.model_used:
        lines.append(f"Reviewed by {report.model_used}")
    return "\n".join(lines)


def _category_lines(
    scores: Mapping[str, float],
    details: Mapping[str, List[str]],
    baseline: Optional[Dict[str, float]] = None,
) -> List[str]:
    lines: List[str] = []
    for key, score in scores.items():
        category = get_category(key)
        icon, name = (category.icon, category.name) if category else ("?", key)
        line = f"{icon} {name:<18} {score:5.2f}"
        if baseline is not None and key in baseline and baseline[key] != score:
            line += f"  (base {baseline[key]:.2f})"
        lines.append(line)
        lines.extend(f"    - {detail}" for detail in details.get(key, []))
    return lines


if __name__ == "__main__":
    main(sys.argv[1:])
