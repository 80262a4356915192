"""FastAPI application exposing repository audits over HTTP."""

from __future__ import annotations

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..audit import Auditor, AuditReport, build_auditor
from ..categories import SCORING_SCHEME_VERSION, compute_total
from ..config import AuditConfig, RateLimitConfig, load_config
from ..engine import ScoreEngine
from ..github import GitHubApiError, parse_repo_slug
from ..grades import get_grade
from ..logging import get_logger
from ..models import SnapshotError, snapshot_from_mapping
from ..rate_limit import FixedWindowRateLimiter

logger = get_logger("service")


class HealthResponse(BaseModel):
    status: str


class GradeModel(BaseModel):
    letter: str
    color: str
    label: str
    minimum: float


class TreeEntryModel(BaseModel):
    path: str
    group: str
    label: Optional[str] = None


class FileTreeModel(BaseModel):
    total_files: int
    groups: Dict[str, int]
    top_dirs: List[TreeEntryModel]
    highlights: List[str]


class RepoMetaModel(BaseModel):
    full_name: str
    description: Optional[str] = None
    stars: int
    forks: int
    open_issues: int
    language: Optional[str] = None
    license: Optional[str] = None
    homepage: Optional[str] = None
    created_year: Optional[int] = None
    archived: bool


class AuditResponse(BaseModel):
    meta: RepoMetaModel
    scores: Dict[str, float]
    details: Dict[str, List[str]]
    deterministic_scores: Dict[str, float]
    total: float
    grade: GradeModel
    file_tree: FileTreeModel
    summary: Optional[str] = None
    top_strength: Optional[str] = None
    top_weakness: Optional[str] = None
    recommendations: List[str] = []
    red_flags: List[str] = []
    model_used: Optional[str] = None
    scheme_version: str


class ScoreRequest(BaseModel):
    snapshot: Dict[str, Any]
    now: Optional[datetime] = None


class ScoreResponse(BaseModel):
    scores: Dict[str, float]
    details: Dict[str, List[str]]
    total: float
    grade: GradeModel
    scheme_version: str


def create_app(
    auditor_factory: Callable[[], Auditor] | None = None,
    *,
    config: AuditConfig | None = None,
    rate_limiter: FixedWindowRateLimiter | None = None,
) -> FastAPI:
    """Create the FastAPI application serving audits and offline scoring."""

    settings = config or load_config(Path.cwd())
    limits: RateLimitConfig = settings.rate_limit
    limiter = rate_limiter or FixedWindowRateLimiter()
    engine = ScoreEngine()

    def _default_auditor() -> Auditor:
        return build_auditor(settings)

    factory = auditor_factory or _default_auditor

    app = FastAPI(title="Repoaudit Service", version="1.0.0")

    async def get_auditor() -> Auditor:
        return factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/audit", response_model=AuditResponse)
    async def audit_repo(
        request: Request,
        response: Response,
        repo: str = "",
        ai: bool = True,
        auditor: Auditor = Depends(get_auditor),
    ) -> AuditResponse:
        slug = parse_repo_slug(repo)
        if slug is None:
            raise HTTPException(status_code=400, detail="Invalid repo. Use owner/name format.")

        client_host = request.client.host if request.client else "unknown"
        mode = "ai" if ai else "det"
        limit = limits.ai_per_minute if ai else limits.deterministic_per_minute
        verdict = limiter.hit(
            f"{client_host}:{mode}", limit=limit, window_seconds=limits.window_seconds
        )
        if not verdict.ok:
            logger.info("Rate limited %s (%s mode)", client_host, mode)
            raise HTTPException(
                status_code=429,
                detail="Rate limit exceeded. Try again later.",
                headers=verdict.headers(),
            )
        response.headers["x-ratelimit-limit"] = str(verdict.limit)
        response.headers["x-ratelimit-remaining"] = str(verdict.remaining)

        owner, name = slug

        def _run_audit() -> AuditReport:
            return auditor.audit(owner, name, use_ai=ai)

        loop = asyncio.get_running_loop()
        report = await loop.run_in_executor(None, _run_audit)
        return AuditResponse(**report.to_dict())

    @app.post("/score", response_model=ScoreResponse)
    async def score_snapshot(payload: ScoreRequest) -> ScoreResponse:
        snapshot = snapshot_from_mapping(payload.snapshot)
        result = engine.score(snapshot, payload.now)
        total = compute_total(result.scores)
        return ScoreResponse(
            scores=result.scores,
            details=result.details,
            total=total,
            grade=GradeModel(**get_grade(total).to_dict()),
            scheme_version=SCORING_SCHEME_VERSION,
        )

    @app.exception_handler(GitHubApiError)
    async def github_error_handler(_: Any, exc: GitHubApiError) -> JSONResponse:
        headers = {}
        if exc.status == 429 and exc.retry_after_seconds is not None:
            headers["retry-after"] = str(exc.retry_after_seconds)
        return JSONResponse(status_code=exc.status, content={"detail": str(exc)}, headers=headers)

    @app.exception_handler(SnapshotError)
    async def snapshot_error_handler(_: Any, exc: SnapshotError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "0.0.0.0", port: int = 8000, *, config: AuditConfig | None = None
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(config=config)
    uvicorn.run(app, host=host, port=port)
