"""Developer experience evaluator."""

from __future__ import annotations

import re
from datetime import datetime

from ..models import CategoryScore, RepositorySnapshot
from .base import Evaluator, Tally
from .signals import PatternCheck, contains_any, is_external_homepage, score_paths, score_text

WORKSPACE_CHECKS = (
    PatternCheck(("changelog",), 1.0, "Changelog", "No changelog"),
    PatternCheck(("examples/", "example/", "demo/"), 1.5, "Examples dir", "No examples dir"),
    PatternCheck((".devcontainer",), 1.0, "Devcontainer"),
    PatternCheck(("docker-compose", "makefile", "justfile"), 1.0, "Dev tooling"),
    PatternCheck(("playground", "sandbox"), 0.5, "Playground"),
)

ONLINE_PLAYGROUND = PatternCheck(("stackblitz", "codesandbox"), 0.5, "Online playground")

TYPE_SUPPORT_POINTS = 1.0
VSCODE = PatternCheck((".vscode/",), 0.5, "VS Code config")

INSTALL_COMMAND = re.compile(
    r"npm install|npm i |yarn add|pnpm add|pip install|cargo add|go get|bun add",
    re.IGNORECASE,
)
INSTALL_COMMAND_POINTS = 1.5

ENV_TEMPLATE = PatternCheck((".env.example", ".dev.vars.example"), 0.5, "Env template")
LIVE_DEMO_POINTS = 0.5


class DeveloperExperienceEvaluator(Evaluator):
    key = "dx"

    def evaluate(self, snapshot: RepositorySnapshot, now: datetime) -> CategoryScore:
        tally = Tally()
        paths = snapshot.all_paths
        readme = snapshot.readme_text or ""

        score_paths(tally, paths, WORKSPACE_CHECKS)
        score_text(tally, readme.lower(), (ONLINE_PLAYGROUND,))

        if contains_any(paths, ("tsconfig",)) or snapshot.primary_language == "TypeScript":
            tally.award(TYPE_SUPPORT_POINTS, "Type support")

        score_paths(tally, paths, (VSCODE,))

        if INSTALL_COMMAND.search(readme):
            tally.award(INSTALL_COMMAND_POINTS, "Install cmd in README")

        score_paths(tally, paths, (ENV_TEMPLATE,))

        if is_external_homepage(snapshot.homepage_url):
            tally.award(LIVE_DEMO_POINTS, "Live demo")

        return tally.result()
