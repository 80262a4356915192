"""Tests for the file layout summary."""

from __future__ import annotations

from repoaudit.file_tree import build_file_tree, classify


def test_classify_uses_first_matching_group() -> None:
    assert classify("src/app.test.ts") == "source"
    assert classify("tests/test_app.py") == "tests"
    assert classify("lib.spec.js") == "tests"
    assert classify("docs/index.md") == "docs"
    assert classify(".github/workflows/ci.yml") == "ci"
    assert classify("dist/bundle.js") == "build"
    assert classify("public/logo.png") == "assets"
    assert classify(".eslintrc") == "config"
    assert classify("package.json") == "config"
    assert classify("README.md") == "docs"
    assert classify("main.go") == "other"


def test_build_file_tree_groups_and_orders_top_level() -> None:
    tree = build_file_tree(
        [
            "src/index.ts",
            "src/util.ts",
            "tests/index.test.ts",
            "readme.md",
            "package.json",
            "docs/guide.md",
        ]
    )

    assert tree.total_files == 6
    assert tree.groups["source"] == 2
    assert tree.groups["tests"] == 1
    assert tree.groups["docs"] == 2
    assert tree.groups["config"] == 1
    assert [entry.path for entry in tree.top_dirs] == [
        "docs/",
        "src/",
        "tests/",
        "package.json",
        "readme.md",
    ]
    assert tree.top_dirs[1].label == "Source code"
    assert tree.highlights == ["33% source code", "17% tests", "2 doc files"]


def test_build_file_tree_flags_missing_tests_and_heavy_config() -> None:
    tree = build_file_tree(["src/a.py", ".flake8", "setup.cfg", "tox.ini"])

    assert tree.highlights == [
        "25% source code",
        "0% tests",
        "75% config (heavy)",
        "No test files detected",
    ]


def test_build_file_tree_empty() -> None:
    tree = build_file_tree([])

    assert tree.total_files == 0
    assert tree.top_dirs == []
    assert tree.highlights == []
    assert tree.to_dict()["groups"]["other"] == 0
