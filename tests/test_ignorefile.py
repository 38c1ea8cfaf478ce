"""Tests for scopeflat.ignorefile: ignore-file import and matching."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from scopeflat.ignorefile import (
    IgnorePattern,
    IgnorePrecedence,
    IgnoreRules,
    PatternKind,
    load_ignore_patterns,
    matches_ignore_patterns,
    parse_ignore_pattern,
)

BASE = os.path.abspath(os.sep + "base")


def _patterns(*lines: str) -> list[IgnorePattern]:
    return [parse_ignore_pattern(line) for line in lines]


def _ignored(rel: str, *lines: str) -> bool:
    """Return the first-match verdict for *rel* under BASE."""
    return matches_ignore_patterns(os.path.join(BASE, rel), _patterns(*lines), BASE)


class TestParseIgnorePattern:
    @pytest.mark.parametrize(
        ("line", "body", "kind"),
        [
            ("*.log", "*.log", PatternKind.PLAIN),
            ("!keep.log", "keep.log", PatternKind.NEGATED),
            ("/dist", "dist", PatternKind.ANCHORED),
            ("!/dist/keep.js", "dist/keep.js", PatternKind.NEGATED_ANCHORED),
            ("build/", "build/", PatternKind.PLAIN),
            ("/out/", "out/", PatternKind.ANCHORED),
            ("  spaced.txt  ", "spaced.txt", PatternKind.PLAIN),
        ],
    )
    def test_markers(self, line: str, body: str, kind: PatternKind) -> None:
        pattern = parse_ignore_pattern(line)
        assert pattern.body == body
        assert pattern.kind is kind
        assert pattern.raw == line.strip()


class TestLoadIgnorePatterns:
    def test_missing_file_returns_empty(self, tmp_path: Path) -> None:
        assert load_ignore_patterns(tmp_path / ".nope") == []

    def test_directory_returns_empty(self, tmp_path: Path) -> None:
        assert load_ignore_patterns(tmp_path) == []

    def test_skips_comments_and_blank_lines(self, tmp_path: Path) -> None:
        ignore = tmp_path / ".gitignore"
        ignore.write_text("# comment\n\n*.log\r\n   \n  # indented comment\n!keep.log\n")
        patterns = load_ignore_patterns(ignore)
        assert [p.raw for p in patterns] == ["*.log", "!keep.log"]

    def test_preserves_file_order(self, tmp_path: Path) -> None:
        ignore = tmp_path / ".gitignore"
        ignore.write_text("c\nb\na\n")
        assert [p.body for p in load_ignore_patterns(ignore)] == ["c", "b", "a"]


class TestMatchesIgnorePatterns:
    @pytest.mark.parametrize(
        ("rel", "lines", "expected"),
        [
            # full relative path
            ("src/app.log", ("src/app.log",), True),
            # single segment anywhere
            ("logs/deep/app.log", ("*.log",), True),
            ("src/main.py", ("*.log",), False),
            ("a/node_modules/x.js", ("node_modules",), True),
            # leading directory paths are not tested on their own
            ("src/gen/x.py", ("src/gen",), False),
            ("src/gen/x.py", ("src/gen/*",), True),
            # anchored: whole relative path only
            ("dist", ("/dist",), True),
            ("dist/a.js", ("/dist",), False),
            ("dist/a.js", ("/dist/*",), True),
            ("pkg/dist/a.js", ("/dist/*",), False),
            ("todo.txt", ("/todo.txt",), True),
            ("docs/todo.txt", ("/todo.txt",), False),
            # a trailing slash is part of the glob and never matches a file
            ("build/out.js", ("build/",), False),
            ("lib/build/out.js", ("build/",), False),
            ("build", ("build/",), False),
            # no patterns
            ("anything.txt", (), False),
        ],
    )
    def test_matching(self, rel: str, lines: tuple[str, ...], expected: bool) -> None:
        assert _ignored(rel, *lines) is expected

    def test_negation_keeps_file(self) -> None:
        assert _ignored("keep.log", "!keep.log", "*.log") is False
        assert _ignored("other.log", "!keep.log", "*.log") is True

    def test_first_match_wins(self) -> None:
        # A later negation cannot rescue a file an earlier pattern ignored.
        assert _ignored("build/keep.txt", "build", "!build/keep.txt") is True
        assert _ignored("build/other.txt", "build", "!build/keep.txt") is True

    def test_trailing_slash_line_does_not_shadow_later_negation(self) -> None:
        # "build/" matches no file path, so the negation is the first match.
        assert _ignored("build/keep.txt", "build/", "!build/keep.txt") is False
        assert _ignored("build/other.txt", "build/", "!build/keep.txt") is False

    def test_first_match_wins_for_negation_too(self) -> None:
        assert _ignored("build/keep.txt", "!build/keep.txt", "build/") is False

    def test_nested_path_segments(self) -> None:
        patterns = _patterns("*.log")
        assert matches_ignore_patterns(
            os.path.join(BASE, "a", "b.log"), patterns, BASE
        )


class TestIgnoreRules:
    def test_empty_rules_are_falsy(self) -> None:
        assert not IgnoreRules([], BASE)
        assert IgnoreRules(_patterns("*.log"), BASE)

    def test_first_precedence_is_default(self) -> None:
        rules = IgnoreRules(_patterns("build", "!build/keep.txt"), BASE)
        assert rules.is_ignored(os.path.join(BASE, "build", "keep.txt")) is True

    def test_first_precedence_keeps_file_under_trailing_slash_line(self) -> None:
        rules = IgnoreRules(_patterns("build/", "!build/keep.txt"), BASE)
        assert rules.is_ignored(os.path.join(BASE, "build", "keep.txt")) is False
        assert rules.is_ignored(os.path.join(BASE, "build", "out.js")) is False

    def test_last_precedence_follows_gitignore(self) -> None:
        rules = IgnoreRules(
            _patterns("build/", "!build/keep.txt"), BASE, IgnorePrecedence.LAST
        )
        assert rules.is_ignored(os.path.join(BASE, "build", "keep.txt")) is False
        assert rules.is_ignored(os.path.join(BASE, "build", "other.txt")) is True
        assert rules.is_ignored(os.path.join(BASE, "src", "a.js")) is False

    def test_precedence_accepts_string(self) -> None:
        rules = IgnoreRules(_patterns("*.log"), BASE, "last")  # type: ignore[arg-type]
        assert rules.is_ignored(os.path.join(BASE, "x.log")) is True
