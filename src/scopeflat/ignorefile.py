"""Ignore-file import and matching.

Lines of a gitignore-style file are parsed once into ``IgnorePattern``
values; the ``!`` (negate) and leading ``/`` (anchor) markers are read here
and nowhere else.

Two precedence rules are supported. ``FIRST`` (the default) walks the
patterns in file order and lets the first match decide. ``LAST`` is the
usual gitignore rule where the last match wins, evaluated with
``pathspec.GitIgnoreSpec``.
"""

from __future__ import annotations

import enum
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from pathspec import GitIgnoreSpec

from scopeflat.matcher import matches
from scopeflat.paths import to_posix
from scopeflat.report import Report

logger = logging.getLogger(__name__)


class PatternKind(enum.Enum):
    PLAIN = "plain"
    NEGATED = "negated"
    ANCHORED = "anchored"
    NEGATED_ANCHORED = "negated-anchored"


class IgnorePrecedence(str, enum.Enum):
    FIRST = "first"
    LAST = "last"


@dataclass(frozen=True, slots=True)
class IgnorePattern:
    """One parsed ignore-file line.

    Attributes:
        raw: The trimmed line as written.
        body: Glob left after removing the markers.
        negated: Line started with ``!``; a match means "keep".
        anchored: Body started with ``/``; matched against the whole path
            relative to the base directory, never a single segment.
    """

    raw: str
    body: str
    negated: bool = False
    anchored: bool = False

    @property
    def kind(self) -> PatternKind:
        if self.negated and self.anchored:
            return PatternKind.NEGATED_ANCHORED
        if self.negated:
            return PatternKind.NEGATED
        if self.anchored:
            return PatternKind.ANCHORED
        return PatternKind.PLAIN


def parse_ignore_pattern(line: str) -> IgnorePattern:
    """Parse a single non-comment ignore-file line."""
    raw = line.strip()
    text = raw

    negated = text.startswith("!")
    if negated:
        text = text[1:]

    anchored = text.startswith("/")
    if anchored:
        text = text[1:]

    return IgnorePattern(
        raw=raw,
        body=text,
        negated=negated,
        anchored=anchored,
    )


def load_ignore_patterns(
    path: str | Path, report: Report | None = None
) -> list[IgnorePattern]:
    """Read an ignore file into patterns, in file order.

    Blank lines and ``#`` comments are skipped. A file that does not exist
    yields no patterns; that is not an error.

    Args:
        path: Ignore file location.
        report: Optional run report that receives read warnings.

    Returns:
        list[IgnorePattern]: Parsed patterns.
    """
    ignore_path = Path(path)
    if not ignore_path.is_file():
        logger.debug("Ignore file not found: %s", ignore_path)
        return []

    try:
        lines = ignore_path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        message = f"Could not read ignore file {ignore_path}: {exc}"
        logger.warning(message)
        if report is not None:
            report.warn(message)
        return []

    patterns: list[IgnorePattern] = []
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        patterns.append(parse_ignore_pattern(stripped))
    return patterns


def _relative_posix(file_path: str, base_path: str) -> str:
    try:
        rel = os.path.relpath(file_path, base_path)
    except ValueError:
        # Different drives on Windows.
        rel = file_path
    return to_posix(rel)


def _pattern_matches(rel: str, parts: list[str], pattern: IgnorePattern) -> bool:
    targets = [rel] if pattern.anchored else [rel, *parts]
    return any(matches(target, pattern.body) for target in targets)


def matches_ignore_patterns(
    file_path: str,
    patterns: Sequence[IgnorePattern],
    base_path: str,
) -> bool:
    """Return whether *file_path* is ignored, first matching pattern wins.

    The path is made relative to *base_path*. A pattern matches when the
    glob matches the whole relative path or any single segment of it.
    Anchored patterns skip the single-segment test. The body is used as
    written, so a trailing ``/`` never matches a file path. A matching
    negated pattern returns ``False`` straight away, even if a later plain
    pattern would match too.

    Args:
        file_path: Candidate file.
        patterns: Patterns in file order.
        base_path: Directory the patterns are relative to.

    Returns:
        bool: ``True`` when the first matching pattern is not negated.
    """
    rel = _relative_posix(file_path, base_path)
    parts = rel.split("/")

    for pattern in patterns:
        if _pattern_matches(rel, parts, pattern):
            return not pattern.negated
    return False


class IgnoreRules:
    """Compiled ignore patterns bound to a base directory and precedence."""

    def __init__(
        self,
        patterns: Sequence[IgnorePattern],
        base_path: str,
        precedence: IgnorePrecedence = IgnorePrecedence.FIRST,
    ) -> None:
        """Initialize ignore rules.

        Args:
            patterns: Parsed patterns in file order.
            base_path: Directory the patterns are relative to.
            precedence: Which matching pattern decides the verdict.
        """
        self._patterns: list[IgnorePattern] = list(patterns)
        self._base_path = base_path
        self._precedence = IgnorePrecedence(precedence)
        self._spec: GitIgnoreSpec | None = None
        if self._precedence is IgnorePrecedence.LAST:
            self._spec = GitIgnoreSpec.from_lines([p.raw for p in self._patterns])

    def __bool__(self) -> bool:
        return bool(self._patterns)

    def is_ignored(self, file_path: str) -> bool:
        if self._spec is not None:
            return self._spec.match_file(_relative_posix(file_path, self._base_path))
        return matches_ignore_patterns(file_path, self._patterns, self._base_path)
