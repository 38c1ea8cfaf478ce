"""Selection engine: turn a ``RuleSet`` into the final sorted file list.

Include resolution builds a candidate set, then three filter passes run in
a fixed order (exclude patterns, ignore files, extensions). Each pass only
removes candidates. Files found by a directory walk and files found by glob
expansion go through the same passes.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable

from scopeflat.ignorefile import (
    IgnorePattern,
    IgnorePrecedence,
    IgnoreRules,
    load_ignore_patterns,
)
from scopeflat.matcher import has_glob, matches
from scopeflat.paths import is_absolute_pattern, to_native_path
from scopeflat.report import Report
from scopeflat.rules import RuleSet
from scopeflat.scanner import walk_files

logger = logging.getLogger(__name__)


def _absolute(pattern: str, cwd: str) -> str:
    if is_absolute_pattern(pattern):
        return pattern
    return os.path.abspath(os.path.join(cwd, pattern))


def _native_absolute(pattern: str, cwd: str) -> str:
    return os.path.normpath(to_native_path(_absolute(pattern, cwd)))


def resolve_includes(
    patterns: Iterable[str], cwd: str, report: Report | None = None
) -> set[str]:
    """Resolve include patterns into the candidate set.

    Each pattern is made absolute and native, then:

    - an existing file is added;
    - an existing directory is walked and every file added;
    - otherwise, if the last segment has a wildcard, the parent directory
      is walked and every file matching the pattern added.

    Anything else contributes nothing.

    Args:
        patterns: Include patterns in rule-file order.
        cwd: Working directory for relative patterns.
        report: Optional run report for walker warnings.

    Returns:
        set[str]: Candidate file paths.
    """
    candidates: set[str] = set()

    for pattern in patterns:
        native = _native_absolute(pattern, cwd)

        if os.path.isfile(native):
            candidates.add(native)
        elif os.path.isdir(native):
            candidates.update(walk_files(native, report))
        elif has_glob(os.path.basename(native)):
            parent = os.path.dirname(native)
            if os.path.isdir(parent):
                candidates.update(
                    f for f in walk_files(parent, report) if matches(f, native)
                )
            else:
                logger.debug("Glob parent does not exist for include: %s", pattern)
        else:
            logger.debug("Include matched nothing: %s", pattern)

    return candidates


def _exclude_targets(patterns: Iterable[str], cwd: str) -> list[str]:
    """Turn exclude patterns into the strings actually matched.

    ``**`` patterns are used as written, absolute ones are converted to the
    native spelling and relative ones resolved against *cwd*.
    """
    targets: list[str] = []
    for pattern in patterns:
        if pattern.startswith("**"):
            targets.append(pattern)
            continue
        if is_absolute_pattern(pattern):
            targets.append(to_native_path(pattern))
        else:
            targets.append(os.path.abspath(os.path.join(cwd, pattern)))
    return targets


def _load_ignore_rules(
    refs: Iterable[str],
    cwd: str,
    precedence: IgnorePrecedence,
    report: Report | None,
) -> IgnoreRules:
    patterns: list[IgnorePattern] = []
    for ref in refs:
        patterns.extend(load_ignore_patterns(_native_absolute(ref, cwd), report))
    return IgnoreRules(patterns, cwd, precedence)


def select_files(
    rules: RuleSet,
    cwd: str | None = None,
    report: Report | None = None,
    precedence: IgnorePrecedence = IgnorePrecedence.FIRST,
) -> list[str]:
    """Select the files described by *rules*.

    Args:
        rules: Parsed rule file.
        cwd: Working directory that relative patterns and ignore-file
            patterns are resolved against. Defaults to ``os.getcwd()``.
        report: Optional run report for warnings.
        precedence: Ignore-file precedence rule.

    Returns:
        list[str]: Absolute native paths, sorted, without duplicates.
    """
    base = os.path.abspath(cwd if cwd is not None else os.getcwd())

    candidates = resolve_includes(rules.include, base, report)
    logger.debug("Include resolution: %d candidates", len(candidates))

    if rules.exclude:
        targets = _exclude_targets(rules.exclude, base)
        candidates = {
            f for f in candidates if not any(matches(f, t) for t in targets)
        }
        logger.debug("After exclude patterns: %d candidates", len(candidates))

    if rules.ignore_files:
        ignore = _load_ignore_rules(rules.ignore_files, base, precedence, report)
        if ignore:
            candidates = {f for f in candidates if not ignore.is_ignored(f)}
        logger.debug("After ignore files: %d candidates", len(candidates))

    if rules.ignore_extensions:
        blocked = frozenset(rules.ignore_extensions)
        candidates = {
            f for f in candidates if os.path.splitext(f)[1].lower() not in blocked
        }
        logger.debug("After extension filter: %d candidates", len(candidates))

    return sorted(candidates)
