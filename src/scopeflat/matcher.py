"""Glob matching for rule-file and ignore-file patterns.

The matcher is permissive: rule files mix absolute paths,
shell globs and gitignore idioms, so a pattern is tried several ways and
matches if any of them succeeds. Both sides are compared with ``/``
separators regardless of platform.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Final, Literal

from scopeflat.paths import to_posix

_GLOB_CHARS: Final = frozenset("*?")

# One path segment's worth of characters.
_SEGMENT_STAR: Final = "[^/]*"
_ANY: Final = ".*"

_Mode = Literal["full", "suffix", "anywhere"]


def has_glob(text: str) -> bool:
    """Return whether *text* contains a ``*`` or ``?`` wildcard."""
    return any(c in _GLOB_CHARS for c in text)


def _translate(pattern: str, star: str) -> str:
    """Translate a glob into a regex body.

    ``**`` always becomes ``.*``; a lone ``*`` becomes *star*; ``?`` is one
    non-separator character. Everything else is escaped literally.
    """
    out: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**", i):
            out.append(_ANY)
            i += 2
            continue
        ch = pattern[i]
        if ch == "*":
            out.append(star)
        elif ch == "?":
            out.append("[^/]")
        else:
            out.append(re.escape(ch))
        i += 1
    return "".join(out)


@lru_cache(maxsize=1024)
def _compile(pattern: str, mode: _Mode) -> re.Pattern[str]:
    if mode == "suffix":
        return re.compile(_translate(pattern, _SEGMENT_STAR) + r"\Z", re.DOTALL)
    if mode == "anywhere":
        return re.compile(_translate(pattern, _ANY), re.DOTALL)
    return re.compile(_translate(pattern, _SEGMENT_STAR), re.DOTALL)


def matches(path: str, pattern: str) -> bool:
    """Return whether *path* matches the glob *pattern*.

    Strategies, by pattern shape:

    - ``**/sub``: *sub* must match a suffix of the path.
    - ``**sub``: *sub* may occur anywhere in the path (``*`` inside it
      crosses separators too).
    - anything else: full match, or, for a pattern ending in ``*``, a plain
      prefix match on the text before that ``*``.

    Args:
        path: Candidate path, any separator style.
        pattern: Glob pattern, any separator style.

    Returns:
        bool: ``True`` when any applicable strategy matches.
    """
    candidate = to_posix(path)
    pat = to_posix(pattern)

    if pat.startswith("**/"):
        return _compile(pat[3:], "suffix").search(candidate) is not None

    if pat.startswith("**"):
        return _compile(pat[2:], "anywhere").search(candidate) is not None

    if _compile(pat, "full").fullmatch(candidate) is not None:
        return True

    if pat.endswith("*"):
        return candidate.startswith(pat[:-1])

    return False
