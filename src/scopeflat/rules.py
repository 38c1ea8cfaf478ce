"""Rule file parsing.

Rule file syntax, one rule per line::

    # comment
    ++ ./src                      include a file, directory or glob
    -- **/*.test.js               exclude
    --ignorefile:.gitignore       import an ignore file's patterns
    --ignoreextension:.png        drop an extension (case-insensitive)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from scopeflat import ScopeflatError

logger = logging.getLogger(__name__)

DEFAULT_RULES_FILE: Final = "paths.txt"

_IGNORE_FILE_PREFIX: Final = "--ignorefile:"
_IGNORE_EXT_PREFIX: Final = "--ignoreextension:"
_INCLUDE_PREFIX: Final = "++"
_EXCLUDE_PREFIX: Final = "--"
_QUOTES: Final = "'\""


@dataclass(frozen=True, slots=True)
class RuleSet:
    """Parsed rule file.

    Attributes:
        include: Include patterns in file order.
        exclude: Exclude patterns in file order.
        ignore_files: Ignore-file references in file order.
        ignore_extensions: Lower-cased extensions, each with a leading dot.
    """

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    ignore_files: tuple[str, ...] = ()
    ignore_extensions: tuple[str, ...] = ()


def _normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


def parse_rules(text: str) -> RuleSet:
    """Parse rule file text into a ``RuleSet``.

    The two ``--ignore...`` directives are checked before the plain ``--``
    exclude prefix. Lines matching none of the prefixes are ignored.

    Args:
        text: Full rule file content.

    Returns:
        RuleSet: Parsed rules.
    """
    include: list[str] = []
    exclude: list[str] = []
    ignore_files: list[str] = []
    ignore_extensions: list[str] = []

    for line in text.splitlines():
        clean = line.strip()
        if not clean or clean.startswith("#"):
            continue

        if clean.startswith(_IGNORE_FILE_PREFIX):
            ref = clean[len(_IGNORE_FILE_PREFIX) :].strip()
            if ref:
                ignore_files.append(ref)
        elif clean.startswith(_IGNORE_EXT_PREFIX):
            ext = _normalize_extension(clean[len(_IGNORE_EXT_PREFIX) :])
            if ext:
                ignore_extensions.append(ext)
        elif clean.startswith(_INCLUDE_PREFIX):
            pattern = clean[len(_INCLUDE_PREFIX) :].strip().strip(_QUOTES)
            if pattern:
                include.append(pattern)
        elif clean.startswith(_EXCLUDE_PREFIX):
            pattern = clean[len(_EXCLUDE_PREFIX) :].strip().strip(_QUOTES)
            if pattern:
                exclude.append(pattern)
        else:
            logger.debug("Ignoring unrecognized rule line: %s", clean)

    return RuleSet(
        include=tuple(include),
        exclude=tuple(exclude),
        ignore_files=tuple(ignore_files),
        ignore_extensions=tuple(ignore_extensions),
    )


def load_rules(path: str | Path) -> RuleSet:
    """Read and parse a rule file.

    Args:
        path: Rule file location.

    Returns:
        RuleSet: Parsed rules.

    Raises:
        ScopeflatError: If the file is missing, not a file, or unreadable.
    """
    rules_path = Path(path)
    if not rules_path.exists():
        raise ScopeflatError(f"Input file not found at '{path}'")
    if not rules_path.is_file():
        raise ScopeflatError(f"'{path}' is not a file")
    try:
        text = rules_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ScopeflatError(f"Could not read rule file '{path}': {exc}") from exc
    return parse_rules(text)
