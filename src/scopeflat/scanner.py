"""Recursive file walker using os.scandir with an explicit stack (DFS)."""

from __future__ import annotations

import logging
import os
from typing import Final

from scopeflat.report import Report

logger = logging.getLogger(__name__)

# Never entered, whatever the rules say.
ALWAYS_SKIPPED_DIRS: Final[frozenset[str]] = frozenset({"node_modules", ".git"})


def walk_files(root: str, report: Report | None = None) -> list[str]:
    """Return every file below *root*, depth first.

    Files come back in directory-listing order; callers that need a stable
    order sort the result themselves. Directories listed in
    ``ALWAYS_SKIPPED_DIRS`` are pruned. A directory that cannot be read is
    skipped with a warning and the walk carries on with its siblings.
    Symlinks to directories are not followed, so a link cycle cannot loop
    the walk; symlinks to files are returned like files.

    Args:
        root: Directory to walk.
        report: Optional run report that receives warnings.

    Returns:
        list[str]: Paths joined onto *root*, so absolute when *root* is.
    """
    result: list[str] = []

    # Pending directories. Children are pushed in reverse so the first
    # listed subdirectory is walked first.
    stack: list[str] = [root]

    while stack:
        current_dir = stack.pop()

        try:
            with os.scandir(current_dir) as it:
                raw_entries = list(it)
        except OSError as exc:
            message = f"Could not read directory {current_dir}: {exc.strerror or exc}"
            logger.warning(message)
            if report is not None:
                report.warn(message)
            continue

        child_dirs: list[str] = []

        for dir_entry in raw_entries:
            try:
                is_dir = dir_entry.is_dir(follow_symlinks=False)
            except OSError:
                logger.debug("Cannot stat: %s", dir_entry.path)
                continue

            if is_dir:
                if dir_entry.name in ALWAYS_SKIPPED_DIRS:
                    continue
                child_dirs.append(dir_entry.path)
            elif dir_entry.is_symlink() and dir_entry.is_dir():
                # Symlinked directories are not followed.
                logger.debug("Skipping directory symlink: %s", dir_entry.path)
            else:
                result.append(dir_entry.path)

        for child in reversed(child_dirs):
            stack.append(child)

    return result
