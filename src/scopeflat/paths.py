"""Path spelling conversion between Windows drive-letter and WSL mount forms."""

from __future__ import annotations

import os
import re
import sys
from typing import Final

_WSL_MOUNT_RE: Final = re.compile(r"^/mnt/([a-z])/(.*)$", re.DOTALL)
_DRIVE_RE: Final = re.compile(r"^([A-Za-z]):\\(.*)$", re.DOTALL)


def to_native_path(path: str, platform: str | None = None) -> str:
    """Rewrite *path* into the spelling native to *platform*.

    On ``win32`` a mount path ``/mnt/c/rest`` becomes ``C:\\rest``. On any
    other platform a drive path ``C:\\rest`` becomes ``/mnt/c/rest``.
    Anything that does not look like the foreign spelling is returned
    unchanged; a bad path then simply fails the existence check downstream.

    Args:
        path: Path as written in the rule file.
        platform: Target platform name. Defaults to ``sys.platform``.

    Returns:
        str: Native path string.
    """
    target = platform if platform is not None else sys.platform

    if target == "win32":
        match = _WSL_MOUNT_RE.match(path)
        if match is None:
            return path
        drive, rest = match.groups()
        return drive.upper() + ":\\" + rest.replace("/", "\\")

    match = _DRIVE_RE.match(path)
    if match is None:
        return path
    drive, rest = match.groups()
    return f"/mnt/{drive.lower()}/" + to_posix(rest)


def is_absolute_pattern(pattern: str) -> bool:
    """Return whether *pattern* is rooted in either path spelling."""
    return os.path.isabs(pattern) or _DRIVE_RE.match(pattern) is not None


def to_posix(path: str) -> str:
    """Return *path* with every backslash turned into a forward slash."""
    return path.replace("\\", "/")
