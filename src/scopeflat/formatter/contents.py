"""File contents aggregation and final document assembly."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from scopeflat.paths import to_posix
from scopeflat.report import Report

logger = logging.getLogger(__name__)

_MIB: Final = 1024 * 1024

_FENCE: Final = "```"
# A zero-width space keeps the text readable but stops it closing a fence.
_ESCAPED_FENCE: Final = "``\u200b`"

# fmt: off
BINARY_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {
        # images
        ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".ico", ".svg", ".webp",
        # audio / video
        ".mp3", ".wav", ".ogg", ".mp4", ".avi", ".mov", ".wmv", ".flv",
        # archives
        ".zip", ".tar", ".gz", ".rar", ".7z",
        # executables and libraries
        ".exe", ".dll", ".so", ".dylib", ".o", ".a", ".node",
        # documents
        ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
        # fonts
        ".ttf", ".otf", ".woff", ".woff2", ".eot",
        # databases
        ".sqlite", ".db",
        # bytecode
        ".jar", ".class", ".pyc", ".pyo",
    }
)
# fmt: on

# Keys are extensions, or full lower-cased names for dotfiles.
LANGUAGE_MAP: Final[dict[str, str]] = {
    ".ts": "typescript",
    ".js": "javascript",
    ".tsx": "tsx",
    ".jsx": "jsx",
    ".json": "json",
    ".html": "html",
    ".css": "css",
    ".scss": "scss",
    ".less": "less",
    ".md": "markdown",
    ".mdx": "mdx",
    ".astro": "astro",
    ".java": "java",
    ".py": "python",
    ".rb": "ruby",
    ".php": "php",
    ".go": "go",
    ".rs": "rust",
    ".c": "c",
    ".cpp": "cpp",
    ".cs": "csharp",
    ".sh": "shell",
    ".yml": "yaml",
    ".yaml": "yaml",
    ".xml": "xml",
    ".sql": "sql",
    ".graphql": "graphql",
    ".svelte": "svelte",
    ".vue": "vue",
    ".env": "shell",
    ".gitignore": "text",
    ".dockerignore": "text",
}


@dataclass(frozen=True, slots=True)
class Limits:
    """Size limits for content aggregation.

    Attributes:
        max_file_size: Files larger than this are skipped.
        max_total_size: Aggregation stops before the text total passes this.
        warn_file_size: Files larger than this are included with a note.
    """

    max_file_size: int = 50 * _MIB
    max_total_size: int = 500 * _MIB
    warn_file_size: int = 10 * _MIB


def is_binary(path: str) -> bool:
    """Return whether *path* has a known binary extension."""
    return os.path.splitext(path)[1].lower() in BINARY_EXTENSIONS


def language_for(path: str) -> str:
    """Return the code fence language tag for *path*, or ``""``."""
    ext = os.path.splitext(path)[1].lower()
    if ext in LANGUAGE_MAP:
        return LANGUAGE_MAP[ext]
    return LANGUAGE_MAP.get(os.path.basename(path).lower(), "")


def escape_fences(text: str) -> str:
    """Neutralise every literal triple backtick in *text*."""
    return text.replace(_FENCE, _ESCAPED_FENCE)


def format_mb(num_bytes: int) -> str:
    """Return *num_bytes* in mebibytes with two decimals, e.g. ``1.50MB``."""
    return f"{num_bytes / _MIB:.2f}MB"


def _relative_display(path: str, cwd: str) -> str:
    try:
        rel = os.path.relpath(path, cwd)
    except ValueError:
        rel = path
    return to_posix(rel)


def _file_block(rel: str, body: str) -> str:
    return f"--- FILE: {rel} ---\n{body}--- END FILE: {rel} ---\n\n"


def _warn(report: Report, message: str) -> None:
    logger.warning(message)
    report.warn(message)


def aggregate_contents(
    files: Sequence[str],
    cwd: str,
    report: Report,
    limits: Limits | None = None,
) -> str:
    """Concatenate the contents of *files* between per-file delimiters.

    Text files are wrapped in a code fence tagged with their language.
    Binary files get a placeholder line. Files that cannot be read or are
    too large are skipped and recorded on *report*; once the running total
    would pass ``max_total_size`` the current and all remaining files are
    recorded as skipped and aggregation stops.

    Args:
        files: Final file list, in output order.
        cwd: Directory that delimiter paths are shown relative to.
        report: Run report updated with counters and skips.
        limits: Size limits. Defaults to ``Limits()``.

    Returns:
        str: Concatenated file blocks.
    """
    lim = limits or Limits()
    blocks: list[str] = []

    for index, path in enumerate(files):
        try:
            st = os.stat(path)
        except OSError as exc:
            _warn(report, f"Could not stat {path}: {exc.strerror or exc}")
            report.skip(path, "stat error")
            continue

        if not stat.S_ISREG(st.st_mode):
            _warn(report, f"Skipping non-file: {path}")
            report.skip(path, "not a regular file")
            continue

        size = st.st_size

        if report.total_size + size > lim.max_total_size:
            _warn(report, "Reached total size limit. Stopping processing.")
            for remaining in files[index:]:
                report.skip(remaining, "total size limit reached")
            break

        if size > lim.max_file_size:
            _warn(report, f"File too large ({format_mb(size)}): {path}")
            report.skip(path, format_mb(size))
            continue

        if size > lim.warn_file_size:
            logger.info("Including large file (%s): %s", format_mb(size), path)

        rel = _relative_display(path, cwd)

        if is_binary(path):
            blocks.append(
                _file_block(rel, f"[Binary file excluded - {size / 1024:.2f}KB]\n")
            )
            report.processed += 1
            continue

        try:
            with open(path, encoding="utf-8", errors="replace", newline="") as fh:
                content = fh.read()
        except OSError as exc:
            _warn(report, f"Could not read file {path}: {exc.strerror or exc}")
            report.skip(path, "read error")
            continue

        fence = _FENCE + language_for(path)
        body = f"{fence}\n{escape_fences(content)}\n{_FENCE}\n"
        blocks.append(_file_block(rel, body))
        report.total_size += size
        report.processed += 1

    return "".join(blocks)


def build_document(tree: str, contents: str) -> str:
    """Assemble the final output document."""
    return f"--- PROJECT STRUCTURE ---\n\n{tree}\n--- FILE CONTENTS ---\n\n{contents}"
