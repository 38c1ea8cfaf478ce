"""Sized box-drawing tree of the selected files."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final, Literal, Union

from scopeflat.paths import to_posix

logger = logging.getLogger(__name__)

_SIZE_UNITS: Final = ("B", "KB", "MB", "GB", "TB")

NO_FILES_MESSAGE: Final = "No files to include."


@dataclass(frozen=True, slots=True)
class Glyphs:
    """Box-drawing character set for tree rendering."""

    branch: str  # ├──
    last_branch: str  # └──
    vertical: str  # │
    space: str  # (indent)


UNICODE_GLYPHS = Glyphs(
    branch="├── ",
    last_branch="└── ",
    vertical="│   ",
    space="    ",
)

ASCII_GLYPHS = Glyphs(
    branch="|-- ",
    last_branch="\\-- ",
    vertical="|   ",
    space="    ",
)


@dataclass(frozen=True, slots=True)
class TreeOptions:
    """Options for the tree formatter.

    Attributes:
        charset: Output charset, ``unicode`` or ``ascii``.
        cwd: Directory whose name labels the root when the files share no
            common directory. Defaults to the process working directory.
    """

    charset: Literal["unicode", "ascii"] = "unicode"
    cwd: str | None = None


# Directory name -> child node; file name -> original file path.
_Node = dict[str, Union["_Node", str]]


def format_size(num_bytes: int) -> str:
    """Return *num_bytes* as a short human-readable size.

    Args:
        num_bytes: Size in bytes.

    Returns:
        str: e.g. ``0 B``, ``512 B``, ``1.5 KB``, ``2 MB``.
    """
    if num_bytes <= 0:
        return "0 B"
    exponent = 0
    while exponent < len(_SIZE_UNITS) - 1 and num_bytes >= 1024 ** (exponent + 1):
        exponent += 1
    value = round(num_bytes / 1024**exponent, 1)
    return f"{value:g} {_SIZE_UNITS[exponent]}"


def _common_dir_parts(split_paths: list[list[str]]) -> list[str]:
    common = split_paths[0][:-1]
    for parts in split_paths[1:]:
        dirs = parts[:-1]
        i = 0
        while i < len(common) and i < len(dirs) and common[i] == dirs[i]:
            i += 1
        common = common[:i]
    return common


def _build_nodes(
    files: Sequence[str], split_paths: list[list[str]], depth: int
) -> _Node:
    root: _Node = {}
    for original, parts in zip(files, split_paths):
        rel_parts = parts[depth:]
        node = root
        for part in rel_parts[:-1]:
            child = node.setdefault(part, {})
            if isinstance(child, str):
                break
            node = child
        else:
            node[rel_parts[-1]] = original
    return root


def _file_size(path: str) -> int | None:
    try:
        return os.stat(path).st_size
    except OSError:
        logger.debug("Cannot stat: %s", path)
        return None


def _node_size(node: _Node, sizes: dict[str, int | None]) -> int:
    total = 0
    for child in node.values():
        if isinstance(child, str):
            total += sizes.get(child) or 0
        else:
            total += _node_size(child, sizes)
    return total


def format_tree(files: Sequence[str], options: TreeOptions | None = None) -> str:
    """Render *files* as a sized box-drawing tree.

    The root is the deepest directory shared by every file. Entries are
    sorted by name and carry their size; a directory's size is the sum of
    the selected files below it.

    Args:
        files: Final file list.
        options: Tree rendering options.

    Returns:
        str: Root line plus one line per entry, newline terminated, or
        ``NO_FILES_MESSAGE`` when *files* is empty.
    """
    if not files:
        return NO_FILES_MESSAGE

    opts = options or TreeOptions()
    glyphs = ASCII_GLYPHS if opts.charset == "ascii" else UNICODE_GLYPHS

    split_paths = [to_posix(f).split("/") for f in files]
    common = _common_dir_parts(split_paths)
    root_name = common[-1] if common and common[-1] else ""
    if not root_name:
        root_name = os.path.basename(os.path.abspath(opts.cwd or os.getcwd()))

    tree = _build_nodes(files, split_paths, len(common))
    sizes = {f: _file_size(f) for f in files}

    lines: list[str] = [f"{root_name} - {format_size(_node_size(tree, sizes))}"]

    # Iterative DFS using an explicit stack.
    # Stack items: (name, node, prefix, is_last_sibling)
    stack: list[tuple[str, _Node | str, str, bool]] = []
    names = sorted(tree)
    for i in range(len(names) - 1, -1, -1):
        stack.append((names[i], tree[names[i]], "", i == len(names) - 1))

    while stack:
        name, node, prefix, is_last = stack.pop()
        connector = glyphs.last_branch if is_last else glyphs.branch

        if isinstance(node, str):
            size = sizes.get(node)
            display_name = name if size is None else f"{name} - {format_size(size)}"
            lines.append(f"{prefix}{connector}{display_name}")
            continue

        dir_size = format_size(_node_size(node, sizes))
        lines.append(f"{prefix}{connector}{name} - {dir_size}")

        next_prefix = prefix + (glyphs.space if is_last else glyphs.vertical)
        child_names = sorted(node)
        for j in range(len(child_names) - 1, -1, -1):
            stack.append(
                (
                    child_names[j],
                    node[child_names[j]],
                    next_prefix,
                    j == len(child_names) - 1,
                )
            )

    return "\n".join(lines) + "\n"
