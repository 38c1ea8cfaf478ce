"""CLI entry point for scopeflat; I/O boundary only."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from scopeflat import ScopeflatError, __version__
from scopeflat.formatter.contents import aggregate_contents, build_document, format_mb
from scopeflat.formatter.tree import TreeOptions, format_tree
from scopeflat.ignorefile import IgnorePrecedence
from scopeflat.paths import to_native_path
from scopeflat.report import Report
from scopeflat.rules import DEFAULT_RULES_FILE, load_rules
from scopeflat.selector import select_files

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FILE = "scope.txt"


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser for the ``scopeflat`` command.
    """
    parser = argparse.ArgumentParser(
        prog="scopeflat",
        description="Flatten the files selected by a rule file into one text document",
    )
    parser.add_argument(
        "rules",
        nargs="?",
        default=DEFAULT_RULES_FILE,
        help=f"Rule file listing include/exclude patterns (default: {DEFAULT_RULES_FILE})",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=DEFAULT_OUTPUT_FILE,
        dest="output_file",
        help=f"Output file (default: {DEFAULT_OUTPUT_FILE})",
    )
    parser.add_argument(
        "-C",
        "--directory",
        type=str,
        default=None,
        help="Working directory that relative paths are resolved against "
        "(default: current directory)",
    )
    parser.add_argument(
        "--charset",
        choices=["unicode", "ascii"],
        default="unicode",
        help="Character set for tree drawing (default: unicode)",
    )
    parser.add_argument(
        "--ignore-precedence",
        choices=[p.value for p in IgnorePrecedence],
        default=IgnorePrecedence.FIRST.value,
        dest="ignore_precedence",
        help="Which matching ignore-file pattern decides: the first one "
        "(default) or the last one, as git does",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print the selected files instead of writing the output document",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress (-v) or debug details (-vv) to stderr",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run_scopeflat(argv: list[str] | None = None) -> tuple[str, Report]:
    """Run scopeflat with provided CLI args and return the rendered output.

    Nothing is written; ``main()`` owns the output file. This is the primary
    test target for CLI behavior.

    Args:
        argv: Command-line argument list without program name. If ``None``,
            uses process arguments via ``argparse`` defaults.

    Returns:
        tuple[str, Report]: The document (or file list with
        ``--list-files``), empty when nothing matched, and the run report.

    Raises:
        ScopeflatError: On any user-facing validation or I/O error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    return _run_with_args(args)


def _resolve_cwd(directory: str | None) -> Path:
    """Resolve the working directory and validate it is a directory.

    Args:
        directory: ``-C`` argument, or ``None`` for the process directory.

    Returns:
        Path: Resolved working directory.

    Raises:
        ScopeflatError: If the directory does not exist.
    """
    cwd = Path(directory if directory is not None else ".").resolve()
    if not cwd.is_dir():
        raise ScopeflatError(f"'{directory}' is not a directory")
    return cwd


def _run_with_args(args: argparse.Namespace) -> tuple[str, Report]:
    """Run the select/render pipeline for parsed arguments.

    Args:
        args: Parsed CLI namespace.

    Returns:
        tuple[str, Report]: Rendered output and run report.

    Raises:
        ScopeflatError: On any user-facing validation or I/O error.
    """
    cwd = _resolve_cwd(args.directory)

    logger.info("Using input configuration: '%s'", args.rules)
    rules = load_rules(cwd / to_native_path(args.rules))
    logger.info(
        "Found %d include patterns and %d exclude patterns.",
        len(rules.include),
        len(rules.exclude),
    )

    report = Report()
    report.files = select_files(
        rules,
        cwd=str(cwd),
        report=report,
        precedence=IgnorePrecedence(args.ignore_precedence),
    )
    if not report.files:
        return "", report

    if args.list_files:
        return "\n".join(report.files), report

    logger.info("Found %d files to process...", len(report.files))
    tree = format_tree(report.files, TreeOptions(charset=args.charset, cwd=str(cwd)))
    contents = aggregate_contents(report.files, str(cwd), report)
    return build_document(tree, contents), report


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level, format="%(levelname)s: %(message)s", stream=sys.stderr
    )


def main() -> None:
    """Run the CLI entry point with process arguments.

    Writes the document to the output file and a summary to stdout.
    Exits with code 1 on user-facing errors or an unwritable output file.
    """
    parser = build_parser()
    args = parser.parse_args()  # single parse
    _configure_logging(args.verbose)

    try:
        output, report = _run_with_args(args)
    except ScopeflatError as exc:
        sys.stderr.write(f"scopeflat: {exc}\n")
        sys.exit(1)

    if not report.files:
        sys.stdout.write("No files matched the criteria.\n")
        return

    if args.list_files:
        sys.stdout.write(output + "\n")
        return

    out_path = Path(args.directory or ".") / args.output_file
    try:
        out_path.write_text(output, encoding="utf-8", newline="")
        written = out_path.stat().st_size
    except OSError as exc:
        sys.stderr.write(f"scopeflat: cannot write to '{args.output_file}': {exc}\n")
        sys.exit(1)

    sys.stdout.write("\n".join(report.summary_lines()) + "\n")
    sys.stdout.write(f"\nProject flattened into '{out_path}' ({format_mb(written)})\n")
