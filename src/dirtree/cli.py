from __future__ import annotations

import argparse
import logging
import sys
import time
from collections.abc import Iterable
from pathlib import Path

from dirtree import __version__
from dirtree.render import INDENT_STYLES, ReportWriteError, RenderOptions

LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="dirtree",
        description=(
            "Report the sizes and layout of a directory tree. "
            "Read-only: nothing under --path is modified."
        ),
    )
    parser.add_argument("--path", default=".", help="Directory to scan")
    parser.add_argument(
        "--nested",
        action="store_true",
        help="Build a nested tree of directory summaries instead of a flat listing",
    )
    parser.add_argument(
        "--max-level",
        type=_non_negative_int,
        default=None,
        help="Levels to expand in nested mode (default: unbounded)",
    )
    parser.add_argument(
        "--display-depth",
        type=_non_negative_int,
        default=10,
        help="Deepest level printed in the report",
    )
    parser.add_argument(
        "--rows-per-depth",
        type=_non_negative_int,
        default=20,
        help="Rows printed per depth level (flat mode only)",
    )
    parser.add_argument(
        "--indent-width",
        type=_non_negative_int,
        default=4,
        help="Indent characters per level",
    )
    parser.add_argument(
        "--indent-style",
        choices=INDENT_STYLES,
        default="branch",
        help="'branch' draws a '|' per row, 'flat' repeats the indent character",
    )
    parser.add_argument("--indent-char", default="-", help="Character used for indentation")
    parser.add_argument("--output", default=None, help="Write the report to this file")
    parser.add_argument(
        "--append",
        action="store_true",
        help="Append to --output instead of overwriting it",
    )
    parser.add_argument(
        "--timing",
        action="store_true",
        help="Print the elapsed time to stderr",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.max_level is not None and not args.nested:
        parser.error("--max-level requires --nested")
    if args.append and args.output is None:
        parser.error("--append requires --output")
    try:
        options = RenderOptions(
            max_display_depth=args.display_depth,
            max_rows_per_depth_band=args.rows_per_depth,
            indent_width=args.indent_width,
            indent_style=args.indent_style,
            indent_char=args.indent_char,
        )
    except ValueError as exc:
        parser.error(str(exc))

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    logger = logging.getLogger("dirtree")
    root = Path(args.path).resolve()
    logger.info("scanning %s", root)

    from dirtree.analyzer import scan_flat, scan_tree
    from dirtree.render import iter_flat_lines, iter_tree_lines, write_report

    start = time.perf_counter()
    if args.nested:
        lines = iter_tree_lines(scan_tree(root, max_level=args.max_level), options)
    else:
        lines = iter_flat_lines(scan_flat(root), options)

    try:
        if args.output is None:
            write_report(sys.stdout, lines)
        else:
            with open(args.output, "a" if args.append else "w", encoding="utf-8") as sink:
                write_report(sink, lines)
            logger.info("report written to %s", args.output)
    except ReportWriteError as exc:
        raise SystemExit(str(exc)) from exc
    except OSError as exc:
        raise SystemExit(f"cannot write report to {args.output}: {exc}") from exc

    if args.timing:
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        print(f"elapsed time: {elapsed_ms} [ms]", file=sys.stderr)
    return 0


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return number


if __name__ == "__main__":
    raise SystemExit(main())
