"""Text report rendering for flat and nested scan results."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from dirtree.models import FlatScanResult, NodeKind, SubtreeSummary, TreeNode

INDENT_STYLES = ("branch", "flat")
BYTES_PER_MB = 1_000_000


class ReportWriteError(OSError):
    """The report could not be written to its destination."""


@dataclass(frozen=True)
class RenderOptions:
    max_display_depth: int = 10
    max_rows_per_depth_band: int = 20
    indent_width: int = 4
    indent_style: str = "branch"
    indent_char: str = "-"

    def __post_init__(self) -> None:
        for name in ("max_display_depth", "max_rows_per_depth_band", "indent_width"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")
        if self.indent_style not in INDENT_STYLES:
            raise ValueError(
                f"indent_style must be one of {', '.join(INDENT_STYLES)}, "
                f"got {self.indent_style!r}"
            )
        if len(self.indent_char) != 1:
            raise ValueError(f"indent_char must be a single character, got {self.indent_char!r}")


DEFAULT_OPTIONS = RenderOptions()


def format_line(timestamp: str, kind: NodeKind, size: int, path: Path, prefix: str = "") -> str:
    return f"{timestamp} {prefix}{kind.tag} {size / BYTES_PER_MB:6.1f} [MB]    {path}"


def iter_flat_lines(
    result: FlatScanResult,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> Iterator[str]:
    """Yield the report lines for a flat scan.

    Records must already be depth-sorted: the listing ends at the first
    record deeper than ``max_display_depth``, and the row cap restarts each
    time the depth increases.
    """
    yield from _header("root", result.summary)
    yield _summary_line(result.summary)
    band_depth = -1
    rows = 0
    for record in result.records:
        if record.depth > options.max_display_depth:
            break
        if record.depth > band_depth:
            band_depth = record.depth
            rows = 0
        if rows >= options.max_rows_per_depth_band:
            continue
        rows += 1
        yield format_line(
            record.timestamp,
            record.kind,
            record.size,
            record.path,
            prefix=_prefix(record.depth, options),
        )


def iter_tree_lines(node: TreeNode, options: RenderOptions = DEFAULT_OPTIONS) -> Iterator[str]:
    yield from _header("path", node.summary)
    yield _summary_line(node.summary)
    yield from _tree_rows(node.children, options)


def render_flat(
    result: FlatScanResult,
    sink: TextIO,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> None:
    write_report(sink, iter_flat_lines(result, options))


def render_tree(node: TreeNode, sink: TextIO, options: RenderOptions = DEFAULT_OPTIONS) -> None:
    write_report(sink, iter_tree_lines(node, options))


def _tree_rows(children: Iterable[TreeNode], options: RenderOptions) -> Iterator[str]:
    # one iterator per open level; the stack height is the current depth + 1
    levels: list[Iterator[TreeNode]] = [iter(children)]
    while levels:
        child = next(levels[-1], None)
        if child is None:
            levels.pop()
            continue
        cur_depth = len(levels) - 1
        summary = child.summary
        yield format_line(
            summary.timestamp,
            summary.kind,
            summary.size,
            summary.path,
            prefix=_prefix(cur_depth, options),
        )
        if child.kind is NodeKind.DIRECTORY and cur_depth < options.max_display_depth:
            levels.append(iter(child.children))


def _header(label: str, summary: SubtreeSummary) -> list[str]:
    counts = summary.recursive_counts
    return [
        f"{label}: {summary.path}",
        "",
        f"max_depth: {summary.max_depth}",
        f"num_childs_recursive: {counts.total}",
        "(num_childs_dir, num_child_file, num_child_other): "
        f"({counts.directories}, {counts.files}, {counts.others})",
        "",
    ]


def _summary_line(summary: SubtreeSummary) -> str:
    return format_line(summary.timestamp, summary.kind, summary.size, summary.path)


def _prefix(depth: int, options: RenderOptions) -> str:
    leaf = options.indent_char * options.indent_width
    if options.indent_style == "flat":
        return leaf * (depth + 1)
    return ("|" + " " * options.indent_width) * depth + "|" + leaf


def write_report(sink: TextIO, lines: Iterable[str]) -> None:
    # ValueError covers writes to a closed handle
    try:
        for line in lines:
            sink.write(line + "\n")
        sink.flush()
    except (OSError, ValueError) as exc:
        raise ReportWriteError(f"cannot write report: {exc}") from exc
