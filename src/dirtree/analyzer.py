from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from pathlib import Path

from dirtree.classify import Classification, classify, classify_entry
from dirtree.models import (
    FILE_DEPTH,
    OTHER_DEPTH,
    Counts,
    DescendantRecord,
    FlatScanResult,
    NodeKind,
    SubtreeSummary,
    TreeNode,
)
from dirtree.ordering import sort_nodes, sort_records

logger = logging.getLogger(__name__)

# max_level value meaning "expand every level"
UNBOUNDED = None


@dataclass(frozen=True)
class SubtreeStats:
    size: int = 0
    max_depth: int = 0
    counts: Counts = field(default_factory=Counts)


def aggregate(path: Path) -> SubtreeStats:
    """Walk the whole subtree under ``path`` and total its sizes and kinds.

    Direct children of ``path`` are depth 0. Directories that cannot be
    opened are logged and skipped; everything else is still walked.
    """
    size = 0
    max_depth = 0
    kinds: list[NodeKind] = []
    for info, _entry_path, depth in _walk(Path(path)):
        kinds.append(info.kind)
        size += info.size
        max_depth = max(max_depth, depth)
    return SubtreeStats(size=size, max_depth=max_depth, counts=Counts.of(kinds))


def directory_size(path: Path) -> int:
    return aggregate(path).size


def summarize(path: Path) -> SubtreeSummary:
    path = _absolute(path)
    return _summary_for(path, classify(path))


def scan_flat(root: Path) -> FlatScanResult:
    """Walk ``root`` once, recording every reachable entry with its depth."""
    root = _absolute(root)
    info = classify(root)
    if info.kind is not NodeKind.DIRECTORY:
        return FlatScanResult(summary=_leaf_summary(root, info))

    records = [
        DescendantRecord(
            kind=entry_info.kind,
            depth=depth,
            path=entry_path,
            size=entry_info.size,
            timestamp=entry_info.timestamp,
            instant=entry_info.instant,
        )
        for entry_info, entry_path, depth in _walk(root)
    ]
    summary = SubtreeSummary(
        kind=NodeKind.DIRECTORY,
        path=root,
        size=sum(record.size for record in records),
        max_depth=max((record.depth for record in records), default=0),
        recursive_counts=Counts.of(record.kind for record in records),
        timestamp=info.timestamp,
        instant=info.instant,
    )
    return FlatScanResult(summary=summary, records=tuple(sort_records(records)))


def scan_tree(root: Path, max_level: int | None = UNBOUNDED) -> TreeNode:
    """Build a tree of directory summaries expanded ``max_level`` levels deep.

    Every node's summary covers its full subtree; only the enumeration of
    children stops at the bound.
    """
    _check_level(max_level)
    root = _absolute(root)
    return _build_node(root, classify(root), max_level)


def refresh(node: TreeNode, child_level: int | None = 0) -> TreeNode:
    """Return a copy of ``node`` with its direct children enumerated afresh.

    The node's own summary is carried over unchanged.
    """
    _check_level(child_level)
    if node.kind is not NodeKind.DIRECTORY:
        logger.warning("cannot refresh %s: not a directory", node.path)
        return node
    children = _build_children(node.path, child_level)
    return replace(
        node,
        immediate_counts=Counts.of(child.kind for child in children),
        children=tuple(children),
    )


@dataclass
class _PendingNode:
    path: Path
    info: Classification
    max_level: int | None
    entries: list[tuple[Path, Classification]] | None = None
    children: list[TreeNode] = field(default_factory=list)


def _build_node(path: Path, info: Classification, max_level: int | None) -> TreeNode:
    # explicit stack; nodes are assembled once all their children are built
    stack = [_PendingNode(path, info, max_level)]
    while True:
        pending = stack[-1]
        if pending.entries is None:
            pending.entries = _expandable_entries(pending)
        if pending.entries:
            child_path, child_info = pending.entries.pop()
            next_level = None if pending.max_level is None else pending.max_level - 1
            stack.append(_PendingNode(child_path, child_info, next_level))
            continue
        stack.pop()
        children = sort_nodes(pending.children)
        node = TreeNode(
            summary=_summary_for(pending.path, pending.info),
            immediate_counts=Counts.of(child.kind for child in children),
            children=tuple(children),
        )
        if not stack:
            return node
        stack[-1].children.append(node)


def _expandable_entries(pending: _PendingNode) -> list[tuple[Path, Classification]]:
    if pending.info.kind is not NodeKind.DIRECTORY or pending.max_level == 0:
        return []
    return [(Path(entry.path), classify_entry(entry)) for entry in _list_directory(pending.path)]


def _build_children(directory: Path, max_level: int | None) -> list[TreeNode]:
    return sort_nodes(
        _build_node(Path(entry.path), classify_entry(entry), max_level)
        for entry in _list_directory(directory)
    )


def _summary_for(path: Path, info: Classification) -> SubtreeSummary:
    if info.kind is not NodeKind.DIRECTORY:
        return _leaf_summary(path, info)
    stats = aggregate(path)
    return SubtreeSummary(
        kind=NodeKind.DIRECTORY,
        path=path,
        size=stats.size,
        max_depth=stats.max_depth,
        recursive_counts=stats.counts,
        timestamp=info.timestamp,
        instant=info.instant,
    )


def _leaf_summary(path: Path, info: Classification) -> SubtreeSummary:
    return SubtreeSummary(
        kind=info.kind,
        path=path,
        size=info.size,
        max_depth=FILE_DEPTH if info.kind is NodeKind.FILE else OTHER_DEPTH,
        recursive_counts=Counts(),
        timestamp=info.timestamp,
        instant=info.instant,
    )


def _walk(root: Path) -> Iterator[tuple[Classification, Path, int]]:
    pending: list[tuple[Path, int]] = [(root, 0)]
    while pending:
        directory, depth = pending.pop()
        subdirs: list[tuple[Path, int]] = []
        for entry in _list_directory(directory):
            info = classify_entry(entry)
            entry_path = Path(entry.path)
            yield info, entry_path, depth
            if info.kind is NodeKind.DIRECTORY:
                subdirs.append((entry_path, depth + 1))
        pending.extend(reversed(subdirs))


def _list_directory(directory: Path) -> list[os.DirEntry[str]]:
    # the handle is closed before any entry is classified or descended into
    try:
        with os.scandir(directory) as entries:
            return list(entries)
    except OSError as exc:
        logger.warning("cannot read directory %s: %s", directory, exc)
        return []


def _absolute(path: Path) -> Path:
    return Path(os.path.abspath(path))


def _check_level(level: int | None) -> None:
    if level is not None and level < 0:
        raise ValueError(f"depth bound must be non-negative or None, got {level}")
