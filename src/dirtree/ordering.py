from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from dirtree.models import DescendantRecord, NodeKind, TreeNode

_KIND_PRIORITY = {
    NodeKind.FILE: 0,
    NodeKind.DIRECTORY: 1,
    NodeKind.OTHER: 2,
}


def kind_priority(kind: NodeKind) -> int:
    return _KIND_PRIORITY[kind]


def record_sort_key(record: DescendantRecord) -> tuple[int, int, int, Path]:
    return (record.depth, kind_priority(record.kind), record.instant, record.path)


def node_sort_key(node: TreeNode) -> tuple[int, Path]:
    return (kind_priority(node.kind), node.path)


def sort_records(records: Iterable[DescendantRecord]) -> list[DescendantRecord]:
    return sorted(records, key=record_sort_key)


def sort_nodes(nodes: Iterable[TreeNode]) -> list[TreeNode]:
    return sorted(nodes, key=node_sort_key)
