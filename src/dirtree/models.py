from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class NodeKind(Enum):
    DIRECTORY = "directory"
    FILE = "file"
    OTHER = "other"  # symlinks, sockets, devices, or anything that could not be stat'd

    @property
    def tag(self) -> str:
        return _TAGS[self]


_TAGS = {
    NodeKind.DIRECTORY: "[D]",
    NodeKind.FILE: "[F]",
    NodeKind.OTHER: "[O]",
}

# max_depth sentinels for non-directory nodes
FILE_DEPTH = -1
OTHER_DEPTH = -2


@dataclass(frozen=True)
class Counts:
    directories: int = 0
    files: int = 0
    others: int = 0

    @property
    def total(self) -> int:
        return self.directories + self.files + self.others

    @classmethod
    def of(cls, kinds: Iterable[NodeKind]) -> Counts:
        tally = {kind: 0 for kind in NodeKind}
        for kind in kinds:
            tally[kind] += 1
        return cls(
            directories=tally[NodeKind.DIRECTORY],
            files=tally[NodeKind.FILE],
            others=tally[NodeKind.OTHER],
        )


@dataclass(frozen=True)
class DescendantRecord:
    kind: NodeKind
    depth: int
    path: Path
    size: int
    timestamp: str
    instant: int  # st_mtime_ns, 0 when unavailable


@dataclass(frozen=True)
class SubtreeSummary:
    kind: NodeKind
    path: Path
    size: int
    max_depth: int
    recursive_counts: Counts
    timestamp: str
    instant: int = 0


@dataclass(frozen=True)
class FlatScanResult:
    summary: SubtreeSummary
    records: tuple[DescendantRecord, ...] = ()


@dataclass(frozen=True)
class TreeNode:
    summary: SubtreeSummary
    immediate_counts: Counts = field(default_factory=Counts)
    children: tuple[TreeNode, ...] = ()

    @property
    def kind(self) -> NodeKind:
        return self.summary.kind

    @property
    def path(self) -> Path:
        return self.summary.path
