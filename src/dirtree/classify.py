from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path

from dirtree.models import NodeKind
from dirtree.timestamps import UNAVAILABLE, format_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Classification:
    kind: NodeKind
    size: int
    timestamp: str
    instant: int


UNREACHABLE = Classification(kind=NodeKind.OTHER, size=0, timestamp=UNAVAILABLE, instant=0)


def classify(path: Path) -> Classification:
    """Stat ``path``, following symlinks; unreachable paths come back as OTHER."""
    try:
        st = os.stat(path)
    except OSError as exc:
        logger.warning("cannot stat %s: %s", path, exc)
        return UNREACHABLE
    return _from_stat(_kind_from_mode(st.st_mode), st)


def classify_entry(entry: os.DirEntry[str]) -> Classification:
    """Classify an entry produced by ``os.scandir`` without following symlinks.

    The kind comes from the directory listing, so an entry whose stat fails
    keeps its kind and is reported with size 0 and no timestamp.
    """
    try:
        if entry.is_dir(follow_symlinks=False):
            kind = NodeKind.DIRECTORY
        elif entry.is_file(follow_symlinks=False):
            kind = NodeKind.FILE
        else:
            kind = NodeKind.OTHER
    except OSError as exc:
        logger.warning("cannot determine type of %s: %s", entry.path, exc)
        return UNREACHABLE
    try:
        st = entry.stat(follow_symlinks=False)
    except OSError as exc:
        logger.warning("cannot stat %s: %s", entry.path, exc)
        return Classification(kind=kind, size=0, timestamp=UNAVAILABLE, instant=0)
    return _from_stat(kind, st)


def _kind_from_mode(mode: int) -> NodeKind:
    if stat.S_ISDIR(mode):
        return NodeKind.DIRECTORY
    if stat.S_ISREG(mode):
        return NodeKind.FILE
    return NodeKind.OTHER


def _from_stat(kind: NodeKind, st: os.stat_result) -> Classification:
    return Classification(
        kind=kind,
        size=st.st_size if kind is NodeKind.FILE else 0,
        timestamp=format_timestamp(st.st_mtime_ns),
        instant=st.st_mtime_ns,
    )
