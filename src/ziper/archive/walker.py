"""
Filesystem traversal for archive runs.

The walker never follows symbolic links, stays on the root's device, and
yields each directory before anything inside it. Errors for a single entry
are yielded in place of that entry so one unreadable node cannot end the
walk.
"""

import logging
import os
import stat
from enum import Enum
from typing import Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    """What a walked path turned out to be (without following links)."""
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"         # devices, sockets, fifos
    ERROR = "error"         # could not be stat-ed or listed


class WalkEntry:
    """One node produced by the walker."""

    def __init__(self, path: str, kind: EntryKind, depth: int, error: Optional[OSError] = None):
        self.path = path
        self.kind = kind
        self.depth = depth
        self.error = error

    @property
    def is_root(self) -> bool:
        return self.depth == 0

    def __repr__(self) -> str:
        return f"WalkEntry({self.path!r}, {self.kind.value}, depth={self.depth})"


def kind_from_mode(mode: int) -> EntryKind:
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if stat.S_ISREG(mode):
        return EntryKind.FILE
    return EntryKind.OTHER


class TreeWalker:
    """
    Lazy pre-order traversal rooted at ``root``.

    Iterating the walker starts a fresh walk each time.

    Args:
        root: Path to start from; a regular file yields just itself.
        same_file_system: Do not descend into directories on another device.
        sort_entries: Visit siblings in name order instead of listing order.
    """

    def __init__(self, root: str, same_file_system: bool = True, sort_entries: bool = True):
        self.root = root
        self.same_file_system = same_file_system
        self.sort_entries = sort_entries

    def __iter__(self) -> Iterator[WalkEntry]:
        return self.walk()

    def _same_device(self, path: str, st: os.stat_result, root_dev: int) -> bool:
        return st.st_dev == root_dev

    def _list_dir(self, path: str) -> List[Tuple[str, str]]:
        with os.scandir(path) as it:
            names = [(entry.name, entry.path) for entry in it]
        if self.sort_entries:
            names.sort()
        return names

    def walk(self) -> Iterator[WalkEntry]:
        try:
            # A symlinked root is followed; links below it are not
            root_stat = os.stat(self.root)
        except OSError as e:
            yield WalkEntry(self.root, EntryKind.ERROR, 0, e)
            return

        kind = kind_from_mode(root_stat.st_mode)
        yield WalkEntry(self.root, kind, 0)
        if kind is not EntryKind.DIRECTORY:
            return

        yield from self._walk_dir(self.root, 1, root_stat.st_dev)

    def _walk_dir(self, dir_path: str, depth: int, root_dev: int) -> Iterator[WalkEntry]:
        try:
            children = self._list_dir(dir_path)
        except OSError as e:
            yield WalkEntry(dir_path, EntryKind.ERROR, depth - 1, e)
            return

        for _name, child_path in children:
            try:
                st = os.lstat(child_path)
            except OSError as e:
                yield WalkEntry(child_path, EntryKind.ERROR, depth, e)
                continue

            kind = kind_from_mode(st.st_mode)
            if kind is not EntryKind.DIRECTORY:
                yield WalkEntry(child_path, kind, depth)
                continue

            if self.same_file_system and not self._same_device(child_path, st, root_dev):
                logger.debug(f"Not crossing device boundary at {child_path}")
                continue

            yield WalkEntry(child_path, kind, depth)
            yield from self._walk_dir(child_path, depth + 1, root_dev)
