"""Directory enumeration and pruned pre-order tree walks under the root."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterator

from weblist.services.path_resolver import PathResolver, join_path

logger = logging.getLogger(__name__)


def scan_directory(resolver: PathResolver, path: str) -> list[os.DirEntry]:
    """Immediate children of ``path``, ordered by name. Raises ``OSError``."""
    with os.scandir(resolver.full_path(path)) as it:
        return sorted(it, key=lambda e: e.name)


@dataclass(frozen=True)
class TreeEntry:
    path: str  # root-relative
    relative: str  # relative to the walk's top directory
    is_dir: bool
    entry: os.DirEntry

    def stat(self) -> os.stat_result:
        return self.entry.stat()


def walk_tree(resolver: PathResolver, top: str) -> Iterator[TreeEntry]:
    """Yield every non-excluded descendant of ``top`` in pre-order.

    A directory is yielded before any of its children. Excluded entries are
    pruned before descending, so nothing below an excluded directory is read.
    Symlinked directories are reported as non-directories and never entered.
    Unreadable directories are logged and skipped; a missing ``top`` yields
    nothing.
    """
    try:
        children = scan_directory(resolver, top)
    except (OSError, ValueError) as exc:
        logger.debug("Cannot walk %s: %s", top, exc)
        return

    stack: list[tuple[str, str, Iterator[os.DirEntry]]] = [(top, "", iter(children))]
    while stack:
        parent, parent_rel, it = stack[-1]
        entry = next(it, None)
        if entry is None:
            stack.pop()
            continue

        path = join_path(parent, entry.name)
        if resolver.is_excluded(path):
            continue

        relative = f"{parent_rel}/{entry.name}" if parent_rel else entry.name
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            is_dir = False

        yield TreeEntry(path=path, relative=relative, is_dir=is_dir, entry=entry)

        if is_dir:
            try:
                grandchildren = scan_directory(resolver, path)
            except OSError as exc:
                logger.warning("Skipping unreadable directory %s: %s", path, exc)
                continue
            stack.append((path, relative, iter(grandchildren)))
