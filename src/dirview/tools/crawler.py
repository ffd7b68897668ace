"""
Directory crawler for dirview.

This module builds the in-memory tree that snapshots are made of. A crawl is a
depth-first traversal of a root directory that mirrors its files and
subdirectories as immutable Entry objects. Unreadable directories are treated
as empty at every level so one bad subtree never fails the whole crawl.
"""

import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, FrozenSet, Union
import logging

from ..models.entry import Entry, EntryKind, join_path
from ..models.config import CrawlConfig


logger = logging.getLogger(__name__)

InodeKey = Tuple[int, int]


@dataclass
class _Frame:
    """A directory that is open on the crawl stack."""
    pending: Iterator[os.DirEntry]
    prefix: str
    ancestors: FrozenSet[InodeKey]
    name: str = ""
    entries: List[Entry] = field(default_factory=list)


class Crawler:
    """
    Depth-first directory crawler producing Entry trees.

    Regular files become file entries, directories become directory entries
    holding their crawled children. Anything else (sockets, devices, FIFOs,
    broken links) is skipped. Symbolic links are skipped unless the crawl is
    configured to follow them, in which case a directory that is already on
    the current descent path is recorded without children instead of being
    crawled again.
    """

    def __init__(self, config: Optional[CrawlConfig] = None):
        """
        Initialize the crawler.

        Args:
            config: Crawl settings; only follow_symlinks is read here, the root
                is passed to crawl() so one crawler can serve several roots
        """
        self.config = config or CrawlConfig()
        self.follow_symlinks = self.config.follow_symlinks
        self._stats = {
            'directories_crawled': 0,
            'files_found': 0,
            'entries_skipped': 0,
            'errors': 0
        }

    def crawl(self, root_path: Union[str, Path], prefix: str = "") -> Tuple[Entry, ...]:
        """
        Crawl a directory tree into memory.

        Args:
            root_path: Absolute or process-relative directory to crawl
            prefix: Relative directory recorded on root-level entries

        Returns:
            Root-level entries; empty if the root cannot be enumerated
        """
        started = time.monotonic()
        before = self.get_stats()
        root = os.fspath(root_path)

        ancestors: FrozenSet[InodeKey] = frozenset()
        if self.follow_symlinks:
            key = self._inode_key(root)
            if key is not None:
                ancestors = frozenset([key])

        entries = self._crawl_tree(root, prefix, ancestors)

        logger.info(
            f"Crawled {root}: {len(entries)} root entries, "
            f"{self._stats['directories_crawled'] - before['directories_crawled']} directories, "
            f"{self._stats['files_found'] - before['files_found']} files "
            f"in {time.monotonic() - started:.2f}s"
        )
        return entries

    def _crawl_tree(self, root: str, prefix: str, ancestors: FrozenSet[InodeKey]) -> Tuple[Entry, ...]:
        """
        Walk a tree depth-first with an explicit stack of open directories.

        A directory's Entry is built once all of its children are collected,
        so the stack depth follows the tree depth instead of the call stack.

        Args:
            root: Filesystem path of the crawl root
            prefix: Relative directory recorded on root-level entries
            ancestors: Inode keys of directories on the current descent path
                (only tracked when following symlinks)

        Returns:
            Root-level entries in enumeration order
        """
        top = _Frame(iter(self._scan(root)), prefix, ancestors)
        stack = [top]

        while stack:
            frame = stack[-1]
            dir_entry = next(frame.pending, None)

            if dir_entry is None:
                stack.pop()
                if stack:
                    parent = stack[-1]
                    parent.entries.append(Entry(
                        directory=parent.prefix,
                        filename=frame.name,
                        kind=EntryKind.DIRECTORY,
                        children=tuple(frame.entries),
                    ))
                continue

            kind = self._classify(dir_entry)
            if kind is None:
                self._stats['entries_skipped'] += 1
                continue

            if kind == EntryKind.FILE:
                self._stats['files_found'] += 1
                frame.entries.append(Entry(directory=frame.prefix, filename=dir_entry.name, kind=kind))
                continue

            child_ancestors = frame.ancestors
            if self.follow_symlinks:
                key = self._inode_key(dir_entry.path)
                if key is not None and key in frame.ancestors:
                    logger.warning(f"Skipping symlink cycle at {dir_entry.path}")
                    frame.entries.append(Entry(
                        directory=frame.prefix,
                        filename=dir_entry.name,
                        kind=kind,
                        children=(),
                    ))
                    continue
                if key is not None:
                    child_ancestors = frame.ancestors | {key}

            stack.append(_Frame(
                iter(self._scan(dir_entry.path)),
                join_path(frame.prefix, dir_entry.name),
                child_ancestors,
                name=dir_entry.name,
            ))

        return tuple(top.entries)

    def _scan(self, directory: str) -> List[os.DirEntry]:
        """
        Enumerate one directory.

        Returns:
            The directory's entries; empty if it cannot be enumerated
        """
        try:
            with os.scandir(directory) as it:
                dir_entries = list(it)
        except OSError as e:
            # Missing, unreadable or vanished: contributes no children
            logger.debug(f"Cannot enumerate directory {directory}: {e}")
            self._stats['errors'] += 1
            return []

        self._stats['directories_crawled'] += 1
        return dir_entries

    def _classify(self, dir_entry: os.DirEntry) -> Optional[EntryKind]:
        """
        Decide whether a directory entry is kept as a file, a directory, or skipped.

        Returns:
            The entry kind, or None if the entry is not kept
        """
        try:
            if dir_entry.is_symlink() and not self.follow_symlinks:
                return None
            if dir_entry.is_file(follow_symlinks=self.follow_symlinks):
                return EntryKind.FILE
            if dir_entry.is_dir(follow_symlinks=self.follow_symlinks):
                return EntryKind.DIRECTORY
        except OSError as e:
            logger.debug(f"Cannot determine type of {dir_entry.path}: {e}")
            self._stats['errors'] += 1
        return None

    @staticmethod
    def _inode_key(path: str) -> Optional[InodeKey]:
        try:
            st = os.stat(path)
        except OSError:
            return None
        return (st.st_dev, st.st_ino)

    def get_stats(self) -> Dict[str, int]:
        """
        Get statistics accumulated by this crawler.

        Returns:
            Dictionary containing crawl statistics
        """
        return self._stats.copy()

    def reset_stats(self) -> None:
        """Reset the statistics counters."""
        self._stats = {
            'directories_crawled': 0,
            'files_found': 0,
            'entries_skipped': 0,
            'errors': 0
        }


def crawl_directory(root_path: Union[str, Path], prefix: str = "", follow_symlinks: bool = False) -> Tuple[Entry, ...]:
    """
    Convenience function to crawl a directory tree with a fresh crawler.

    Args:
        root_path: Directory to crawl
        prefix: Relative directory recorded on root-level entries
        follow_symlinks: Whether symbolic links are followed

    Returns:
        Root-level entries of the crawled tree
    """
    crawler = Crawler(CrawlConfig(follow_symlinks=follow_symlinks))
    return crawler.crawl(root_path, prefix=prefix)
