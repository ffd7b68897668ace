"""
Query engine for dirview.

Two read-only algorithms over a snapshot tree: listing a directory by
descending one path segment at a time, and a depth-first substring search over
every entry's full path with a shared result budget. Neither raises for
unknown paths or unmatched queries; both return an empty list instead.
"""

from typing import Iterator, List, Optional, Sequence, Union
import logging

from ..models.entry import Entry
from ..models.config import DEFAULT_SEARCH_LIMIT
from .snapshot_store import SnapshotStore


logger = logging.getLogger(__name__)

PathSpec = Union[str, Sequence[str]]


def split_path(raw: str) -> List[str]:
    """
    Split a raw '/'-separated path into segments.

    Leading, trailing and doubled separators produce no segments.
    """
    return [segment for segment in raw.split('/') if segment]


def list_entries(tree: Sequence[Entry], segments: PathSpec) -> List[Entry]:
    """
    List the children of a directory in a snapshot tree.

    Args:
        tree: Root-level entries of the snapshot
        segments: Path segments from the root, or a raw '/'-separated path

    Returns:
        Shallow entries at the resolved location; empty if any segment is
        missing or names a file
    """
    if isinstance(segments, str):
        segments = split_path(segments)

    current: Sequence[Entry] = tree
    for segment in segments:
        if not segment:
            continue

        match = next((entry for entry in current if entry.filename == segment), None)
        if match is None or not match.is_directory():
            return []
        current = match.children or ()

    return [entry.shallow() for entry in current]


def search_entries(tree: Sequence[Entry], query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> List[Entry]:
    """
    Search a snapshot tree for entries whose path contains a substring.

    The walk is depth-first in document order. The match is a plain,
    case-sensitive substring test on the entry's full relative path.

    Args:
        tree: Root-level entries of the snapshot
        query: Substring to look for; the empty string matches everything
        limit: Maximum number of results

    Returns:
        At most `limit` shallow entries in walk order
    """
    results: List[Entry] = []
    remaining = limit

    # One iterator per open directory; the innermost is on top
    stack: List[Iterator[Entry]] = [iter(tree)]
    while stack and remaining > 0:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue

        if query in entry.path:
            results.append(entry.shallow())
            remaining -= 1

        if entry.children:
            stack.append(iter(entry.children))

    return results


class QueryEngine:
    """
    Read operations against whatever snapshot a store currently serves.

    Every call captures the store's tree once and works on that reference
    only, so a refresh during a query cannot mix two trees.
    """

    def __init__(self, store: SnapshotStore, default_limit: int = DEFAULT_SEARCH_LIMIT):
        """
        Initialize the engine.

        Args:
            store: Snapshot store to read trees from
            default_limit: Search limit used when a caller passes none
        """
        self.store = store
        self.default_limit = default_limit

    def list(self, path: PathSpec = ()) -> List[Entry]:
        """
        List a directory's immediate children.

        Args:
            path: Raw '/'-separated path or sequence of segments; empty for the root

        Returns:
            Shallow entries, or an empty list for an unresolvable path
        """
        tree = self.store.current_tree()
        result = list_entries(tree, path)
        logger.debug(f"list {path!r}: {len(result)} entries")
        return result

    def search(self, query: str, limit: Optional[int] = None) -> List[Entry]:
        """
        Search the whole tree by path substring.

        Args:
            query: Substring to look for
            limit: Maximum number of results (the configured default if None)

        Returns:
            Shallow matching entries in depth-first order
        """
        if limit is None:
            limit = self.default_limit

        tree = self.store.current_tree()
        result = search_entries(tree, query, limit)
        logger.debug(f"search {query!r} (limit {limit}): {len(result)} matches")
        return result
