"""
Crawl, cache and query tools for dirview.

This module contains the crawler that snapshots a directory tree, the store
that keeps and refreshes the current snapshot, and the query engine that
answers listing and search requests against it.
"""

from .crawler import Crawler, crawl_directory
from .snapshot_store import SnapshotStore
from .query import QueryEngine, list_entries, search_entries, split_path

__all__ = [
    'Crawler',
    'crawl_directory',
    'SnapshotStore',
    'QueryEngine',
    'list_entries',
    'search_entries',
    'split_path'
]
