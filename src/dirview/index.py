"""
Directory index facade for dirview.

This module wires configuration, crawler, snapshot store and query engine into
the two-operation surface that a web layer or any other caller uses: list a
directory and search by path substring.
"""

from pathlib import Path
from typing import Dict, List, Optional, Any, Union
import logging

from .config.parser import ConfigParser
from .models.config import DirviewConfig
from .models.entry import Entry
from .models.snapshot import Snapshot
from .tools.snapshot_store import SnapshotStore
from .tools.query import QueryEngine, PathSpec


logger = logging.getLogger(__name__)


class DirectoryIndex:
    """
    Read-only, periodically refreshed view over one directory tree.

    Attributes:
        config: Configuration the index was built from
        store: Snapshot store holding the current tree
        engine: Query engine reading from the store
    """

    def __init__(self, config: DirviewConfig, store: Optional[SnapshotStore] = None):
        """
        Initialize the index and run the startup crawl.

        The index answers queries from the first snapshot as soon as this
        returns; start() only adds the refresh timer.

        Args:
            config: Index configuration
            store: Snapshot store to use (built from config if None); it is
                loaded here if it has not crawled yet
        """
        self.config = config
        self.store = store or SnapshotStore.from_config(config)
        if not self.store.is_loaded:
            self.store.load()
        self.engine = QueryEngine(self.store, default_limit=config.search.default_limit)

    @classmethod
    def from_config(cls, config: DirviewConfig) -> 'DirectoryIndex':
        return cls(config)

    @property
    def snapshot(self) -> Snapshot:
        """The snapshot currently being served."""
        return self.store.current_snapshot()

    def start(self) -> None:
        """Start the periodic refresh timer."""
        self.store.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self.store.stop(timeout)

    def list(self, path: PathSpec = ()) -> List[Entry]:
        """List the immediate children of a directory in the snapshot."""
        return self.engine.list(path)

    def search(self, query: str, limit: Optional[int] = None) -> List[Entry]:
        """Search every entry of the snapshot by path substring."""
        return self.engine.search(query, limit)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get crawler statistics and details of the served snapshot.

        Returns:
            Dictionary with crawl counters and snapshot metadata
        """
        stats: Dict[str, Any] = self.store.crawler.get_stats()
        stats.update(self.snapshot.to_dict())
        stats['refresh_running'] = self.store.is_running
        return stats

    def __enter__(self) -> 'DirectoryIndex':
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


def open_index(config_path: Optional[Union[str, Path]] = None, strict_mode: bool = False) -> DirectoryIndex:
    """
    Load configuration, crawl the configured root and start refreshing.

    Args:
        config_path: Path to configuration file (optional)
        strict_mode: Whether to treat configuration warnings as errors

    Returns:
        A started DirectoryIndex

    Raises:
        ConfigurationError: If configuration is invalid
    """
    result = ConfigParser(strict_mode=strict_mode).load_config(config_path)
    for warning in result.warnings:
        logger.warning(warning)

    index = DirectoryIndex.from_config(result.config)
    index.start()
    return index
