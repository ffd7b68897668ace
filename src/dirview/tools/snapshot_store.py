"""
Snapshot store for dirview.

The store owns the single current Snapshot reference. The startup crawl fills
it, and a background timer replaces it wholesale with a fresh crawl at a fixed
interval. Readers only ever take the reference; they never lock and never
trigger a crawl.
"""

import threading
import time
from pathlib import Path
from typing import Optional, Tuple, Union
import logging

from ..models.entry import Entry
from ..models.snapshot import Snapshot
from ..models.config import DirviewConfig, DEFAULT_REFRESH_INTERVAL
from .crawler import Crawler


logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    Holder of the current directory snapshot and its refresh timer.

    Refreshes build an entirely new tree and then swap one attribute, so a
    reader that captured the previous snapshot keeps a consistent view for
    as long as it holds it. Crawls are serialized by a lock that readers
    never take.
    """

    def __init__(
        self,
        root: Union[str, Path],
        crawler: Optional[Crawler] = None,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
    ):
        """
        Initialize the store without crawling.

        Args:
            root: Directory to crawl on load and on every refresh
            crawler: Crawler to use (a default one is created if None)
            refresh_interval: Seconds between two refreshes of the running timer
        """
        if refresh_interval <= 0:
            raise ValueError(f"Refresh interval must be positive, got {refresh_interval}")

        self.root = str(Path(root).resolve())
        self.crawler = crawler or Crawler()
        self.refresh_interval = refresh_interval

        self._snapshot = Snapshot.empty(self.root)
        self._loaded = False
        self._refresh_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def from_config(cls, config: DirviewConfig, load: bool = True) -> 'SnapshotStore':
        """
        Create a store with the crawler and timer settings from configuration.

        Args:
            config: Configuration to build the store from
            load: Run the startup crawl before returning
        """
        store = cls(
            root=config.crawl.root,
            crawler=Crawler(config.crawl),
            refresh_interval=config.refresh.interval_seconds,
        )
        if load:
            store.load()
        return store

    @property
    def is_loaded(self) -> bool:
        """Whether the startup crawl has completed."""
        return self._loaded

    @property
    def is_running(self) -> bool:
        """Whether the refresh timer thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def load(self) -> Snapshot:
        """
        Perform the startup crawl synchronously.

        Returns:
            The snapshot now being served
        """
        with self._refresh_lock:
            snapshot = self._build(generation=0)
            self._snapshot = snapshot
            self._loaded = True
        return snapshot

    def refresh(self) -> Snapshot:
        """
        Crawl the root again and replace the current snapshot.

        Returns:
            The snapshot now being served
        """
        with self._refresh_lock:
            generation = self._snapshot.generation + 1 if self._loaded else 0
            snapshot = self._build(generation=generation)
            previous = self._snapshot
            self._snapshot = snapshot
            self._loaded = True

        logger.info(
            f"Refreshed snapshot of {self.root}: generation {snapshot.generation}, "
            f"{len(previous.entries)} -> {len(snapshot.entries)} root entries"
        )
        return snapshot

    def _build(self, generation: int) -> Snapshot:
        started = time.monotonic()
        entries = self.crawler.crawl(self.root)
        return Snapshot(
            root=self.root,
            entries=entries,
            generation=generation,
            crawl_seconds=time.monotonic() - started,
        )

    def current_snapshot(self) -> Snapshot:
        """Get the snapshot in effect at call time."""
        return self._snapshot

    def current_tree(self) -> Tuple[Entry, ...]:
        """
        Get the root-level entries of the snapshot in effect at call time.

        The returned tree is immutable and stays valid after later refreshes.
        """
        return self._snapshot.entries

    def start(self) -> None:
        """
        Start the periodic refresh timer.

        Loads the initial snapshot first if that has not happened yet, so the
        store can answer queries as soon as this returns.
        """
        if not self._loaded:
            self.load()

        if self.is_running and not self._stop_event.is_set():
            return

        # A thread left over from a timed-out stop keeps its own, already set,
        # event and exits after its current refresh
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(self._stop_event,),
            name="dirview-snapshot-refresh",
            daemon=True,
        )
        self._thread.start()
        logger.info(f"Snapshot refresh started for {self.root} every {self.refresh_interval}s")

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.refresh_interval):
            try:
                self.refresh()
            except Exception:
                # Keep serving the previous snapshot and try again next tick
                logger.exception(f"Snapshot refresh of {self.root} failed")

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Stop the refresh timer.

        Args:
            timeout: Seconds to wait for an in-flight refresh to finish
        """
        self._stop_event.set()
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
            if thread.is_alive():
                logger.warning(f"Snapshot refresh thread for {self.root} did not stop within {timeout}s")
            else:
                self._thread = None
                logger.info(f"Snapshot refresh stopped for {self.root}")

    def __enter__(self) -> 'SnapshotStore':
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
