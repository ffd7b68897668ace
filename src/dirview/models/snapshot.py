"""
Snapshot data model for dirview.

A Snapshot is the tree produced by one crawl together with the root it was
crawled from. The snapshot store swaps whole Snapshot objects; nothing inside
one is ever modified after construction.
"""

from typing import Dict, Iterable, Tuple, Any
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from .entry import Entry


class Snapshot(BaseModel):
    """
    The result of a single crawl.

    Attributes:
        root: Resolved path of the crawl root
        entries: Root-level entries of the tree
        created_at: When the crawl finished
        generation: 0 for the startup crawl, incremented on every refresh
        crawl_seconds: Wall-clock duration of the crawl
    """

    model_config = ConfigDict(frozen=True)

    root: str = Field(..., description="Resolved crawl root")
    entries: Tuple[Entry, ...] = Field(default_factory=tuple, description="Root-level entries")
    created_at: datetime = Field(default_factory=datetime.now, description="When the crawl finished")
    generation: int = Field(0, ge=0, description="Refresh generation")
    crawl_seconds: float = Field(0.0, ge=0.0, description="Crawl duration in seconds")

    @classmethod
    def empty(cls, root: str) -> 'Snapshot':
        """Snapshot for a store that has not crawled yet."""
        return cls(root=root, entries=())

    def count_entries(self) -> int:
        """Count every node in the tree."""
        return _count(self.entries)

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot metadata to dictionary representation."""
        return {
            'root': self.root,
            'created_at': self.created_at.isoformat(),
            'generation': self.generation,
            'crawl_seconds': self.crawl_seconds,
            'entry_count': self.count_entries(),
        }


def _count(entries: Iterable[Entry]) -> int:
    total = 0
    stack = list(entries)
    while stack:
        entry = stack.pop()
        total += 1
        stack.extend(entry.iter_children())
    return total
