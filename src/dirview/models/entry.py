"""
Entry data models for dirview.

This module defines the node type of the in-memory directory tree. An Entry
describes one filesystem object as it was seen by the last crawl; directory
entries carry their children, file entries never do.
"""

from typing import Dict, Iterator, Optional, Tuple, Any
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class EntryKind(Enum):
    """Kinds of filesystem objects kept in a snapshot."""
    FILE = "file"
    DIRECTORY = "directory"


def join_path(prefix: str, name: str) -> str:
    """
    Join a relative prefix and a name with a forward slash.

    An empty prefix does not introduce a leading slash, so root-level
    names come back unchanged.
    """
    if not prefix:
        return name
    return f"{prefix}/{name}"


class Entry(BaseModel):
    """
    One node of a crawled directory tree.

    Entries are immutable once built. Refreshing a tree means building a new
    one, never editing nodes in place.

    Attributes:
        directory: Parent path relative to the crawl root ('' for root level)
        filename: Base name of the file or directory
        kind: Whether this entry is a file or a directory
        children: Child entries of a directory; None for files and for
            directory entries that were stripped to a shallow form
    """

    model_config = ConfigDict(frozen=True)

    directory: str = Field("", description="Parent path relative to the crawl root")
    filename: str = Field(..., min_length=1, description="Base name of the entry")
    kind: EntryKind = Field(..., description="File or directory")
    children: Optional[Tuple['Entry', ...]] = Field(None, description="Children of a directory entry")

    @field_validator('kind', mode='before')
    @classmethod
    def validate_kind(cls, v) -> EntryKind:
        """Accept the plain string form of the kind."""
        if isinstance(v, str):
            try:
                return EntryKind(v)
            except ValueError:
                raise ValueError(f"Invalid entry kind: {v}")
        return v

    @model_validator(mode='after')
    def validate_children(self):
        """A file entry never carries children."""
        if self.kind == EntryKind.FILE and self.children is not None:
            raise ValueError(f"File entry '{self.filename}' cannot have children")
        return self

    @property
    def path(self) -> str:
        """Full path of this entry relative to the crawl root."""
        return join_path(self.directory, self.filename)

    def is_directory(self) -> bool:
        return self.kind == EntryKind.DIRECTORY

    def iter_children(self) -> Iterator['Entry']:
        """Iterate over children, yielding nothing for files and shallow entries."""
        return iter(self.children or ())

    def shallow(self) -> 'Entry':
        """Get this entry without its subtree."""
        if self.children is None:
            return self
        return self.model_copy(update={'children': None})

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the wire representation used by listing and search results.

        Children are never serialized; the kind is reported under the 'type' key.
        """
        return {
            'directory': self.directory,
            'filename': self.filename,
            'type': self.kind.value,
        }

    def __str__(self) -> str:
        suffix = "/" if self.is_directory() else ""
        return f"{self.path}{suffix}"


Entry.model_rebuild()
