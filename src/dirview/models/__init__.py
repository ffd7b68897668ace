"""
Data models for dirview.

This module contains the core data structures used throughout the system.
"""

from .entry import Entry, EntryKind, join_path
from .snapshot import Snapshot

__all__ = ['Entry', 'EntryKind', 'Snapshot', 'join_path']
