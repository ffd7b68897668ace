"""
dirview - Core Package

A read-only, in-memory view over a directory tree: list a directory's children
and search the whole tree by path substring, served from a periodically
refreshed snapshot.
"""

__version__ = "0.1.0"
__author__ = "dirview Team"
