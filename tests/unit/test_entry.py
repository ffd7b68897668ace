"""
Unit tests for entry and snapshot data models.

Tests validation, path joining, shallow copies and serialization of the
Entry model, and counting on the Snapshot model.
"""

import pytest
from pydantic import ValidationError

from dirview.models.entry import Entry, EntryKind, join_path
from dirview.models.snapshot import Snapshot


def make_tree():
    """root: a.txt, sub/ (b.txt, deeper/ (c.md))"""
    deeper = Entry(
        directory="sub",
        filename="deeper",
        kind=EntryKind.DIRECTORY,
        children=(Entry(directory="sub/deeper", filename="c.md", kind=EntryKind.FILE),),
    )
    sub = Entry(
        directory="",
        filename="sub",
        kind=EntryKind.DIRECTORY,
        children=(Entry(directory="sub", filename="b.txt", kind=EntryKind.FILE), deeper),
    )
    return (Entry(directory="", filename="a.txt", kind=EntryKind.FILE), sub)


class TestJoinPath:
    """Test cases for join_path."""

    def test_empty_prefix(self):
        assert join_path("", "a.txt") == "a.txt"

    def test_nested_prefix(self):
        assert join_path("sub", "b.txt") == "sub/b.txt"
        assert join_path("sub/deeper", "c.md") == "sub/deeper/c.md"


class TestEntry:
    """Test cases for the Entry model."""

    def test_file_creation(self):
        entry = Entry(directory="", filename="a.txt", kind=EntryKind.FILE)

        assert entry.kind == EntryKind.FILE
        assert entry.children is None
        assert entry.path == "a.txt"
        assert not entry.is_directory()

    def test_kind_from_string(self):
        entry = Entry(directory="sub", filename="b.txt", kind="file")
        assert entry.kind == EntryKind.FILE

        directory = Entry(filename="sub", kind="directory", children=())
        assert directory.kind == EntryKind.DIRECTORY

    def test_invalid_kind(self):
        with pytest.raises(ValidationError):
            Entry(filename="x", kind="socket")

    def test_file_with_children_rejected(self):
        """A file entry never carries children."""
        with pytest.raises(ValidationError):
            Entry(filename="a.txt", kind=EntryKind.FILE, children=())

    def test_empty_filename_rejected(self):
        with pytest.raises(ValidationError):
            Entry(filename="", kind=EntryKind.FILE)

    def test_entries_are_frozen(self):
        entry = Entry(filename="a.txt", kind=EntryKind.FILE)
        with pytest.raises(ValidationError):
            entry.filename = "b.txt"

    def test_path_of_nested_entry(self):
        _, sub = make_tree()
        deeper = sub.children[1]

        assert sub.path == "sub"
        assert deeper.path == "sub/deeper"
        assert deeper.children[0].path == "sub/deeper/c.md"

    def test_shallow_strips_children(self):
        _, sub = make_tree()
        shallow = sub.shallow()

        assert shallow.children is None
        assert shallow.directory == sub.directory
        assert shallow.filename == sub.filename
        assert shallow.kind == EntryKind.DIRECTORY
        # Original is untouched
        assert len(sub.children) == 2

    def test_shallow_file_is_same_object(self):
        a_txt, _ = make_tree()
        assert a_txt.shallow() is a_txt

    def test_iter_children(self):
        a_txt, sub = make_tree()

        assert list(a_txt.iter_children()) == []
        assert [c.filename for c in sub.iter_children()] == ["b.txt", "deeper"]
        assert list(sub.shallow().iter_children()) == []

    def test_to_dict(self):
        _, sub = make_tree()

        assert sub.to_dict() == {"directory": "", "filename": "sub", "type": "directory"}
        assert sub.children[0].to_dict() == {"directory": "sub", "filename": "b.txt", "type": "file"}

    def test_str(self):
        a_txt, sub = make_tree()
        assert str(a_txt) == "a.txt"
        assert str(sub) == "sub/"


class TestSnapshot:
    """Test cases for the Snapshot model."""

    def test_empty(self):
        snapshot = Snapshot.empty("/data")

        assert snapshot.root == "/data"
        assert snapshot.entries == ()
        assert snapshot.generation == 0
        assert snapshot.count_entries() == 0

    def test_count_entries(self):
        snapshot = Snapshot(root="/data", entries=make_tree())
        assert snapshot.count_entries() == 5

    def test_negative_generation_rejected(self):
        with pytest.raises(ValidationError):
            Snapshot(root="/data", generation=-1)

    def test_to_dict(self):
        snapshot = Snapshot(root="/data", entries=make_tree(), generation=3, crawl_seconds=0.5)
        data = snapshot.to_dict()

        assert data['root'] == "/data"
        assert data['generation'] == 3
        assert data['crawl_seconds'] == 0.5
        assert data['entry_count'] == 5
        assert isinstance(data['created_at'], str)
