"""
Tests for the filesystem walker.
"""

import os

import pytest

from ziper.archive.walker import EntryKind, TreeWalker, WalkEntry, kind_from_mode


@pytest.fixture
def tree(make_tree):
    return make_tree({
        "sub": {
            "deeper": {"c.txt": "charlie"},
            "b.txt": "bravo",
        },
        "empty": {},
        "a.txt": "alpha",
    })


def relative(root, entries):
    return [os.path.relpath(e.path, str(root)) for e in entries]


def test_walk_is_preorder_and_sorted(tree):
    entries = list(TreeWalker(str(tree)))

    assert relative(tree, entries) == [
        ".",
        "a.txt",
        "empty",
        "sub",
        os.path.join("sub", "b.txt"),
        os.path.join("sub", "deeper"),
        os.path.join("sub", "deeper", "c.txt"),
    ]
    assert entries[0].is_root
    assert entries[0].kind is EntryKind.DIRECTORY
    assert [e.depth for e in entries] == [0, 1, 1, 1, 2, 2, 3]


def test_walk_kinds(tree):
    kinds = {os.path.basename(e.path): e.kind for e in TreeWalker(str(tree))}

    assert kinds["a.txt"] is EntryKind.FILE
    assert kinds["empty"] is EntryKind.DIRECTORY
    assert kinds["c.txt"] is EntryKind.FILE


def test_unsorted_walk_yields_same_entries(tree):
    sorted_paths = sorted(e.path for e in TreeWalker(str(tree)))
    listed_paths = sorted(e.path for e in TreeWalker(str(tree), sort_entries=False))

    assert listed_paths == sorted_paths


def test_walker_can_be_iterated_twice(tree):
    walker = TreeWalker(str(tree))

    assert [e.path for e in walker] == [e.path for e in walker]


def test_single_file_root(tree):
    entries = list(TreeWalker(str(tree / "a.txt")))

    assert len(entries) == 1
    assert entries[0].kind is EntryKind.FILE
    assert entries[0].is_root


def test_missing_root_yields_error(tmp_path):
    entries = list(TreeWalker(str(tmp_path / "missing")))

    assert len(entries) == 1
    assert entries[0].kind is EntryKind.ERROR
    assert isinstance(entries[0].error, FileNotFoundError)


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_symlinks_below_root_are_not_followed(tree):
    os.symlink(str(tree / "a.txt"), str(tree / "link.txt"))
    os.symlink(str(tree / "sub"), str(tree / "sublink"))

    entries = {os.path.basename(e.path): e for e in TreeWalker(str(tree))}

    assert entries["link.txt"].kind is EntryKind.SYMLINK
    assert entries["sublink"].kind is EntryKind.SYMLINK
    paths = [e.path for e in TreeWalker(str(tree))]
    assert not any(p.startswith(str(tree / "sublink") + os.sep) for p in paths)


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_symlinked_root_is_followed(tree, tmp_path):
    link = tmp_path / "rootlink"
    os.symlink(str(tree), str(link))

    entries = list(TreeWalker(str(link)))

    assert entries[0].kind is EntryKind.DIRECTORY
    assert os.path.join(str(link), "a.txt") in [e.path for e in entries]


def test_unlistable_directory_yields_error_and_continues(tree, monkeypatch):
    real_list_dir = TreeWalker._list_dir
    broken = str(tree / "sub")

    def list_dir(self, path):
        if path == broken:
            raise PermissionError(13, "Permission denied", path)
        return real_list_dir(self, path)

    monkeypatch.setattr(TreeWalker, "_list_dir", list_dir)
    entries = list(TreeWalker(str(tree)))

    errors = [e for e in entries if e.kind is EntryKind.ERROR]
    assert len(errors) == 1
    assert errors[0].path == broken
    assert isinstance(errors[0].error, PermissionError)
    assert str(tree / "a.txt") in [e.path for e in entries]
    assert str(tree / "sub" / "b.txt") not in [e.path for e in entries]


def test_lstat_failure_yields_error_entry(tree, monkeypatch):
    real_lstat = os.lstat
    broken = str(tree / "a.txt")

    def lstat(path, *args, **kwargs):
        if os.fspath(path) == broken:
            raise PermissionError(13, "Permission denied", path)
        return real_lstat(path, *args, **kwargs)

    monkeypatch.setattr(os, "lstat", lstat)
    entries = list(TreeWalker(str(tree)))

    by_path = {e.path: e for e in entries}
    assert by_path[broken].kind is EntryKind.ERROR
    assert by_path[str(tree / "sub" / "b.txt")].kind is EntryKind.FILE


class OtherDeviceWalker(TreeWalker):
    """Pretends ``sub`` lives on another filesystem."""

    def _same_device(self, path, st, root_dev):
        return os.path.basename(path) != "sub"


def test_other_device_directories_are_not_entered(tree):
    paths = [e.path for e in OtherDeviceWalker(str(tree))]

    assert str(tree / "sub") not in paths
    assert str(tree / "sub" / "b.txt") not in paths
    assert str(tree / "a.txt") in paths


def test_other_device_directories_entered_when_allowed(tree):
    paths = [e.path for e in OtherDeviceWalker(str(tree), same_file_system=False)]

    assert str(tree / "sub" / "deeper" / "c.txt") in paths


def test_kind_from_mode():
    assert kind_from_mode(os.stat(".").st_mode) is EntryKind.DIRECTORY
    assert kind_from_mode(0o020644) is EntryKind.OTHER


def test_walk_entry_repr():
    entry = WalkEntry("x", EntryKind.FILE, 2)

    assert repr(entry) == "WalkEntry('x', file, depth=2)"
    assert not entry.is_root
