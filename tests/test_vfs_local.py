"""
Tests for the local disk backend.

Each test gets its own temporary directory as the filesystem root.
"""

import os

import pytest

from nodefs.vfs import LocalFileSystem, MemoryFileSystem, SelfContainmentError
from nodefs.vfs.nodes.local import LocalFile, LocalFolder


@pytest.fixture
def fs(tmp_path):
    """A LocalFileSystem rooted at a fresh temporary directory."""
    return LocalFileSystem(tmp_path)


@pytest.fixture
def tree(tmp_path):
    """Create a small tree on disk.

    Structure:
        A/
        ├── x          "hello"
        └── sub/
            └── y      "world"
    """
    (tmp_path / "A" / "sub").mkdir(parents=True)
    (tmp_path / "A" / "x").write_text("hello")
    (tmp_path / "A" / "sub" / "y").write_text("world")
    return tmp_path


class TestLocalNodes:
    """Test handles and primitives on disk."""

    def test_root_is_the_directory(self, fs, tmp_path):
        assert isinstance(fs.root, LocalFolder)
        assert fs.root.os_path == tmp_path.resolve()
        assert fs.root.exists()

    def test_os_path_follows_segments(self, fs, tmp_path):
        file = fs.resolve_file("/a//b.txt")

        assert isinstance(file, LocalFile)
        assert file.os_path == tmp_path.resolve() / "a" / "b.txt"

    def test_create_folder_with_parents(self, fs, tmp_path):
        fs.resolve_folder("a/b").create()

        assert (tmp_path / "a" / "b").is_dir()

    def test_create_folder_over_file_raises(self, fs, tmp_path):
        (tmp_path / "a").write_text("x")

        with pytest.raises(FileExistsError):
            fs.resolve_folder("a").create()

    def test_write_and_read(self, fs, tmp_path):
        file = fs.resolve_file("notes.txt")
        file.write_text("hi")

        assert (tmp_path / "notes.txt").read_text() == "hi"
        assert file.read_text() == "hi"

    def test_write_without_parent_raises(self, fs):
        with pytest.raises(FileNotFoundError):
            fs.resolve_file("missing/notes.txt").write_bytes(b"x")

    def test_exists_checks_kind(self, fs, tree):
        assert fs.resolve_folder("A").exists()
        assert not fs.resolve_file("A").exists()
        assert fs.resolve_file("A/x").exists()
        assert not fs.resolve_folder("A/x").exists()

    def test_delete_folder_recursively(self, fs, tree):
        fs.resolve_folder("A").delete()

        assert not (tree / "A").exists()

    def test_delete_missing_is_noop(self, fs):
        fs.resolve_folder("missing").delete()
        fs.resolve_file("missing").delete()

    def test_delete_root_keeps_directory(self, fs, tree):
        fs.root.delete()

        assert tree.is_dir()
        assert list(tree.iterdir()) == []


class TestLocalEnumeration:
    """Test children() on disk."""

    def test_children_and_kinds(self, fs, tree):
        folder = fs.resolve_folder("A")

        assert {c.name for c in folder.files()} == {"x"}
        assert {c.name for c in folder.folders()} == {"sub"}

    def test_missing_folder_fails_on_consumption(self, fs):
        children = fs.resolve_folder("missing").children()

        with pytest.raises(FileNotFoundError):
            list(children)

    def test_walk(self, fs, tree):
        assert {n.path for n in fs.root.walk()} == {"/A", "/A/x", "/A/sub", "/A/sub/y"}


class TestLocalCopyMove:
    """Copy and move on disk."""

    def test_copy_folder(self, fs, tree):
        fs.resolve_folder("A").copy_to(fs.resolve_folder("B"))

        assert (tree / "B" / "x").read_text() == "hello"
        assert (tree / "B" / "sub" / "y").read_text() == "world"
        assert (tree / "A" / "x").exists()

    def test_copy_overwrites(self, fs, tree):
        (tree / "B").mkdir()
        (tree / "B" / "old").write_text("old")

        fs.resolve_folder("A").copy_to(fs.resolve_folder("B"))

        assert sorted(p.name for p in (tree / "B").iterdir()) == ["sub", "x"]

    def test_copy_into_descendant_rejected(self, fs, tree):
        with pytest.raises(SelfContainmentError):
            fs.resolve_folder("A").copy_to(fs.resolve_folder("A/sub/copy"))

        assert not (tree / "A" / "sub" / "copy").exists()

    def test_move_renames(self, fs, tree):
        fs.resolve_folder("A").move_to(fs.resolve_folder("moved/A"))

        assert (tree / "moved" / "A" / "sub" / "y").read_text() == "world"
        assert not (tree / "A").exists()

    def test_move_file_over_existing(self, fs, tree):
        (tree / "target.txt").write_text("old")

        fs.resolve_file("A/x").move_to(fs.resolve_file("target.txt"))

        assert (tree / "target.txt").read_text() == "hello"
        assert not (tree / "A" / "x").exists()

    def test_copy_between_local_filesystems(self, tree, tmp_path_factory):
        other_root = tmp_path_factory.mktemp("other")
        source = LocalFileSystem(tree)
        target = LocalFileSystem(other_root)

        source.resolve_folder("A").move_to(target.resolve_folder("A"))

        assert (other_root / "A" / "sub" / "y").read_text() == "world"
        assert not (tree / "A").exists()

    def test_copy_memory_to_local(self, fs, tmp_path):
        memory = MemoryFileSystem()
        memory.resolve_file("m/a.txt").create()
        memory.resolve_file("m/a.txt").write_text("from memory")

        memory.resolve_folder("m").copy_to(fs.resolve_folder("m"))

        assert (tmp_path / "m" / "a.txt").read_text() == "from memory"


class TestSharedStorage:
    """Two LocalFileSystem objects over one directory are the same storage."""

    def test_filesystems_over_same_directory_are_equal(self, tree):
        first = LocalFileSystem(tree)
        second = LocalFileSystem(str(tree) + "/")

        assert first == second
        assert hash(first) == hash(second)
        assert first.resolve_folder("A") == second.resolve_folder("A")
        assert first.root.is_ancestor_of(second.resolve_file("A/x"))

    def test_filesystems_over_different_directories_differ(self, tree):
        assert LocalFileSystem(tree) != LocalFileSystem(tree / "A")

    def test_copy_onto_itself_through_second_instance(self, tree):
        """
        Given: Two LocalFileSystem objects over the same directory
        When: Copying A from one onto A of the other
        Then: SelfContainmentError, and A is left untouched
        """
        first = LocalFileSystem(tree)
        second = LocalFileSystem(tree)

        with pytest.raises(SelfContainmentError):
            first.resolve_folder("A").copy_to(second.resolve_folder("A"))

        assert (tree / "A" / "x").read_text() == "hello"
        assert (tree / "A" / "sub" / "y").read_text() == "world"

    def test_copy_into_descendant_through_second_instance(self, tree):
        first = LocalFileSystem(tree)
        second = LocalFileSystem(tree)

        with pytest.raises(SelfContainmentError):
            first.resolve_folder("A").copy_to(second.resolve_folder("A/sub"))

        assert (tree / "A" / "sub" / "y").read_text() == "world"
        assert sorted(p.name for p in (tree / "A" / "sub").iterdir()) == ["y"]

    def test_move_through_second_instance_renames(self, tree):
        first = LocalFileSystem(tree)
        second = LocalFileSystem(tree)

        assert first.resolve_folder("A").supports_rename_to(second.resolve_folder("B"))

        first.resolve_folder("A").move_to(second.resolve_folder("B"))

        assert (tree / "B" / "x").read_text() == "hello"
        assert not (tree / "A").exists()


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not available")
class TestSymlinks:
    """Links are files to the VFS and are never followed."""

    @pytest.fixture
    def outside(self, tmp_path_factory):
        """A directory outside the filesystem root."""
        outside = tmp_path_factory.mktemp("outside")
        (outside / "keep").write_text("keep")
        return outside

    def test_link_to_directory_is_a_file(self, fs, tree, outside):
        (tree / "link").symlink_to(outside, target_is_directory=True)

        assert {c.name for c in fs.root.folders()} == {"A"}
        assert "link" in {c.name for c in fs.root.files()}
        assert fs.resolve_file("link").exists()
        assert not fs.resolve_folder("link").exists()

    def test_emptying_root_removes_link_only(self, fs, tree, outside):
        """
        Given: A root holding a link to a directory outside it
        When: Deleting the root
        Then: The link is gone and the linked directory is untouched
        """
        (tree / "link").symlink_to(outside, target_is_directory=True)

        fs.root.delete()

        assert list(tree.iterdir()) == []
        assert (outside / "keep").read_text() == "keep"

    def test_broken_link_is_deleted(self, fs, tree):
        (tree / "dangling").symlink_to(tree / "nowhere")

        assert fs.resolve_file("dangling").exists()

        fs.root.delete()

        assert not os.path.lexists(tree / "dangling")

    def test_deleting_folder_keeps_link_target(self, fs, tree, outside):
        (tree / "A" / "link").symlink_to(outside, target_is_directory=True)

        fs.resolve_folder("A").delete()

        assert not (tree / "A").exists()
        assert (outside / "keep").read_text() == "keep"

    def test_copy_recreates_link(self, fs, tree):
        (tree / "A" / "link").symlink_to("x")

        fs.resolve_folder("A").copy_to(fs.resolve_folder("B"))

        assert (tree / "B" / "link").is_symlink()
        assert os.readlink(tree / "B" / "link") == "x"
