"""Base classes for the Virtual File System.

The VFS gives every storage backend the same shape: a tree of folders
and files addressed by slash-separated names. Backends implement a small
set of primitives and inherit everything else.

Architecture:
    - NodeType: Discriminant carried by every node (file or folder)
    - Node: Identity shared by files and folders (name, parent, path)
    - File: Leaf node with byte content
    - Folder: Interior node whose children are listed on demand
    - FileSystem: Owner of the backing store, hands out the root folder

Primitives a backend must provide:
    - Folder: children(), file(name), folder(name), create(), delete(), exists()
    - File: read_bytes(), write_bytes(data), delete(), exists()

Derived operations (files(), folders(), walk(), resolve_file(),
resolve_folder(), copy_to(), move_to(), is_ancestor_of()) are built on
those primitives only.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Hashable, Iterator, Optional, Tuple

from nodefs.vfs.errors import InvalidPathError, UnsupportedOperationError


class NodeType(Enum):
    """Type of VFS node."""
    FILE = "file"
    FOLDER = "folder"


class Node(ABC):
    """Base class for all VFS nodes.

    A Node is a handle, not the thing itself: it names a location in a
    filesystem and may be created, compared and passed around before
    anything exists there. Handles are equal when they have the same
    absolute path in the same backing store (filesystems compare equal
    when they share storage, see FileSystem) and also the same kind: a
    file handle and a folder handle at one path are never equal, although
    only one of them can exist at a time.

    The parent is not stored. A node keeps only its own path segments and
    asks its filesystem for a fresh parent handle on every access, so a
    child never holds its parent alive.

    Attributes:
        name: The last path segment ("" for the root)
        filesystem: FileSystem this handle belongs to
        node_type: Kind of node (file or folder)
    """

    node_type: NodeType

    def __init__(self, filesystem: 'FileSystem', parts: Tuple[str, ...] = ()):
        """Initialize a VFS node.

        Args:
            filesystem: Owning filesystem
            parts: Path segments from the root to this node
        """
        self.filesystem = filesystem
        self._parts = tuple(parts)
        self.name = self._parts[-1] if self._parts else ""

    @property
    def parts(self) -> Tuple[str, ...]:
        """Path segments from the root to this node."""
        return self._parts

    @property
    def parent(self) -> Optional['Folder']:
        """Containing folder, or None for the root."""
        if not self._parts:
            return None
        return self.filesystem.folder_at(self._parts[:-1])

    @property
    def path(self) -> str:
        """Absolute path, like /docs/notes.txt."""
        return "/" + "/".join(self._parts)

    def is_file(self) -> bool:
        return self.node_type is NodeType.FILE

    def is_folder(self) -> bool:
        return self.node_type is NodeType.FOLDER

    @abstractmethod
    def exists(self) -> bool:
        """Check whether a node of this kind exists at this path."""
        pass

    @abstractmethod
    def delete(self) -> None:
        """Delete this node from storage. Does nothing if it is missing."""
        pass

    def set_creation_time(self, instant: datetime) -> None:
        """Set the creation time of this node.

        Not every backend can record creation times. Backends that cannot
        keep this default and always raise.

        Raises:
            UnsupportedOperationError: If the backend has no creation time
        """
        raise UnsupportedOperationError(
            f"{self.filesystem.__class__.__name__} does not support setting the creation time"
        )

    def supports_rename_to(self, target: 'Node') -> bool:
        """Whether the backend can move this node to target in one rename."""
        return False

    def _rename_to(self, target: 'Node') -> None:
        """Atomically rename this node to target.

        Only called when supports_rename_to(target) is true, after the
        target location was cleared and its parent created.
        """
        raise UnsupportedOperationError(f"Cannot rename {self.path}")

    def _child_parts(self, name: str) -> Tuple[str, ...]:
        """Path segments of a child called name, validating the name."""
        if not isinstance(name, str) or not name:
            raise InvalidPathError(f"Invalid node name: {name!r}")
        if "/" in name or name in (".", ".."):
            raise InvalidPathError(f"Invalid node name: {name!r}")
        return self._parts + (name,)

    def _counterpart(self) -> Optional['Node']:
        """Handle of the other kind at the same path (None for the root)."""
        parent = self.parent
        if parent is None:
            return None
        if self.is_file():
            return parent.folder(self.name)
        return parent.file(self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return (
            self.node_type is other.node_type
            and self.filesystem == other.filesystem
            and self._parts == other._parts
        )

    def __hash__(self) -> int:
        return hash((self.node_type, self.filesystem, self._parts))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', path='{self.path}')"


class File(Node):
    """A leaf node with byte content.

    A File handle is only a reference; obtaining one never touches
    storage.
    """

    node_type = NodeType.FILE

    @abstractmethod
    def read_bytes(self) -> bytes:
        """Read the whole content of this file.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        pass

    @abstractmethod
    def write_bytes(self, data: bytes) -> None:
        """Replace the content of this file, creating it if needed.

        Raises:
            FileNotFoundError: If the parent folder does not exist
        """
        pass

    def read_text(self, encoding: str = "utf-8") -> str:
        return self.read_bytes().decode(encoding)

    def write_text(self, text: str, encoding: str = "utf-8") -> None:
        self.write_bytes(text.encode(encoding))

    def create(self) -> None:
        """Create an empty file and its parent folders if it is missing."""
        if self.exists():
            return
        parent = self.parent
        if parent is not None:
            parent.create()
        self.write_bytes(b"")

    def copy_to(self, target: 'File') -> None:
        """Copy this file to (not into) target, replacing whatever is there.

        Args:
            target: Destination file. Must not be this file.
        """
        from nodefs.vfs.copier import Copier

        Copier.copy_file(self, target)

    def move_to(self, target: 'File') -> None:
        """Move this file to target, replacing whatever is there."""
        from nodefs.vfs.copier import Copier

        Copier.move(self, target)

    def _copy_content_to(self, target: 'File') -> None:
        """Duplicate this file's bytes into target.

        Backends with a faster native copy override this.
        """
        target.write_bytes(self.read_bytes())


class Folder(Node):
    """An interior node whose children are produced on demand.

    A Folder holds no child collection. Every call to children() asks
    the backend again, and I/O errors may surface while the returned
    iterator is consumed rather than when children() is called.
    """

    node_type = NodeType.FOLDER

    @abstractmethod
    def children(self) -> Iterator[Node]:
        """Iterate over the direct children of this folder.

        The iterator may be populated lazily, so ``OSError`` can be raised
        by ``next()`` after some children were already produced.
        """
        pass

    @abstractmethod
    def file(self, name: str) -> File:
        """Get a handle to the child file called name.

        Never checks storage: the file may not exist, or a folder may
        live at that path instead.

        Raises:
            InvalidPathError: If name is not a single valid segment
        """
        pass

    @abstractmethod
    def folder(self, name: str) -> 'Folder':
        """Get a handle to the child folder called name.

        Never checks storage: the folder may not exist, or a file may
        live at that path instead.

        Raises:
            InvalidPathError: If name is not a single valid segment
        """
        pass

    @abstractmethod
    def create(self) -> None:
        """Create this folder and all its parents. No effect if it exists.

        Raises:
            FileExistsError: If a file occupies this path
        """
        pass

    def files(self) -> Iterator[File]:
        """children() filtered to files, still lazy."""
        return (child for child in self.children() if child.node_type is NodeType.FILE)

    def folders(self) -> Iterator['Folder']:
        """children() filtered to folders, still lazy."""
        return (child for child in self.children() if child.node_type is NodeType.FOLDER)

    def walk(self) -> Iterator[Node]:
        """Yield every descendant, depth first, parents before children."""
        for child in self.children():
            yield child
            if child.node_type is NodeType.FOLDER:
                yield from child.walk()

    def resolve_file(self, path: str) -> File:
        """Get a file by resolving a path relative to this folder.

        Args:
            path: Unix-style path, relative to this folder whether or not
                it starts with a slash

        Raises:
            InvalidPathError: If the path has no file name
        """
        from nodefs.vfs.resolver import PathResolver

        return PathResolver.resolve_file(self, path)

    def resolve_folder(self, path: str) -> 'Folder':
        """Get a folder by resolving a path relative to this folder.

        An empty path returns this folder.
        """
        from nodefs.vfs.resolver import PathResolver

        return PathResolver.resolve_folder(self, path)

    def copy_to(self, target: 'Folder') -> None:
        """Recursively copy this folder to (not into) target.

        Missing parents of target are created. If target exists it is
        deleted first, so the result replaces it rather than merging.

        Args:
            target: Destination folder. Must not be this folder or nested
                with it.
        """
        from nodefs.vfs.copier import Copier

        Copier.copy_folder(self, target)

    def move_to(self, target: 'Folder') -> None:
        """Move this folder and its contents to target, replacing it."""
        from nodefs.vfs.copier import Copier

        Copier.move(self, target)

    def is_ancestor_of(self, node: Node) -> bool:
        """Check whether node lives somewhere below this folder.

        A folder is not its own ancestor.
        """
        parent = node.parent
        while parent is not None:
            if parent == self:
                return True
            parent = parent.parent
        return False


class FileSystem(ABC):
    """Owner of a backing store.

    Handles never reference each other directly; they carry path segments
    and come back here to rebuild related handles.

    Two FileSystem objects are equal when they front the same storage, so
    handles obtained through either of them alias each other. Backends
    override _storage_key() to say what identifies their storage; the
    default is the object itself.
    """

    @property
    @abstractmethod
    def root(self) -> Folder:
        """The root folder. It always exists."""
        pass

    def folder_at(self, parts: Tuple[str, ...]) -> Folder:
        """Rebuild the folder handle for the given segments."""
        folder = self.root
        for name in parts:
            folder = folder.folder(name)
        return folder

    def file_at(self, parts: Tuple[str, ...]) -> File:
        """Rebuild the file handle for the given segments."""
        if not parts:
            raise InvalidPathError("The root is not a file")
        return self.folder_at(tuple(parts[:-1])).file(parts[-1])

    def resolve_file(self, path: str) -> File:
        return self.root.resolve_file(path)

    def resolve_folder(self, path: str) -> Folder:
        return self.root.resolve_folder(path)

    def _storage_key(self) -> Hashable:
        return (FileSystem, id(self))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileSystem):
            return NotImplemented
        return self._storage_key() == other._storage_key()

    def __hash__(self) -> int:
        return hash(self._storage_key())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
