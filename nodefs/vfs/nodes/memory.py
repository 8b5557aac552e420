"""In-memory VFS backend.

MemoryFileSystem owns a tree of entries. Handles only carry path
segments and look their entry up on each call, so a handle stays valid
(but stale) after the entry it names is deleted.

It doubles as the test backend: inject_failure() makes chosen operations
raise OSError so error propagation and partial results can be observed.
"""

import errno
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, Optional, Tuple

from nodefs.vfs.base import File, FileSystem, Folder, Node, NodeType
from nodefs.vfs.resolver import PathResolver

logger = logging.getLogger(__name__)

FAULT_OPERATIONS = ("list", "read", "write", "create", "delete")


@dataclass
class MemoryEntry:
    """Stored state of one file or folder."""
    node_type: NodeType
    content: bytes = b""
    children: Dict[str, 'MemoryEntry'] = field(default_factory=dict)
    creation_time: Optional[datetime] = None


class MemoryFileSystem(FileSystem):
    """Filesystem kept entirely in a Python dict tree.

    Usage:
        >>> fs = MemoryFileSystem()
        >>> fs.resolve_file("docs/readme.txt").create()
        >>> [child.name for child in fs.resolve_folder("docs").children()]
        ['readme.txt']
    """

    def __init__(self):
        self._root_entry = MemoryEntry(NodeType.FOLDER)
        self._failures: Dict[Tuple[str, Tuple[str, ...]], int] = {}

    @property
    def root(self) -> 'MemoryFolder':
        return MemoryFolder(self)

    def inject_failure(self, path: str, operation: str = "list", after: int = 0) -> None:
        """Make an operation on path raise OSError.

        Args:
            path: Path of the node, relative to the root
            operation: One of "list", "read", "write", "create", "delete"
            after: For "list", how many children are produced before the
                failure. Ignored for other operations.
        """
        if operation not in FAULT_OPERATIONS:
            raise ValueError(f"Unknown operation {operation!r}, expected one of {FAULT_OPERATIONS}")
        parts = tuple(PathResolver.split_path(path))
        self._failures[(operation, parts)] = after
        logger.debug(f"Injected {operation} failure at /{'/'.join(parts)}")

    def clear_failures(self) -> None:
        self._failures.clear()

    def _check_failure(self, operation: str, parts: Tuple[str, ...]) -> None:
        if (operation, parts) in self._failures:
            raise _injected_error(operation, parts)

    def _lookup(self, parts: Tuple[str, ...]) -> Optional[MemoryEntry]:
        entry = self._root_entry
        for name in parts:
            if entry.node_type is not NodeType.FOLDER:
                return None
            entry = entry.children.get(name)
            if entry is None:
                return None
        return entry

    def _folder_entry(self, parts: Tuple[str, ...]) -> Optional[MemoryEntry]:
        entry = self._lookup(parts)
        if entry is None or entry.node_type is not NodeType.FOLDER:
            return None
        return entry


def _injected_error(operation: str, parts: Tuple[str, ...]) -> OSError:
    return OSError(errno.EIO, f"Injected {operation} failure", "/" + "/".join(parts))


class MemoryNode(Node):
    """Behaviour shared by memory files and folders."""

    filesystem: MemoryFileSystem

    def _entry(self) -> Optional[MemoryEntry]:
        entry = self.filesystem._lookup(self._parts)
        if entry is None or entry.node_type is not self.node_type:
            return None
        return entry

    def _existing_entry(self) -> MemoryEntry:
        entry = self._entry()
        if entry is None:
            raise FileNotFoundError(errno.ENOENT, f"No such {self.node_type.value}", self.path)
        return entry

    def exists(self) -> bool:
        return self._entry() is not None

    def set_creation_time(self, instant: datetime) -> None:
        self._existing_entry().creation_time = instant

    def creation_time(self) -> Optional[datetime]:
        """Creation time set through set_creation_time(), if any."""
        return self._existing_entry().creation_time

    def supports_rename_to(self, target: Node) -> bool:
        return (
            isinstance(target, MemoryNode)
            and target.filesystem == self.filesystem
            and target.node_type is self.node_type
        )

    def _rename_to(self, target: Node) -> None:
        source_parent = self.filesystem._folder_entry(self._parts[:-1])
        target_parent = self.filesystem._folder_entry(target.parts[:-1])
        if target_parent is None:
            raise FileNotFoundError(errno.ENOENT, "No such folder", target.path)
        entry = source_parent.children.pop(self.name)
        target_parent.children[target.name] = entry

    def _delete_entry(self) -> None:
        self.filesystem._check_failure("delete", self._parts)
        if self._entry() is None:
            return
        parent_entry = self.filesystem._folder_entry(self._parts[:-1])
        del parent_entry.children[self.name]


class MemoryFile(MemoryNode, File):
    """File handle in a MemoryFileSystem."""

    def read_bytes(self) -> bytes:
        self.filesystem._check_failure("read", self._parts)
        return self._existing_entry().content

    def write_bytes(self, data: bytes) -> None:
        self.filesystem._check_failure("write", self._parts)
        parent_entry = self.filesystem._folder_entry(self._parts[:-1])
        if parent_entry is None:
            raise FileNotFoundError(errno.ENOENT, "No such folder", self.parent.path)

        entry = parent_entry.children.get(self.name)
        if entry is None:
            parent_entry.children[self.name] = MemoryEntry(NodeType.FILE, content=bytes(data))
        elif entry.node_type is NodeType.FOLDER:
            raise IsADirectoryError(errno.EISDIR, "Is a folder", self.path)
        else:
            entry.content = bytes(data)

    def delete(self) -> None:
        self._delete_entry()


class MemoryFolder(MemoryNode, Folder):
    """Folder handle in a MemoryFileSystem."""

    def children(self) -> Iterator[Node]:
        entry = self._entry()
        if entry is None:
            raise FileNotFoundError(errno.ENOENT, "No such folder", self.path)

        fail_after = self.filesystem._failures.get(("list", self._parts))
        # Snapshot names so callers can mutate this folder while iterating
        for index, (name, child) in enumerate(list(entry.children.items())):
            if fail_after is not None and index >= fail_after:
                raise _injected_error("list", self._parts)
            if child.node_type is NodeType.FOLDER:
                yield MemoryFolder(self.filesystem, self._parts + (name,))
            else:
                yield MemoryFile(self.filesystem, self._parts + (name,))
        if fail_after is not None:
            raise _injected_error("list", self._parts)

    def file(self, name: str) -> MemoryFile:
        return MemoryFile(self.filesystem, self._child_parts(name))

    def folder(self, name: str) -> 'MemoryFolder':
        return MemoryFolder(self.filesystem, self._child_parts(name))

    def create(self) -> None:
        self.filesystem._check_failure("create", self._parts)
        entry = self.filesystem._root_entry
        for depth, name in enumerate(self._parts, start=1):
            child = entry.children.get(name)
            if child is None:
                child = MemoryEntry(NodeType.FOLDER)
                entry.children[name] = child
            elif child.node_type is not NodeType.FOLDER:
                raise FileExistsError(errno.EEXIST, "A file exists", "/" + "/".join(self._parts[:depth]))
            entry = child

    def delete(self) -> None:
        if not self._parts:
            # The root always exists; deleting it empties it
            self.filesystem._check_failure("delete", self._parts)
            self.filesystem._root_entry.children.clear()
            return
        self._delete_entry()
