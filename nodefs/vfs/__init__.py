"""Virtual File System over interchangeable storage backends.

The VFS gives local disks, in-memory stores and any other hierarchical
storage the same interface: folders and files addressed by
slash-separated paths.

Architecture:

    ```
    FileSystem                  # Owns the store (MemoryFileSystem, LocalFileSystem)
    └── root                    # Folder, always exists
        ├── docs/               # Folder: children(), file(), folder(), create()
        │   └── readme.txt      # File: read_bytes(), write_bytes()
        └── tmp/
    ```

Node Types:

    - Node: Handle naming a location (may not exist yet)
    - Folder: Interior node, children listed lazily on demand
    - File: Leaf node with byte content
    - NodeType: Discriminant used to tell them apart

Path Resolution:

    The PathResolver turns paths into handles without touching storage:
    - Paths are relative to the starting folder, leading slash or not
    - Empty, duplicate and "." segments are ignored
    - ".." steps to the parent, and stays put at the root

Copy and Move:

    - copy_to() replicates a whole subtree to (not into) the target,
      replacing whatever was there
    - move_to() renames when the backend can, else copies and deletes
    - Nested source/target pairs raise SelfContainmentError

Usage Example:

    ```python
    from nodefs.vfs import MemoryFileSystem

    fs = MemoryFileSystem()
    notes = fs.resolve_file("/docs/notes.txt")
    notes.create()
    notes.write_text("hello")

    fs.resolve_folder("docs").copy_to(fs.resolve_folder("backup/docs"))
    for node in fs.root.walk():
        print(node.path)
    ```
"""

from nodefs.vfs.base import (
    Node,
    File,
    Folder,
    FileSystem,
    NodeType,
)
from nodefs.vfs.errors import (
    VFSError,
    PathError,
    InvalidPathError,
    SelfContainmentError,
    UnsupportedOperationError,
)
from nodefs.vfs.resolver import PathResolver
from nodefs.vfs.copier import Copier
from nodefs.vfs.nodes import LocalFileSystem, MemoryFileSystem

__all__ = [
    # Backends
    "LocalFileSystem",
    "MemoryFileSystem",
    # Core classes
    "Node",
    "File",
    "Folder",
    "FileSystem",
    "NodeType",
    # Algorithms
    "PathResolver",
    "Copier",
    # Errors
    "VFSError",
    "PathError",
    "InvalidPathError",
    "SelfContainmentError",
    "UnsupportedOperationError",
]
