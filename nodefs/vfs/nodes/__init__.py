"""Storage backends for the VFS."""

from nodefs.vfs.nodes.local import LocalFileSystem, LocalFile, LocalFolder
from nodefs.vfs.nodes.memory import MemoryFileSystem, MemoryFile, MemoryFolder

__all__ = [
    "LocalFileSystem",
    "LocalFile",
    "LocalFolder",
    "MemoryFileSystem",
    "MemoryFile",
    "MemoryFolder",
]
