"""Path resolution for the Virtual File System.

Turns a slash-separated path into a chain of Folder.folder() /
Folder.file() lookups. Resolution never touches storage: the handle it
returns may name something that does not exist yet.
"""

from typing import TYPE_CHECKING, List

from nodefs.vfs.errors import InvalidPathError

if TYPE_CHECKING:
    from nodefs.vfs.base import File, Folder


class PathResolver:
    """Resolves paths relative to a starting folder.

    It handles:
    - Relative paths: docs/notes.txt
    - Leading slashes, which are ignored: /docs is the same as docs
    - Empty and duplicate segments: a//b/ is the same as a/b
    - Special segments: . (stay), .. (parent, or stay at the root)
    """

    @staticmethod
    def split_path(path: str) -> List[str]:
        """Split a path into the segments that take part in resolution.

        Args:
            path: Path to split

        Returns:
            Segments with empty and "." entries removed
        """
        return [part for part in path.split("/") if part and part != "."]

    @staticmethod
    def resolve_folder(folder: 'Folder', path: str) -> 'Folder':
        """Resolve a path to a folder handle.

        Args:
            folder: Folder the path is relative to
            path: Path to resolve

        Returns:
            Folder handle; the starting folder itself for an empty path
        """
        node = folder
        for part in PathResolver.split_path(path):
            node = PathResolver._step(node, part)
        return node

    @staticmethod
    def resolve_file(folder: 'Folder', path: str) -> 'File':
        """Resolve a path to a file handle.

        Args:
            folder: Folder the path is relative to
            path: Path to resolve

        Returns:
            File handle

        Raises:
            InvalidPathError: If the path does not end in a file name
        """
        parts = PathResolver.split_path(path)
        if not parts:
            raise InvalidPathError(f"Path {path!r} does not name a file")
        if parts[-1] == "..":
            raise InvalidPathError(f"Path {path!r} ends in '..' and cannot name a file")

        node = folder
        for part in parts[:-1]:
            node = PathResolver._step(node, part)
        return node.file(parts[-1])

    @staticmethod
    def _step(folder: 'Folder', part: str) -> 'Folder':
        if part == "..":
            # Stay at root if already at root
            parent = folder.parent
            return parent if parent is not None else folder
        return folder.folder(part)
