"""Local disk VFS backend.

Maps VFS paths onto a directory of the real filesystem. The root folder
of a LocalFileSystem is that directory. Path segments can never contain
"/" or "..", so a path alone cannot leave it.

Symbolic links are reported as files and never followed when listing,
deleting or copying: a link to a directory is not a folder, deleting it
removes the link only, and copying it recreates the link.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Iterator, Union

from nodefs.vfs.base import File, FileSystem, Folder, Node

logger = logging.getLogger(__name__)


class LocalFileSystem(FileSystem):
    """Filesystem rooted at a local directory.

    Args:
        root: Directory that becomes the VFS root. It is not created here.
    """

    def __init__(self, root: Union[str, Path]):
        self.root_path = Path(root).expanduser().resolve()

    @property
    def root(self) -> 'LocalFolder':
        return LocalFolder(self)

    def _storage_key(self):
        return (LocalFileSystem, self.root_path)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(root='{self.root_path}')"


class LocalNode(Node):
    """Behaviour shared by local files and folders."""

    filesystem: LocalFileSystem

    @property
    def os_path(self) -> Path:
        """Location of this node on disk."""
        return self.filesystem.root_path.joinpath(*self._parts)

    def supports_rename_to(self, target: Node) -> bool:
        return (
            isinstance(target, LocalNode)
            and target.filesystem == self.filesystem
            and target.node_type is self.node_type
        )

    def _rename_to(self, target: Node) -> None:
        os.replace(self.os_path, target.os_path)


class LocalFile(LocalNode, File):
    """File handle in a LocalFileSystem."""

    def exists(self) -> bool:
        return self.os_path.is_symlink() or self.os_path.is_file()

    def read_bytes(self) -> bytes:
        return self.os_path.read_bytes()

    def write_bytes(self, data: bytes) -> None:
        self.os_path.write_bytes(data)

    def delete(self) -> None:
        if self.exists():
            logger.debug(f"Removing {self.os_path}")
            self.os_path.unlink()

    def _copy_content_to(self, target: File) -> None:
        if isinstance(target, LocalFile):
            shutil.copyfile(self.os_path, target.os_path, follow_symlinks=False)
        else:
            super()._copy_content_to(target)


class LocalFolder(LocalNode, Folder):
    """Folder handle in a LocalFileSystem."""

    def exists(self) -> bool:
        return self.os_path.is_dir() and not self.os_path.is_symlink()

    def children(self) -> Iterator[Node]:
        with os.scandir(self.os_path) as entries:
            for entry in entries:
                if entry.is_dir(follow_symlinks=False):
                    yield self.folder(entry.name)
                else:
                    yield self.file(entry.name)

    def file(self, name: str) -> LocalFile:
        return LocalFile(self.filesystem, self._child_parts(name))

    def folder(self, name: str) -> 'LocalFolder':
        return LocalFolder(self.filesystem, self._child_parts(name))

    def create(self) -> None:
        self.os_path.mkdir(parents=True, exist_ok=True)

    def delete(self) -> None:
        if not self.exists():
            return
        if not self._parts:
            # Keep the root directory itself, only empty it
            for child in list(self.children()):
                child.delete()
            return
        logger.debug(f"Removing tree {self.os_path}")
        shutil.rmtree(self.os_path)
