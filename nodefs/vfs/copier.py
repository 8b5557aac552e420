"""Recursive copy and move for VFS nodes.

Copy semantics are "to", not "into": copying folder A onto B makes B a
replica of A. Whatever was at B before (file or folder) is deleted
first, and missing parents of B are created.

Nothing is rolled back. If a copy fails halfway, the children copied so
far stay at the target and the error propagates unchanged.
"""

import logging
from typing import TYPE_CHECKING

from nodefs.vfs.base import NodeType
from nodefs.vfs.errors import SelfContainmentError

if TYPE_CHECKING:
    from nodefs.vfs.base import File, Folder, Node

logger = logging.getLogger(__name__)


class Copier:
    """Tree copy and move built only on the node primitives."""

    @staticmethod
    def copy_folder(source: 'Folder', target: 'Folder') -> None:
        """Copy source and everything below it to target.

        Args:
            source: Existing folder to copy
            target: Destination, replaced if it exists

        Raises:
            TypeError: If target is not a folder handle
            SelfContainmentError: If source and target are nested
            FileNotFoundError: If source does not exist
        """
        Copier._check_kind(source, target)
        Copier._check_not_nested(source, target)
        Copier._check_exists(source)
        logger.debug(f"Copying folder {source.path} to {target.path}")

        Copier._clear_target(target)
        target.create()

        for child in source.children():
            if child.node_type is NodeType.FOLDER:
                child.copy_to(target.folder(child.name))
            else:
                child.copy_to(target.file(child.name))

    @staticmethod
    def copy_file(source: 'File', target: 'File') -> None:
        """Copy the content of source to target.

        Raises:
            TypeError: If target is not a file handle
            SelfContainmentError: If target is source
            FileNotFoundError: If source does not exist
        """
        Copier._check_kind(source, target)
        Copier._check_not_nested(source, target)
        Copier._check_exists(source)
        logger.debug(f"Copying file {source.path} to {target.path}")

        Copier._clear_target(target)
        source._copy_content_to(target)

    @staticmethod
    def move(source: 'Node', target: 'Node') -> None:
        """Move source to target, replacing target.

        Uses the backend's rename when it supports one for this pair.
        Otherwise copies and then deletes the source; that fallback is
        not atomic, and an interruption between the two steps leaves
        both trees in place.
        """
        Copier._check_kind(source, target)
        Copier._check_not_nested(source, target)
        Copier._check_exists(source)

        if source.supports_rename_to(target):
            logger.debug(f"Renaming {source.path} to {target.path}")
            Copier._clear_target(target)
            source._rename_to(target)
            return

        logger.debug(f"Moving {source.path} to {target.path} by copy and delete")
        if source.node_type is NodeType.FOLDER:
            Copier.copy_folder(source, target)
        else:
            Copier.copy_file(source, target)
        source.delete()

    @staticmethod
    def _check_kind(source: 'Node', target: 'Node') -> None:
        if source.node_type is not target.node_type:
            raise TypeError(
                f"Cannot copy {source.node_type.value} {source.path} "
                f"onto a {target.node_type.value} handle {target.path}"
            )

    @staticmethod
    def _check_not_nested(source: 'Node', target: 'Node') -> None:
        if source == target:
            raise SelfContainmentError(f"Cannot copy {source.path} onto itself")
        if source.node_type is NodeType.FOLDER and source.is_ancestor_of(target):
            raise SelfContainmentError(
                f"Cannot copy {source.path} to its descendant {target.path}"
            )
        # Clearing the target location would delete the source with it
        location = target.filesystem.folder_at(target.parts)
        if location.is_ancestor_of(source):
            raise SelfContainmentError(
                f"Cannot copy {source.path} to its ancestor {target.path}"
            )

    @staticmethod
    def _check_exists(source: 'Node') -> None:
        if not source.exists():
            raise FileNotFoundError(f"No such {source.node_type.value}: {source.path}")

    @staticmethod
    def _clear_target(target: 'Node') -> None:
        """Delete anything at target's location and create its parents."""
        if target.exists():
            logger.debug(f"Deleting existing {target.node_type.value} {target.path}")
            target.delete()
        counterpart = target._counterpart()
        if counterpart is not None and counterpart.exists():
            logger.debug(f"Deleting existing {counterpart.node_type.value} {counterpart.path}")
            counterpart.delete()

        parent = target.parent
        if parent is not None:
            parent.create()
