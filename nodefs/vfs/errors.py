"""Errors raised by the Virtual File System.

I/O failures are not wrapped: backends raise the builtin ``OSError``
family (``FileNotFoundError``, ``FileExistsError``, ...) and the core lets
them propagate unchanged.
"""


class VFSError(Exception):
    """Base class for errors raised by nodefs itself."""
    pass


class PathError(VFSError):
    """Error resolving a path."""
    pass


class InvalidPathError(PathError, ValueError):
    """Malformed path, or an empty path where a file name is required."""
    pass


class SelfContainmentError(VFSError, ValueError):
    """Copy or move target is the source, or nested with it."""
    pass


class UnsupportedOperationError(VFSError, NotImplementedError):
    """Optional capability not offered by the backend."""
    pass
