"""Error taxonomy raised by the public storage operations."""

from __future__ import annotations


class StorageError(Exception):
    """Base class for every error surfaced by :class:`DriveStorage`."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)


class ConfigurationError(StorageError):
    """The configured root folder (or drive) cannot be found."""


class NotFoundError(StorageError):
    """A path or leaf could not be resolved without creating it."""


class InvalidArgumentError(StorageError):
    """The caller passed a path or local file the operation cannot accept."""


class RemoteOperationError(StorageError):
    """A search, create, delete, upload or download against the remote store failed."""


class LocalIOError(StorageError):
    """Reading, writing or cleaning the local staging area failed."""
