"""Path-based file storage over graph-shaped remote drives.

Public API:
- DriveStorage (store, remove, create_folder, remove_folder, retrieve,
  retrieve_as_stream, clean)
- StorageSettings
- StorageListener, StorageEvent
- RemoteGraphClient (protocol), Node, NodeKind
- StorageError and its subclasses
"""

from .client import DriveStorage
from .errors import (
    ConfigurationError,
    InvalidArgumentError,
    LocalIOError,
    NotFoundError,
    RemoteOperationError,
    StorageError,
)
from .interfaces import RemoteGraphClient
from .listeners import StorageEvent, StorageListener
from .models import Node, NodeKind
from .settings import StorageSettings

__all__ = [
    "DriveStorage",
    "StorageSettings",
    "StorageListener",
    "StorageEvent",
    "RemoteGraphClient",
    "Node",
    "NodeKind",
    "StorageError",
    "ConfigurationError",
    "NotFoundError",
    "InvalidArgumentError",
    "RemoteOperationError",
    "LocalIOError",
]
