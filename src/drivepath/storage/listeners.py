from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .errors import StorageError


@dataclass
class StorageEvent:
    """Describes a completed storage operation."""

    operation: str
    path: str
    node_id: str | None = None
    local_path: str | None = None


class StorageListener:
    """Adapter base class for storage notifications.

    Subclasses override only the hooks they care about. Hooks are called
    synchronously, on the thread that ran the operation. Exceptions raised
    by a hook are not converted into a StorageError; they propagate to the
    caller after the operation itself has already taken effect.
    """

    def on_file_stored(self, event: StorageEvent) -> None:
        pass

    def on_file_removed(self, event: StorageEvent) -> None:
        pass

    def on_folder_created(self, event: StorageEvent) -> None:
        pass

    def on_folder_removed(self, event: StorageEvent) -> None:
        pass

    def on_file_retrieved(self, event: StorageEvent) -> None:
        pass

    def on_error(self, error: "StorageError") -> None:
        pass
