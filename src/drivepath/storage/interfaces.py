from __future__ import annotations

from typing import BinaryIO, Iterator, Protocol

from .models import Node, NodeKind


class RemoteGraphClient(Protocol):
    """Protocol for the primitives offered by a graph-shaped remote store.

    Implementations address nodes by opaque id only; the store has no
    notion of paths. Searches never return trashed nodes and preserve
    the order reported by the store.
    """

    def search_by_name_and_parent(
        self,
        name: str,
        parent_id: str | None,
        kind: NodeKind | None = None,
    ) -> list[Node]:
        """Return nodes named exactly ``name`` under ``parent_id`` (anywhere if None)."""
        raise NotImplementedError

    def create_folder(self, name: str, parent_id: str) -> Node:
        """Create a folder node under ``parent_id``."""
        raise NotImplementedError

    def create_file_with_content(
        self, name: str, parent_id: str, content: BinaryIO
    ) -> Node:
        """Create a file node under ``parent_id`` and upload ``content`` into it."""
        raise NotImplementedError

    def delete_node(self, node_id: str) -> None:
        """Permanently delete a node."""
        raise NotImplementedError

    def download_content(self, node_id: str) -> Iterator[bytes]:
        """Stream a file node's content as chunks of bytes."""
        raise NotImplementedError
