"""Graph walks that turn storage paths into node ids.

None of these classes cache anything: every call goes back to the
remote store, starting from the root.
"""

from __future__ import annotations

import logging
from typing import Iterator, Sequence

from .errors import ConfigurationError
from .interfaces import RemoteGraphClient
from .models import NodeKind

logger = logging.getLogger(__name__)


class RootLocator:
    """Finds the folder configured as the base of all paths."""

    def __init__(self, client: RemoteGraphClient, root_name: str) -> None:
        self._client = client
        self._root_name = root_name

    def locate_root(self) -> str:
        """Return the id of the configured root folder.

        Raises:
            ConfigurationError: If no folder with the root name exists.
        """
        matches = self._client.search_by_name_and_parent(
            self._root_name, None, NodeKind.FOLDER
        )
        if not matches:
            raise ConfigurationError(
                f"{self._root_name} doesn't exist as a root storage."
            )
        if len(matches) > 1:
            logger.warning(
                "Found %d folders named %s; using the first one (%s).",
                len(matches),
                self._root_name,
                matches[0].id,
            )
        return matches[0].id


class PathResolver:
    """Walks folder segments from a parent node, optionally creating them."""

    def __init__(self, client: RemoteGraphClient) -> None:
        self._client = client

    def walk(
        self, parent_id: str, segments: Sequence[str], create_missing: bool
    ) -> Iterator[str]:
        """Yield the node id reached after each segment.

        The walk stops early, without yielding the missing segment, when a
        folder does not exist and ``create_missing`` is False. When several
        folders share a name, the first one reported by the store is used.
        """
        current = parent_id
        for segment in segments:
            folders = self._client.search_by_name_and_parent(
                segment, current, NodeKind.FOLDER
            )
            if folders:
                current = folders[0].id
            elif create_missing:
                current = self._client.create_folder(segment, current).id
                logger.debug("Created folder %s (%s)", segment, current)
            else:
                logger.debug("Folder %s not found under %s", segment, current)
                return
            yield current

    def resolve(
        self, parent_id: str, segments: Sequence[str], create_missing: bool
    ) -> str | None:
        """Resolve ``segments`` below ``parent_id``.

        Args:
            parent_id: Node id the walk starts from.
            segments: Ordered folder names to traverse.
            create_missing: Create absent folders instead of failing.

        Returns:
            The id of the last folder, ``parent_id`` for an empty segment
            list, or None when a segment is missing and creation is off.
        """
        current = parent_id
        resolved = 0
        for current in self.walk(parent_id, segments, create_missing):
            resolved += 1
        if resolved < len(segments):
            return None
        return current


class NodeReconciler:
    """Removes same-named siblings so that a name can be (re)used."""

    def __init__(self, client: RemoteGraphClient) -> None:
        self._client = client

    def reconcile_by_name(self, parent_id: str, name: str) -> list[str]:
        """Delete every node called ``name`` directly under ``parent_id``.

        Returns:
            The ids of the deleted nodes, in the order they were deleted.
        """
        deleted: list[str] = []
        for node in self._client.search_by_name_and_parent(name, parent_id):
            self._client.delete_node(node.id)
            logger.debug("Deleted %s (%s) under %s", name, node.id, parent_id)
            deleted.append(node.id)
        return deleted
