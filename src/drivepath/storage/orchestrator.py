from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from .errors import (
    InvalidArgumentError,
    NotFoundError,
    RemoteOperationError,
    StorageError,
)
from .interfaces import RemoteGraphClient
from .listeners import StorageEvent, StorageListener
from .models import NodeKind
from .paths import folder_segments, is_blank, looks_like_folder, split_path
from .resolver import NodeReconciler, PathResolver, RootLocator
from .staging import LocalFileSystem

logger = logging.getLogger(__name__)


class StorageOrchestrator:
    """Path-based file operations composed from graph primitives.

    Every operation locates the root and walks the path again; nothing is
    cached between calls. Overwrites are a delete followed by a create,
    so concurrent calls on the same path may interleave.

    Success hooks of registered listeners run once the operation has
    completed, outside the error boundary: an exception raised by a hook
    reaches the caller unchanged and the remote change is not undone.
    """

    def __init__(
        self,
        client: RemoteGraphClient,
        root_name: str,
        staging_dir: str | Path,
        *,
        fs: LocalFileSystem | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            client: Remote store the operations run against.
            root_name: Name of the folder all paths are relative to.
            staging_dir: Local directory where retrieved files are written.
            fs: Local file operations, mostly replaced in tests.
        """
        self._client = client
        self._staging_dir = Path(staging_dir)
        self._fs = fs or LocalFileSystem()
        self._root_locator = RootLocator(client, root_name)
        self._resolver = PathResolver(client)
        self._reconciler = NodeReconciler(client)
        self._listeners: list[StorageListener] = []

    @property
    def staging_dir(self) -> Path:
        return self._staging_dir

    def register_listener(self, listener: StorageListener) -> None:
        self._listeners.append(listener)

    @contextmanager
    def _operation(self, path: str | None) -> Iterator[None]:
        """Surface every failure as a single StorageError and notify listeners."""
        try:
            yield
        except StorageError as e:
            if e.path is None:
                e.path = path
            self._notify_error(e)
            raise
        except Exception as e:
            error = RemoteOperationError(str(e) or type(e).__name__, path=path)
            self._notify_error(error)
            raise error from e

    def _notify_error(self, error: StorageError) -> None:
        logger.debug("Storage operation failed: %s", error.message)
        for listener in self._listeners:
            listener.on_error(error)

    def _resolve_parent(self, segments: list[str], create_missing: bool) -> str | None:
        root_id = self._root_locator.locate_root()
        return self._resolver.resolve(root_id, segments, create_missing)

    def store(self, local_file: str | Path, target_folder: str | None = None) -> str:
        """Upload a local file into ``target_folder``, replacing same-named entries.

        Example:
            local_file = /var/www/html/index.html
            target_folder = None        -> <root>/index.html
            target_folder = "myfolder"  -> <root>/myfolder/index.html

        Missing folders in ``target_folder`` are created. Every existing
        node with the file's name in the target folder is deleted before
        the new file is created.

        Args:
            local_file: Path of the local file to upload.
            target_folder: Folder path below the root, or None for the root.

        Returns:
            The id of the new file node.

        Raises:
            InvalidArgumentError: If ``local_file`` is a directory.
            ConfigurationError: If the root folder does not exist.
            RemoteOperationError: If a remote call fails.
            LocalIOError: If the local file cannot be read.
        """
        source_path = Path(local_file)
        with self._operation(str(source_path)):
            with self._fs.open_source(source_path) as source:
                parent_id = self._resolve_parent(
                    folder_segments(target_folder), create_missing=True
                )
                self._reconciler.reconcile_by_name(parent_id, source_path.name)
                node = self._client.create_file_with_content(
                    source_path.name, parent_id, source
                )

        logger.info("Stored %s in %s", source_path, target_folder or "/")
        event = StorageEvent(
            operation="store",
            path=_join(target_folder, source_path.name),
            node_id=node.id,
            local_path=str(source_path),
        )
        for listener in self._listeners:
            listener.on_file_stored(event)
        return node.id

    def remove(self, path: str) -> None:
        """Delete every file (or folder) named like the leaf of ``path``.

        Missing intermediate folders are created on the way, which makes
        removing a non-existent path a silent no-op. A path ending with a
        separator names no file: its folders are resolved and nothing is
        deleted.

        Raises:
            InvalidArgumentError: If the path is blank.
            ConfigurationError: If the root folder does not exist.
            RemoteOperationError: If a remote call fails.
        """
        with self._operation(path):
            if is_blank(path):
                raise InvalidArgumentError("Invalid path.  The path shouldn't be empty.")
            if looks_like_folder(path):
                segments, leaf = folder_segments(path), ""
            else:
                segments, leaf = split_path(path)
            parent_id = self._resolve_parent(segments, create_missing=True)
            deleted = self._reconciler.reconcile_by_name(parent_id, leaf) if leaf else []

        logger.info("Removed %s (%d node(s))", path, len(deleted))
        event = StorageEvent(operation="remove", path=path)
        for listener in self._listeners:
            listener.on_file_removed(event)

    def create_folder(self, path: str) -> str:
        """Create every missing folder of ``path``; existing folders are reused.

        Returns:
            The id of the deepest folder.

        Raises:
            InvalidArgumentError: If the path is blank.
            ConfigurationError: If the root folder does not exist.
            RemoteOperationError: If a remote call fails.
        """
        with self._operation(path):
            segments = folder_segments(path)
            if not segments:
                raise InvalidArgumentError("Invalid path.  The path shouldn't be empty.")
            folder_id = self._resolve_parent(segments, create_missing=True)

        logger.info("Created folder %s", path)
        event = StorageEvent(operation="create_folder", path=path, node_id=folder_id)
        for listener in self._listeners:
            listener.on_folder_created(event)
        return folder_id

    def remove_folder(self, path: str) -> None:
        """Delete the folder located at ``path``.

        A blank path is ignored. Whether a non-empty folder can be deleted
        is up to the remote store.

        Raises:
            NotFoundError: If any folder of the path does not exist.
            ConfigurationError: If the root folder does not exist.
            RemoteOperationError: If a remote call fails.
        """
        segments = folder_segments(path)
        if not segments:
            return

        with self._operation(path):
            folder_id = self._resolve_parent(segments, create_missing=False)
            if folder_id is None:
                raise NotFoundError(f"{path} doesn't exist within storage.", path=path)
            self._client.delete_node(folder_id)

        logger.info("Removed folder %s", path)
        event = StorageEvent(operation="remove_folder", path=path, node_id=folder_id)
        for listener in self._listeners:
            listener.on_folder_removed(event)

    def _download(self, path: str) -> tuple[str, Path]:
        """Download the file at ``path`` into the staging directory."""
        if is_blank(path):
            raise InvalidArgumentError("Invalid path.  The path shouldn't be empty.")
        if looks_like_folder(path):
            raise InvalidArgumentError(
                "Invalid path.  Looks like you're trying to retrieve a folder."
            )

        segments, leaf = split_path(path)
        parent_id = self._resolve_parent(segments, create_missing=False)
        if parent_id is None:
            raise NotFoundError(f"{path} doesn't exist within storage.", path=path)

        files = self._client.search_by_name_and_parent(leaf, parent_id, NodeKind.FILE)
        if not files:
            raise NotFoundError(f"{path} doesn't exist within storage.", path=path)

        node = files[0]
        staged = self._fs.write_stream(
            self._staging_dir / node.name, self._client.download_content(node.id)
        )
        return node.id, staged

    def retrieve(self, path: str) -> str:
        """Download the file at ``path`` and return the local staged path.

        The file is written to the staging directory under its own name,
        so retrieving two files with the same name from different folders
        overwrites the first staged copy.

        Raises:
            InvalidArgumentError: If the path is blank or ends with a separator.
            NotFoundError: If the folder prefix or the file does not exist.
            ConfigurationError: If the root folder does not exist.
            RemoteOperationError: If a remote call fails.
            LocalIOError: If the staged file cannot be written.
        """
        with self._operation(path):
            node_id, staged = self._download(path)

        self._notify_retrieved(path, node_id, staged)
        return str(staged)

    def retrieve_as_stream(self, path: str) -> BinaryIO:
        """Download the file at ``path`` and return an open binary reader on it.

        The caller owns the returned handle and must close it.
        """
        with self._operation(path):
            node_id, staged = self._download(path)
            reader = self._fs.open_for_read(staged)

        self._notify_retrieved(path, node_id, staged)
        return reader

    def _notify_retrieved(self, path: str, node_id: str, staged: Path) -> None:
        logger.info("Retrieved %s to %s", path, staged)
        event = StorageEvent(
            operation="retrieve", path=path, node_id=node_id, local_path=str(staged)
        )
        for listener in self._listeners:
            listener.on_file_retrieved(event)

    def clean(self) -> None:
        """Empty the local staging directory. The remote store is not touched."""
        with self._operation(str(self._staging_dir)):
            self._fs.clear_directory(self._staging_dir)


def _join(folder: str | None, name: str) -> str:
    return "/".join([*folder_segments(folder), name])
