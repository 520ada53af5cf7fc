from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from drivepath.auth.config import AuthConfig
from drivepath.auth.token_provider import TokenProvider

from .graph.client import GraphDriveClient
from .interfaces import RemoteGraphClient
from .listeners import StorageListener
from .orchestrator import StorageOrchestrator
from .settings import StorageSettings

logger = logging.getLogger(__name__)


class DriveStorage:
    """Path-based storage on top of a graph-shaped remote drive.

    The storage owns its settings and remote client. With no client
    given, a :class:`GraphDriveClient` is built from the settings and
    either the given token provider or one created from ``auth``.
    Token providers may be shared between storages.
    """

    def __init__(
        self,
        settings: StorageSettings | None = None,
        *,
        auth: AuthConfig | None = None,
        token_provider: TokenProvider | None = None,
        client: RemoteGraphClient | None = None,
    ) -> None:
        """Initialize the storage.

        Args:
            settings: Storage settings. If omitted, read from ``DRIVEPATH_*``
                environment variables.
            auth: Authentication configuration, used only when neither
                ``token_provider`` nor ``client`` is given.
            token_provider: Shared token provider for the Graph backend.
            client: Remote client to use instead of the Graph backend.
        """
        self._settings = settings or StorageSettings()

        if client is None:
            self._token_provider = token_provider or TokenProvider.from_config(auth)
            client = self._create_graph_backend(self._token_provider)
        else:
            self._token_provider = token_provider

        self._client = client
        self._orchestrator = StorageOrchestrator(
            client, self._settings.root, self._settings.tmp
        )

    def _create_graph_backend(self, token_provider: TokenProvider) -> GraphDriveClient:
        return GraphDriveClient(
            token_provider,
            drive_id=self._settings.drive_id,
            site_url=self._settings.site_url,
            base_url=self._settings.graph_base_url,
            page_size=self._settings.page_size,
            timeout=self._settings.timeout,
        )

    @property
    def settings(self) -> StorageSettings:
        return self._settings

    @property
    def client(self) -> RemoteGraphClient:
        return self._client

    @property
    def token_provider(self) -> TokenProvider | None:
        return self._token_provider

    def register_listener(self, listener: StorageListener) -> None:
        self._orchestrator.register_listener(listener)

    # Delegate methods:

    def store(self, local_file: str | Path, target_folder: str | None = None) -> str:
        return self._orchestrator.store(local_file, target_folder)

    def remove(self, path: str) -> None:
        self._orchestrator.remove(path)

    def create_folder(self, path: str) -> str:
        return self._orchestrator.create_folder(path)

    def remove_folder(self, path: str) -> None:
        self._orchestrator.remove_folder(path)

    def retrieve(self, path: str) -> str:
        return self._orchestrator.retrieve(path)

    def retrieve_as_stream(self, path: str) -> BinaryIO:
        return self._orchestrator.retrieve_as_stream(path)

    def clean(self) -> None:
        self._orchestrator.clean()
