from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from drivepath.storage.client import DriveStorage
from drivepath.storage.graph.client import GraphDriveClient
from drivepath.storage.settings import GRAPH_BASE_URL, StorageSettings


def test_defaults() -> None:
    settings = StorageSettings(root="root")
    assert settings.tmp == Path(tempfile.gettempdir()) / "drivepath"
    assert settings.graph_base_url == GRAPH_BASE_URL
    assert settings.page_size == 500
    assert settings.drive_id is None


def test_reads_prefixed_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("DRIVEPATH_ROOT", "storage")
    monkeypatch.setenv("DRIVEPATH_TMP", str(tmp_path))
    monkeypatch.setenv("DRIVEPATH_DRIVE_ID", "b!drive")

    settings = StorageSettings()
    assert settings.root == "storage"
    assert settings.tmp == tmp_path
    assert settings.drive_id == "b!drive"


@pytest.mark.parametrize("root", ["", "   ", "a/b"])
def test_root_must_be_single_name(root: str) -> None:
    with pytest.raises(ValueError):
        StorageSettings(root=root)


def test_root_is_stripped() -> None:
    assert StorageSettings(root="  root ").root == "root"


def test_drive_storage__builds_graph_backend_with_shared_provider() -> None:
    class _Provider:
        def get_token(self) -> str:
            return "t"

    provider = _Provider()
    settings = StorageSettings(root="root", drive_id="b!drive", page_size=50)

    first = DriveStorage(settings, token_provider=provider)
    second = DriveStorage(settings, token_provider=provider)

    assert isinstance(first.client, GraphDriveClient)
    assert first.client.drive_id == "b!drive"
    assert first.client.page_size == 50
    assert first.token_provider is second.token_provider is provider
