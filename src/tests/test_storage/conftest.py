from __future__ import annotations

import itertools
from pathlib import Path
from typing import BinaryIO, Iterator

import pytest

from drivepath.storage.client import DriveStorage
from drivepath.storage.models import Node, NodeKind
from drivepath.storage.settings import StorageSettings


class InMemoryGraphClient:
    """RemoteGraphClient backed by a dict, recording every call.

    Like the real stores, sibling names are not required to be unique and
    deleting a folder deletes everything below it.
    """

    def __init__(self) -> None:
        self.nodes: dict[str, Node] = {}
        self.content: dict[str, bytes] = {}
        self.calls: list[tuple] = []
        self._ids = itertools.count(1)
        self.fail_on: str | None = None

    def _check(self, operation: str) -> None:
        if self.fail_on == operation:
            raise ConnectionError(f"{operation} failed")

    def add(
        self,
        name: str,
        parent_id: str | None = None,
        kind: NodeKind = NodeKind.FOLDER,
        content: bytes | None = None,
        trashed: bool = False,
    ) -> Node:
        """Insert a node directly, without recording a call."""
        node = Node(
            id=f"n{next(self._ids)}",
            name=name,
            kind=kind,
            parents=(parent_id,) if parent_id else (),
            trashed=trashed,
        )
        self.nodes[node.id] = node
        if content is not None:
            self.content[node.id] = content
        return node

    def children(self, parent_id: str, name: str | None = None) -> list[Node]:
        return [
            n
            for n in self.nodes.values()
            if parent_id in n.parents
            and not n.trashed
            and (name is None or n.name == name)
        ]

    def search_by_name_and_parent(
        self, name: str, parent_id: str | None, kind: NodeKind | None = None
    ) -> list[Node]:
        self.calls.append(("search", name, parent_id, kind))
        self._check("search")
        return [
            n
            for n in self.nodes.values()
            if n.name == name
            and not n.trashed
            and (parent_id is None or parent_id in n.parents)
            and (kind is None or n.kind is kind)
        ]

    def create_folder(self, name: str, parent_id: str) -> Node:
        self.calls.append(("create_folder", name, parent_id))
        self._check("create_folder")
        return self.add(name, parent_id, NodeKind.FOLDER)

    def create_file_with_content(
        self, name: str, parent_id: str, content: BinaryIO
    ) -> Node:
        self.calls.append(("create_file", name, parent_id))
        self._check("create_file")
        return self.add(name, parent_id, NodeKind.FILE, content.read())

    def delete_node(self, node_id: str) -> None:
        self.calls.append(("delete", node_id))
        self._check("delete")
        for child in self.children(node_id):
            self.delete_node(child.id)
        del self.nodes[node_id]
        self.content.pop(node_id, None)

    def download_content(self, node_id: str) -> Iterator[bytes]:
        self.calls.append(("download", node_id))
        self._check("download")
        data = self.content[node_id]
        for i in range(0, len(data), 4):
            yield data[i : i + 4]


@pytest.fixture(autouse=True)
def clear_storage_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("DRIVEPATH_ROOT", "DRIVEPATH_TMP", "DRIVEPATH_DRIVE_ID", "DRIVEPATH_SITE_URL"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def remote() -> InMemoryGraphClient:
    """A remote store holding an empty root folder called ``root``."""
    client = InMemoryGraphClient()
    client.root = client.add("root")
    return client


@pytest.fixture()
def staging(tmp_path: Path) -> Path:
    return tmp_path / "staging"


@pytest.fixture()
def storage(remote: InMemoryGraphClient, staging: Path) -> DriveStorage:
    settings = StorageSettings(root="root", tmp=staging)
    return DriveStorage(settings, client=remote)


@pytest.fixture()
def local_file(tmp_path: Path) -> Path:
    source = tmp_path / "hello.txt"
    source.write_bytes(b"Hello World!")
    return source
