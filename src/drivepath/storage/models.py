from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping


class NodeKind(str, Enum):
    """Kinds of node the remote store distinguishes."""

    FILE = "file"
    FOLDER = "folder"


@dataclass
class Node:
    """Represents a file or folder in the remote store's graph."""

    id: str
    name: str
    kind: NodeKind
    parents: tuple[str, ...] = field(default_factory=tuple)
    trashed: bool = False
    time_created: datetime | None = None
    time_last_modified: datetime | None = None
    extra: Mapping[str, Any] | None = None
