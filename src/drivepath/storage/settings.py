from __future__ import annotations

import tempfile
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"


class StorageSettings(BaseSettings):
    """Settings for a :class:`DriveStorage`.

    Read from keyword arguments or from ``DRIVEPATH_*`` environment
    variables (e.g. ``DRIVEPATH_ROOT``, ``DRIVEPATH_TMP``,
    ``DRIVEPATH_DRIVE_ID``).
    """

    model_config = SettingsConfigDict(
        env_prefix="DRIVEPATH_",
        case_sensitive=False,
        extra="ignore",
    )

    root: str
    tmp: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()) / "drivepath")
    drive_id: str | None = None
    site_url: str | None = None
    graph_base_url: str = GRAPH_BASE_URL
    page_size: int = Field(default=500, gt=0)
    timeout: float = Field(default=60, gt=0)

    @field_validator("root")
    @classmethod
    def _validate_root(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("root must not be empty.")
        if "/" in v:
            raise ValueError("root must be a single folder name, not a path.")
        return v
