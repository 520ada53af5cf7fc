from __future__ import annotations

import os
from typing import Any, Iterator

import pytest

import drivepath.auth.factory as factory


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Remove environment variables to prevent cross-test leakage.

    Yields:
        Iterator[None]: Context manager semantics for pytest.
    """
    to_clear = [k for k in os.environ.keys()]
    for k in to_clear:
        monkeypatch.delenv(k, raising=False)
    yield


class _Recorder:
    """Factory to create recorder classes that capture init kwargs."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.cls = self._make(name)

    @staticmethod
    def _make(name: str):
        class _C:
            last_args: tuple[Any, ...] | None = None
            last_kwargs: dict[str, Any] | None = None
            call_count: int = 0

            def __init__(self, *args: Any, **kwargs: Any) -> None:
                type(self).last_args = args
                type(self).last_kwargs = dict(kwargs)
                type(self).call_count += 1

        _C.__name__ = name
        _C.__qualname__ = name
        return _C


@pytest.fixture()
def recorded_credentials(monkeypatch: pytest.MonkeyPatch) -> dict[str, Any]:
    """Replace the credential classes used by the factory with recorders.

    Returns:
        dict[str, Any]: Recorder classes by credential name, for assertions.
    """
    names = [
        "DefaultAzureCredential",
        "AzureCliCredential",
        "ManagedIdentityCredential",
        "ClientSecretCredential",
        "CertificateCredential",
        "InteractiveBrowserCredential",
    ]
    recorders = {n: _Recorder(n).cls for n in names}
    for n, cls in recorders.items():
        monkeypatch.setattr(factory, n, cls)
    return recorders
