from __future__ import annotations

import threading
import time
from typing import Any

from azure.core.credentials import AccessToken

from drivepath.auth.config import AuthConfig
from drivepath.auth.token_provider import TokenProvider


class _Clock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class _Credential:
    """Issues numbered tokens that live for ``lifetime`` seconds."""

    def __init__(self, clock: _Clock, lifetime: int = 3600, delay: float = 0) -> None:
        self._clock = clock
        self._lifetime = lifetime
        self._delay = delay
        self.scopes: list[tuple[str, ...]] = []

    def get_token(self, *scopes: str, **kwargs: Any) -> AccessToken:
        if self._delay:
            time.sleep(self._delay)
        self.scopes.append(scopes)
        return AccessToken(
            f"token-{len(self.scopes)}", int(self._clock() + self._lifetime)
        )


def test_get_token__is_lazy_and_cached() -> None:
    clock = _Clock()
    credential = _Credential(clock)
    provider = TokenProvider(credential, "scope/.default", clock=clock)

    assert credential.scopes == []
    assert provider.get_token() == "token-1"
    assert provider.get_token() == "token-1"
    assert credential.scopes == [("scope/.default",)]


def test_get_token__refreshes_inside_margin() -> None:
    clock = _Clock()
    credential = _Credential(clock, lifetime=100)
    provider = TokenProvider(credential, refresh_margin=10, clock=clock)

    assert provider.get_token() == "token-1"
    clock.now += 89
    assert provider.get_token() == "token-1"
    clock.now += 2
    assert provider.get_token() == "token-2"


def test_invalidate__forces_refresh() -> None:
    clock = _Clock()
    provider = TokenProvider(_Credential(clock), clock=clock)

    assert provider.get_token() == "token-1"
    provider.invalidate()
    assert provider.get_token() == "token-2"


def test_concurrent_callers__share_one_refresh() -> None:
    clock = _Clock()
    credential = _Credential(clock, delay=0.05)
    provider = TokenProvider(credential, clock=clock)

    results: list[str] = []
    start = threading.Barrier(8)

    def _worker() -> None:
        start.wait()
        results.append(provider.get_token())

    threads = [threading.Thread(target=_worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(credential.scopes) == 1
    assert results == ["token-1"] * 8


def test_from_config__uses_scope_and_margin(monkeypatch) -> None:
    clock = _Clock()
    credential = _Credential(clock)
    monkeypatch.setattr(
        "drivepath.auth.token_provider.get_credential", lambda cfg: credential
    )

    provider = TokenProvider.from_config(
        AuthConfig(scope="api://custom/.default", refresh_margin_seconds=60)
    )
    provider.get_token()

    assert credential.scopes == [("api://custom/.default",)]
    assert provider._refresh_margin == 60
