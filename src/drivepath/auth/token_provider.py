from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from azure.core.credentials import AccessToken, TokenCredential

from .config import AuthConfig
from .factory import get_credential
from .scopes import GRAPH_DEFAULT_SCOPE

logger = logging.getLogger(__name__)


class TokenProvider:
    """Caches an access token and refreshes it shortly before it expires.

    A single provider can be shared by several storages and threads.
    Refreshes happen under one lock, so at most one refresh is in flight
    and every caller sees the new token once it has been stored.
    """

    def __init__(
        self,
        credential: TokenCredential,
        scope: str = GRAPH_DEFAULT_SCOPE,
        *,
        refresh_margin: float = 10,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the token provider.

        Args:
            credential: Credential used to obtain new tokens.
            scope: Scope requested for every token.
            refresh_margin: Seconds before expiry at which a token is refreshed.
            clock: Source of the current epoch time in seconds.
        """
        self._credential = credential
        self._scope = scope
        self._refresh_margin = refresh_margin
        self._clock = clock
        self._lock = threading.Lock()
        self._access_token: AccessToken | None = None

    @classmethod
    def from_config(cls, config: AuthConfig | None = None) -> "TokenProvider":
        cfg = config or AuthConfig()
        return cls(
            get_credential(cfg),
            cfg.scope,
            refresh_margin=cfg.refresh_margin_seconds,
        )

    def _needs_refresh(self) -> bool:
        return (
            self._access_token is None
            or self._access_token.expires_on - self._clock() < self._refresh_margin
        )

    def get_token(self) -> str:
        """Return a bearer token valid for at least ``refresh_margin`` seconds."""
        with self._lock:
            if self._needs_refresh():
                self._access_token = self._credential.get_token(self._scope)
                logger.debug(
                    "Refreshed access token for %s (expires on %s)",
                    self._scope,
                    self._access_token.expires_on,
                )
            return self._access_token.token

    def invalidate(self) -> None:
        """Drop the cached token so that the next call refreshes it."""
        with self._lock:
            self._access_token = None
