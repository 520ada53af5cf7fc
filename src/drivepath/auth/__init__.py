"""Authentication helpers for the Graph drive backend.

Public API:
- get_credential() → TokenCredential
- AuthConfig (settings)
- Strategy (enum of auth strategies)
- TokenProvider (shared, lock-guarded access token cache)
- GRAPH_DEFAULT_SCOPE (constant for Microsoft Graph)
"""

from .config import AuthConfig, Strategy
from .factory import get_credential
from .scopes import GRAPH_DEFAULT_SCOPE
from .token_provider import TokenProvider

__all__ = [
    "AuthConfig",
    "Strategy",
    "get_credential",
    "TokenProvider",
    "GRAPH_DEFAULT_SCOPE",
]
