from __future__ import annotations

from azure.core.credentials import TokenCredential
from azure.identity import (
    AzureCliCredential,
    CertificateCredential,
    ClientSecretCredential,
    DefaultAzureCredential,
    InteractiveBrowserCredential,
    ManagedIdentityCredential,
)

from .config import AuthConfig, Strategy


def get_credential(config: AuthConfig | None = None) -> TokenCredential:
    """Construct a :class:`TokenCredential` based on :class:`AuthConfig`.

    Args:
        config: Auth configuration. If ``None``, it is read from the environment.

    Returns:
        A concrete :class:`TokenCredential`.
    """
    cfg = config or AuthConfig()
    authority = cfg.authority  # may be None

    match cfg.strategy:
        case Strategy.CLI:
            return AzureCliCredential(authority=authority)
        case Strategy.MANAGED_IDENTITY:
            return ManagedIdentityCredential(client_id=cfg.client_id)
        case Strategy.CLIENT_SECRET:
            return ClientSecretCredential(
                tenant_id=cfg.tenant_id,
                client_id=cfg.client_id,
                client_secret=cfg.client_secret.get_secret_value(),
                authority=authority,
            )
        case Strategy.CLIENT_CERTIFICATE:
            return CertificateCredential(
                tenant_id=cfg.tenant_id,
                client_id=cfg.client_id,
                certificate_path=str(cfg.certificate_path),
                password=(
                    cfg.certificate_password.get_secret_value()
                    if cfg.certificate_password
                    else None
                ),
                authority=authority,
            )
        case Strategy.INTERACTIVE_BROWSER:
            return InteractiveBrowserCredential(
                tenant_id=cfg.tenant_id,
                client_id=cfg.client_id,
                authority=authority,
                redirect_uri=cfg.redirect_uri,
            )
        case _:
            return DefaultAzureCredential(authority=authority)
