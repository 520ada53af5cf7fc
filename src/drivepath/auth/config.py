from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .scopes import GRAPH_DEFAULT_SCOPE


class Strategy(str, Enum):
    """Supported authentication strategies."""

    DEFAULT = "default"
    CLI = "cli"
    MANAGED_IDENTITY = "managed_identity"
    CLIENT_SECRET = "client_secret"
    CLIENT_CERTIFICATE = "client_certificate"
    INTERACTIVE_BROWSER = "interactive_browser"


class AuthConfig(BaseSettings):
    """Configuration for the credential and token used against Graph.

    Values are read from keyword arguments or from environment variables
    (aliases listed below), then validated for the selected
    :class:`Strategy`.

    Environment variables:
        - AUTH_STRATEGY
        - TENANT_ID
        - CLIENT_ID (alias: MANAGED_IDENTITY_CLIENT_ID)
        - CLIENT_SECRET
        - CLIENT_CERTIFICATE_PATH
        - CLIENT_CERTIFICATE_PASSWORD
        - AUTHORITY_HOST
        - GRAPH_SCOPE
        - TOKEN_REFRESH_MARGIN
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    # The field name is listed in every AliasChoices so that keyword
    # arguments keep working next to the environment aliases.

    strategy: Strategy = Field(
        default=Strategy.DEFAULT,
        validation_alias=AliasChoices("strategy", "AUTH_STRATEGY"),
    )
    tenant_id: str | None = Field(
        default=None, validation_alias=AliasChoices("tenant_id", "TENANT_ID")
    )
    client_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "client_id", "CLIENT_ID", "MANAGED_IDENTITY_CLIENT_ID"
        ),
    )
    client_secret: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("client_secret", "CLIENT_SECRET"),
    )
    certificate_path: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("certificate_path", "CLIENT_CERTIFICATE_PATH"),
    )
    certificate_password: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "certificate_password", "CLIENT_CERTIFICATE_PASSWORD"
        ),
    )
    redirect_uri: str | None = Field(
        default="http://localhost:8400",
        validation_alias=AliasChoices("redirect_uri", "REDIRECT_URI"),
    )
    authority: str | None = Field(
        default=None,
        validation_alias=AliasChoices("authority", "AUTHORITY_HOST"),
    )
    scope: str = Field(
        default=GRAPH_DEFAULT_SCOPE,
        validation_alias=AliasChoices("scope", "GRAPH_SCOPE"),
    )
    refresh_margin_seconds: int = Field(
        default=10,
        ge=0,
        validation_alias=AliasChoices("refresh_margin_seconds", "TOKEN_REFRESH_MARGIN"),
    )

    @field_validator("certificate_path")
    @classmethod
    def _ensure_existing_path(cls, v: Path | None) -> Path | None:
        """Ensure configured paths exist if provided."""
        if v is not None and not v.exists():
            raise ValueError(f"Path does not exist: {v}")
        return v

    @model_validator(mode="after")
    def _cross_field_validation(self) -> "AuthConfig":
        """Validate required fields for the selected strategy."""
        s = self.strategy
        if s is Strategy.CLIENT_SECRET:
            if not (self.tenant_id and self.client_id and self.client_secret):
                raise ValueError(
                    "client_secret requires tenant_id, client_id, and client_secret."
                )
        elif s is Strategy.CLIENT_CERTIFICATE:
            if not (self.tenant_id and self.client_id and self.certificate_path):
                raise ValueError(
                    "client_certificate requires tenant_id, client_id, and certificate_path."
                )
        elif s is Strategy.INTERACTIVE_BROWSER:
            if not (self.tenant_id and self.client_id and self.redirect_uri):
                raise ValueError(
                    "interactive_browser requires tenant_id, client_id and redirect_uri."
                )
        # DEFAULT, CLI and MANAGED_IDENTITY are validated by azure-identity at runtime.
        return self
