"""HTTP API configuration models."""

from __future__ import annotations

from pydantic import Field, field_validator, model_validator

from adam.config.base import BaseConfig
from adam.config.utils import resolve_env_reference


class WebAuthConfig(BaseConfig):
    """Settings for protecting the catalog API."""

    enabled: bool = Field(
        False, description="Whether header token authentication is enforced.",
    )
    header_name: str = Field(
        "X-Console-Token",
        description="Header to read the authentication token from.",
        min_length=1,
    )
    token: str | None = Field(
        default=None, description="Shared secret token, can use 'env:VAR_NAME' format.",
        min_length=1,
    )

    @field_validator("token")
    @classmethod
    def _strip_token(cls, token: str | None) -> str | None:
        if token is None:
            return None
        stripped = token.strip()
        return stripped if stripped else None

    @model_validator(mode="after")
    def _ensure_token_when_enabled(self) -> "WebAuthConfig":
        if self.enabled and not self.token:
            msg = "Authentication token must be provided when web auth is enabled."
            raise ValueError(msg)
        return self

    @property
    def token_secret(self) -> str:
        """Return the resolved token, expanding any ``env:VAR`` references."""

        resolved = resolve_env_reference(self.token)
        return resolved or ""


class WebConfig(BaseConfig):
    """Settings for the FastAPI catalog service."""

    host: str = Field("127.0.0.1", description="Host to bind the API server to")
    port: int = Field(8000, ge=1, le=65535, description="Port to bind the API server to")
    auth: WebAuthConfig | None = Field(
        default=None,
        description="Authentication settings for the API.",
    )


__all__ = ["WebAuthConfig", "WebConfig"]
