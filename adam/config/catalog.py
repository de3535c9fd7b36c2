"""Configuration models for the article catalog."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator, model_validator

from adam.config.base import BaseConfig


class CatalogConfig(BaseConfig):
    """Where articles come from and how result pages are sized."""

    source: Literal["local", "http"] = Field("local", description="Catalog source: local directory or HTTP")
    data_dir: str = Field("./data", description="Local data directory (relative to the config file)")
    base_url: str | None = Field(None, description="Base URL serving the manifest and data files")
    manifest_name: str = Field(
        "available_files.json",
        description="Manifest mapping each language to its data files",
        min_length=1,
    )

    # Browsing
    page_size: int = Field(50, ge=1, description="Number of articles per result page")
    default_levels: list[str] = Field(
        default_factory=lambda: ["1", "2", "3", "4", "5"],
        description="Levels offered when the loaded articles carry none",
        min_length=1,
    )
    preferred_level: str | None = Field(
        "1", description="Level selected after loading a language, when available",
    )

    # HTTP fetch settings
    max_retries: int = Field(3, ge=1, description="Max attempts per HTTP request")
    retry_delay: float = Field(1.0, ge=0, description="Delay between retries (seconds)")
    timeout: float = Field(30.0, gt=0, description="HTTP request timeout (seconds)")

    @field_validator("preferred_level")
    @classmethod
    def _blank_level_means_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None

    @model_validator(mode="after")
    def _ensure_base_url_for_http(self) -> "CatalogConfig":
        if self.source == "http" and not self.base_url:
            msg = "base_url must be provided when catalog source is 'http'."
            raise ValueError(msg)
        return self


__all__ = ["CatalogConfig"]
