"""Application-level configuration models."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field

from adam.config.base import BaseConfig
from adam.config.catalog import CatalogConfig
from adam.config.web import WebConfig


class AppConfig(BaseConfig):
    """Top-level runtime configuration for the entire application."""

    logging_level: str = Field("INFO", description="Log level: DEBUG, INFO, WARNING, ERROR")
    log_file: Path | None = Field(None, description="Optional path of a rotating JSON log file")

    catalog: CatalogConfig = Field(default_factory=CatalogConfig, description="Article catalog configuration")
    web: WebConfig | None = Field(None, description="HTTP API configuration")


__all__ = ["AppConfig"]
