"""Configuration namespace for adam."""

from __future__ import annotations

from .app import AppConfig
from .base import BaseConfig, load_config
from .catalog import CatalogConfig
from .utils import resolve_env_reference, resolve_path
from .web import WebAuthConfig, WebConfig

__all__ = [
    "BaseConfig",
    "AppConfig",
    "load_config",
    "CatalogConfig",
    "WebAuthConfig",
    "WebConfig",
    "resolve_env_reference",
    "resolve_path",
]
