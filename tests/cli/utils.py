"""Shared helpers for CLI tests."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path

from loguru import logger
from pytest import MonkeyPatch

from adam.config import AppConfig, CatalogConfig


@contextmanager
def logger_to_stderr(level: str = "INFO"):
    """Temporarily route Loguru output to stderr for assertion."""

    handler_id = logger.add(sys.stderr, level=level)
    try:
        yield
    finally:
        logger.remove(handler_id)


def write_config(base_dir: Path, data_dir: Path, *, extra: str = "") -> Path:
    """Write a minimal TOML config pointing the local catalog at ``data_dir``."""

    config_file = base_dir / "config.toml"
    config_file.write_text(
        f"""
logging_level = "INFO"

[catalog]
source = "local"
data_dir = "{data_dir.relative_to(base_dir).as_posix()}"
{extra}
""",
        encoding="utf-8",
    )
    return config_file


def make_app_config(data_dir: Path, *, page_size: int = 50) -> AppConfig:
    """Construct an in-memory AppConfig tailored for CLI tests."""

    return AppConfig(
        logging_level="INFO",
        catalog=CatalogConfig(source="local", data_dir=str(data_dir), page_size=page_size),
        web=None,
    )


def patch_load_config(monkeypatch: MonkeyPatch, config: AppConfig) -> None:
    """Force the CLI to return the provided config instead of reading from disk."""

    def _fake_load_config(model: object, path: Path) -> AppConfig:
        if model is not AppConfig:
            raise AssertionError("Unexpected config model request")
        return config

    monkeypatch.setattr("adam.cli.load_config", _fake_load_config)
