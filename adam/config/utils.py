"""Small helpers shared by the configuration models."""

from __future__ import annotations

import os
from pathlib import Path

ENV_PREFIX = "env:"


def resolve_env_reference(value: str | None, *, required: bool = True) -> str | None:
    """Expand ``"env:NAME"`` into the value of the ``NAME`` environment variable.

    Other strings and ``None`` come back untouched. An unset or empty variable
    raises :class:`EnvironmentError` unless ``required`` is false, in which
    case ``None`` is returned.
    """

    if value is None or not value.startswith(ENV_PREFIX):
        return value

    name = value[len(ENV_PREFIX):].strip()
    resolved = os.environ.get(name, "")
    if not resolved and required:
        raise EnvironmentError(f"Environment variable '{name}' is not set or empty")
    return resolved or None


def resolve_path(value: str | Path, base_path: Path | None) -> Path:
    """Anchor a relative ``value`` at ``base_path``; absolute paths pass through."""

    path = Path(value)
    if path.is_absolute() or base_path is None:
        return path
    return (base_path / path).resolve()


__all__ = ["ENV_PREFIX", "resolve_env_reference", "resolve_path"]
