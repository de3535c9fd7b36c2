"""Loguru sink setup for the CLI and the API server."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

_DEFAULT_HANDLER_ID = 0
_sink_ids: list[int] = []


def _stderr_sink(message: str) -> None:
    # Resolve sys.stderr at write time so redirected streams are honoured.
    sys.stderr.write(message)


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> None:
    """Route logs to stderr at ``level`` and optionally to a rotating JSON file.

    Only sinks registered here (and loguru's default one) are replaced, so
    handlers added by callers keep receiving records.
    """

    try:
        logger.remove(_DEFAULT_HANDLER_ID)
    except ValueError:
        pass  # already removed by an earlier call
    while _sink_ids:
        logger.remove(_sink_ids.pop())

    level = level.upper()
    _sink_ids.append(logger.add(_stderr_sink, level=level))

    if log_file is None:
        return
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _sink_ids.append(
            logger.add(
                log_file,
                rotation="5 MB",
                retention=5,
                enqueue=True,
                serialize=True,
                level=level,
            )
        )
    except OSError as exc:  # pragma: no cover - filesystem issues are environment-specific
        logger.warning("Failed to initialise file log sink {}: {}", log_file, exc)


__all__ = ["setup_logging"]
