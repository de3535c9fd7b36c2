"""Validate configuration files and describe the available settings."""

from __future__ import annotations

from pathlib import Path
from types import UnionType
from typing import Any, Iterator, Literal, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo

from .app import AppConfig
from .base import load_config
from .utils import resolve_path

DEFAULT_PAGE_SIZE = 50

# exit code per failure kind reported by ``check_config``
EXIT_CODES: dict[str, int] = {
    "invalid_format": 1,
    "missing_file": 2,
    "permission_error": 2,
    "validation_error": 3,
}


class ConfigInspectionError(RuntimeError):
    """Raised when a configuration file cannot be inspected for an unexpected reason."""


def check_config(
    path: Path, *, config_cls: type[AppConfig] = AppConfig
) -> tuple[dict[str, Any], int, AppConfig | None]:
    """Load ``path`` and report problems as a JSON-friendly dict.

    Returns ``(report, exit_code, config)``; ``config`` is ``None`` whenever
    loading failed.
    """

    try:
        config = load_config(config_cls, path)
    except FileNotFoundError as exc:
        return _failure(path, "missing_file", str(exc))
    except ValidationError as exc:
        details = [
            {
                "loc": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        return _failure(path, "validation_error", "Configuration validation failed", details)
    except PermissionError as exc:
        return _failure(path, "permission_error", str(exc))
    except ValueError as exc:  # TOML syntax errors
        return _failure(path, "invalid_format", str(exc))
    except Exception as exc:  # pragma: no cover - unexpected failures
        raise ConfigInspectionError(f"Unexpected error while inspecting {path}") from exc

    report = {
        "status": "ok",
        "config_path": str(path),
        "warnings": catalog_warnings(config, Path(path).resolve().parent),
    }
    return report, 0, config


def catalog_warnings(config: AppConfig, config_dir: Path) -> list[str]:
    """Settings that load fine but will probably not behave as intended."""
    warnings: list[str] = []
    catalog = config.catalog

    if catalog.source == "local":
        data_dir = resolve_path(catalog.data_dir, config_dir)
        if not data_dir.exists():
            warnings.append(f"Catalog data directory does not exist: {data_dir}")
        elif not (data_dir / catalog.manifest_name).exists():
            warnings.append(f"Catalog manifest '{catalog.manifest_name}' not found in {data_dir}")
    if catalog.page_size != DEFAULT_PAGE_SIZE:
        warnings.append(f"Non-default page size configured: {catalog.page_size}")
    if config.web is not None and (config.web.auth is None or not config.web.auth.enabled):
        warnings.append("Web API is configured without authentication")

    return warnings


def explain_config(*, config_cls: type[BaseModel] = AppConfig) -> list[dict[str, Any]]:
    """Flatten the configuration models into one entry per dotted field name."""
    return list(_describe(config_cls, prefix=""))


def _failure(
    path: Path, kind: str, message: str, details: list[dict[str, Any]] | None = None
) -> tuple[dict[str, Any], int, None]:
    error: dict[str, Any] = {"type": kind, "message": message}
    if details is not None:
        error["details"] = details
    return {"status": "error", "config_path": str(path), "error": error}, EXIT_CODES[kind], None


def _describe(model_cls: type[BaseModel], prefix: str) -> Iterator[dict[str, Any]]:
    for name, field in model_cls.model_fields.items():
        dotted = f"{prefix}{name}"
        yield {
            "name": dotted,
            "type": _type_name(field.annotation),
            "required": field.is_required(),
            "default": _default_of(field),
            "description": field.description or "",
        }
        nested = _nested_model(field.annotation)
        if nested is not None:
            yield from _describe(nested, prefix=f"{dotted}.")


def _nested_model(annotation: Any) -> type[BaseModel] | None:
    candidates = get_args(annotation) if get_origin(annotation) in (Union, UnionType) else (annotation,)
    for candidate in candidates:
        if isinstance(candidate, type) and issubclass(candidate, BaseModel):
            return candidate
    return None


def _type_name(annotation: Any) -> str:
    if annotation is type(None):
        return "None"
    origin = get_origin(annotation)
    args = get_args(annotation)
    if origin in (Union, UnionType):
        return " | ".join(_type_name(arg) for arg in args)
    if origin is Literal:
        return "Literal[" + ", ".join(repr(arg) for arg in args) + "]"
    if origin is not None:
        inner = ", ".join(_type_name(arg) for arg in args)
        return f"{getattr(origin, '__name__', str(origin))}[{inner}]"
    return getattr(annotation, "__name__", str(annotation))


def _default_of(field: FieldInfo) -> Any:
    if field.is_required():
        return None
    return _plain(field.get_default(call_default_factory=True))


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


__all__ = ["ConfigInspectionError", "catalog_warnings", "check_config", "explain_config"]
