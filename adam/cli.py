"""Command line interface for the adam article catalog."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import typer
import uvicorn
from loguru import logger

from .catalog import CatalogBrowser, CatalogLoadError, CatalogView, build_loader
from .config import AppConfig, load_config
from .config.inspector import check_config, explain_config
from .config.utils import resolve_path
from .logs import setup_logging
from .web import create_app


@dataclass(slots=True)
class CLIState:
    """Holds shared state between Typer commands."""

    config_path: Path
    legacy_dry_run: bool = False
    _config: AppConfig | None = None

    def ensure_config(self) -> AppConfig:
        if self._config is None:
            logger.info("Loading configuration from {}", self.config_path)
            self._config = load_config(AppConfig, self.config_path)
            setup_logging(self._config.logging_level, self._resolve_log_file(self._config))
        return self._config

    def build_browser(self) -> CatalogBrowser:
        config = self.ensure_config()
        catalog = config.catalog
        loader = build_loader(catalog, base_path=self.config_path.parent)
        return CatalogBrowser(
            loader,
            page_size=catalog.page_size,
            default_levels=catalog.default_levels,
            preferred_level=catalog.preferred_level,
        )

    def _resolve_log_file(self, config: AppConfig) -> Path | None:
        if config.log_file is None:
            return None
        return resolve_path(config.log_file, self.config_path.parent)


app = typer.Typer(help="ADAM article catalog helpers")
config_app = typer.Typer(help="Validate and document configuration files")
app.add_typer(config_app, name="config")


def _default_config_path() -> Path:
    repo_root = Path(__file__).resolve().parents[1]
    return repo_root / "config" / "example.toml"


def _normalize_format(value: str) -> str:
    return value.lower()


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):  # pragma: no cover - defensive guard
        raise RuntimeError("CLI context is not initialised")
    return state


def _exit(code: int) -> None:
    raise typer.Exit(code)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config: Path = typer.Option(
        _default_config_path(),
        help="Path to the TOML configuration file",
    ),
    dry_run: bool = typer.Option(
        False,
        help="(legacy) Equivalent to 'status --dry-run' when no command is provided",
    ),
) -> None:
    """Initialise CLI state and handle legacy --dry-run usage."""

    state = CLIState(config_path=config.resolve(), legacy_dry_run=dry_run)
    ctx.obj = state

    if ctx.invoked_subcommand is None:
        config_obj = state.ensure_config()
        if dry_run:
            _report_system_status(config_obj, state.config_path.parent)
            _exit(0)
        logger.warning("No command provided. Try 'languages' or 'search --language <name>'.")
        _exit(0)


@app.command(help="Show configuration status")
def status(
    ctx: typer.Context,
    dry_run: bool = typer.Option(
        False,
        help="Load configuration and report catalog availability",
    ),
) -> None:
    state = _get_state(ctx)
    config = state.ensure_config()

    if not (dry_run or state.legacy_dry_run):
        logger.info("Status command currently supports --dry-run only; showing status.")
    _report_system_status(config, state.config_path.parent)


@app.command(help="List the languages offered by the catalog")
def languages(
    ctx: typer.Context,
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format",
        callback=_normalize_format,
    ),
) -> None:
    state = _get_state(ctx)
    browser = state.build_browser()

    try:
        names = browser.list_languages()
    except CatalogLoadError as exc:
        logger.error("Failed to list languages: {}", exc)
        _exit(1)
        return

    if format == "json":
        print(json.dumps({"languages": names}, indent=2, ensure_ascii=False))
        return
    for name in names:
        print(name)


@app.command(help="Filter the articles of a language and print one page")
def search(
    ctx: typer.Context,
    language: str = typer.Option(..., "--language", "-l", help="Language to load"),
    topic: str = typer.Option("", "--topic", "-t", help="Case-insensitive text to look for"),
    level: str | None = typer.Option(
        None,
        "--level",
        help="Exact ILR level (defaults to the catalog's preferred level when present)",
    ),
    all_levels: bool = typer.Option(False, "--all-levels", help="Disable the level filter"),
    low: float | None = typer.Option(None, "--low", help="Lowest accepted ILR range start"),
    high: float | None = typer.Option(None, "--high", help="Highest accepted ILR range end"),
    page: int = typer.Option(1, "--page", min=1, help="Page number to show"),
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format",
        callback=_normalize_format,
    ),
) -> None:
    state = _get_state(ctx)
    browser = state.build_browser()

    try:
        asyncio.run(browser.select_language(language))
    except CatalogLoadError as exc:
        logger.error("Failed to load language '{}': {}", language, exc)
        _exit(1)
        return

    changes: dict[str, Any] = {"topic": topic, "low_bound": low, "high_bound": high}
    if all_levels:
        changes["level"] = None
    elif level is not None:
        changes["level"] = level
    browser.update_criteria(**changes)

    view = browser.advance(page - 1)
    if view.current_page != page:
        logger.warning("Page {} is out of range; showing page {} of {}", page, view.current_page, view.total_pages)

    if format == "json":
        print(json.dumps(view.to_dict(), indent=2, ensure_ascii=False))
        return
    _print_view(view)


@app.command(help="Run the catalog API server")
def serve(
    ctx: typer.Context,
    host: str | None = typer.Option(None, help="Host to bind the API server to (defaults to config)"),
    port: int | None = typer.Option(None, help="Port to bind the API server to (defaults to config)"),
    dry_run: bool = typer.Option(
        False,
        help="Build the application and report settings without running the server",
    ),
) -> None:
    state = _get_state(ctx)
    config = state.ensure_config()

    bind_host = host or (config.web.host if config.web else "127.0.0.1")
    bind_port = port or (config.web.port if config.web else 8000)

    browser = state.build_browser()
    app_instance = create_app(browser, config)
    logger.info("Catalog API configured for {}:{}", bind_host, bind_port)

    if dry_run:
        logger.info("[Dry Run] Server will not be started.")
        return

    uvicorn.run(app_instance, host=bind_host, port=bind_port)


@config_app.command(help="Validate the configuration file")
def check(
    ctx: typer.Context,
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format for validation results",
        callback=_normalize_format,
    ),
) -> None:
    state = _get_state(ctx)
    report, exit_code, _ = check_config(state.config_path)

    if format == "json":
        print(json.dumps(report, indent=2, ensure_ascii=False, default=str))
    elif exit_code == 0:
        logger.info("Configuration OK: {}", report["config_path"])
        for warning in report["warnings"]:
            logger.warning(warning)
    else:
        _log_config_error(report)
    _exit(exit_code)


@config_app.command(help="Describe available configuration fields")
def explain(
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format for configuration schema",
        callback=_normalize_format,
    ),
) -> None:
    fields = explain_config()

    if format == "json":
        print(json.dumps({"fields": fields}, indent=2, ensure_ascii=False, default=str))
        return

    logger.info("Configuration schema ({} fields):", len(fields))
    for entry in fields:
        default = entry["default"]
        shown = json.dumps(default, ensure_ascii=False, default=str) if isinstance(default, (dict, list)) else default
        logger.info(
            "  - {} ({}{}): default={} | {}",
            entry["name"],
            entry["type"],
            ", required" if entry["required"] else "",
            shown,
            entry["description"] or "(no description)",
        )


def _log_config_error(report: dict[str, Any]) -> None:
    error = report["error"]
    logger.error("Configuration error ({}) for {}: {}", error["type"], report["config_path"], error["message"])
    for detail in error.get("details", []):
        logger.error("  - {}: {} ({})", detail["loc"] or "<root>", detail["message"], detail["type"])


def _print_view(view: CatalogView) -> None:
    criteria = view.criteria
    print(
        f"{view.language} | level={criteria.level or 'all'} | topic={criteria.topic!r} "
        f"| range=[{criteria.low_bound}, {criteria.high_bound}]"
    )
    print(f"{view.total_results} results, page {view.current_page} of {view.total_pages}")
    for card in view.to_dict()["articles"]:
        print("")
        print(f"[ILR {card['ilr_quantized'] or 'N/A'}] {card['title'] or '(untitled)'}")
        print(f"  ILR Range: {card['ilr_range']}")
        if card["summary"]:
            print(f"  {card['summary']}")
        if card["translated_summary"]:
            print(f"  Translated: {card['translated_summary']}")
        if card["link"]:
            print(f"  {card['link']}")


def _report_system_status(config: AppConfig, config_dir: Path) -> None:
    """Log a summary of the configuration."""

    logger.info("=== General Configuration ===")
    logger.info("Logging level: {}", config.logging_level)
    logger.info("Log file: {}", config.log_file or "stderr only")

    logger.info("\n=== Catalog Configuration ===")
    catalog = config.catalog
    logger.info("Source: {}", catalog.source)
    if catalog.source == "http":
        logger.info("Base URL: {}", catalog.base_url)
        logger.info("Timeout: {}s, Max retries: {}", catalog.timeout, catalog.max_retries)
    else:
        data_dir = resolve_path(catalog.data_dir, config_dir)
        logger.info("Data dir: {} (exists={})", data_dir, data_dir.exists())
    logger.info("Manifest: {}", catalog.manifest_name)
    logger.info("Page size: {}", catalog.page_size)
    logger.info("Default levels: {}", ", ".join(catalog.default_levels))
    logger.info("Preferred level: {}", catalog.preferred_level or "none")

    logger.info("\n=== Web API ===")
    if config.web:
        logger.info("Bind: {}:{}", config.web.host, config.web.port)
        auth = config.web.auth
        logger.info("Auth enabled: {}", bool(auth and auth.enabled))
    else:
        logger.info("Not configured")


def main(argv: list[str] | None = None) -> int:
    """Entry point compatible with setuptools console scripts."""

    try:
        result = app(args=argv, standalone_mode=False)
    except typer.Exit as exc:  # pragma: no cover - Typer translates exit codes
        return exc.exit_code
    if isinstance(result, int):
        return result
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
