"""Catalog loaders: list languages and fetch the raw records of one language.

A catalog is a manifest (``available_files.json`` by default) mapping each
language to the data files holding its articles. Data files are CSV (first
row is the header), JSON arrays of objects, or JSON lines.
"""

from __future__ import annotations

import io
import json
import time
from pathlib import Path
from typing import Any, Protocol

import polars as pl
import requests
from loguru import logger

from adam.config.catalog import CatalogConfig
from adam.config.utils import resolve_path

Record = dict[str, Any]


class CatalogLoadError(RuntimeError):
    """Raised when the articles of a language cannot be loaded."""

    def __init__(self, message: str, *, language: str | None = None, not_found: bool = False) -> None:
        super().__init__(message)
        self.language = language
        self.not_found = not_found


class CatalogLoader(Protocol):
    def list_languages(self) -> list[str]:
        """Return the languages offered by the catalog, in manifest order."""

    def load_articles(self, language: str) -> list[Record]:
        """Return the raw records of ``language``, in manifest file order."""


def parse_records(payload: bytes, name: str) -> list[Record]:
    """Decode one data file; the format is chosen from the file extension."""
    suffix = Path(name).suffix.lower()
    try:
        if suffix == ".json":
            data = json.loads(payload.decode("utf-8"))
            if not isinstance(data, list):
                raise CatalogLoadError(f"Data file {name} must contain a JSON array")
            return data
        if suffix == ".jsonl":
            return [json.loads(line) for line in payload.decode("utf-8").splitlines() if line.strip()]
        if not payload.strip():
            logger.debug("Data file {} is empty", name)
            return []
        frame = pl.read_csv(io.BytesIO(payload), infer_schema=False).fill_null("")
    except CatalogLoadError:
        raise
    except (ValueError, pl.exceptions.PolarsError) as exc:
        raise CatalogLoadError(f"Failed to parse data file {name}: {exc}") from exc
    return frame.to_dicts()


def _files_for(manifest: dict[str, Any], language: str) -> list[str]:
    files = manifest.get(language)
    if not files:
        raise CatalogLoadError(f"No files found for {language}", language=language, not_found=True)
    if isinstance(files, str):
        return [files]
    if not isinstance(files, list) or not all(isinstance(name, str) for name in files):
        raise CatalogLoadError(
            f"Catalog manifest entry for {language} must be a file name or a list of file names",
            language=language,
        )
    return list(files)


def _decode_manifest(payload: bytes, source: str) -> dict[str, Any]:
    try:
        manifest = json.loads(payload.decode("utf-8"))
    except ValueError as exc:
        raise CatalogLoadError(f"Invalid catalog manifest {source}: {exc}") from exc
    if not isinstance(manifest, dict):
        raise CatalogLoadError(f"Catalog manifest {source} must be a JSON object")
    return manifest


class LocalCatalogLoader:
    """Read the manifest and data files from a local directory."""

    def __init__(self, data_dir: Path, manifest_name: str = "available_files.json") -> None:
        self.data_dir = Path(data_dir)
        self.manifest_path = self.data_dir / manifest_name

    def list_languages(self) -> list[str]:
        return list(self._manifest())

    def load_articles(self, language: str) -> list[Record]:
        records: list[Record] = []
        for name in _files_for(self._manifest(), language):
            path = self.data_dir / name
            try:
                payload = path.read_bytes()
            except OSError as exc:
                raise CatalogLoadError(f"Cannot read data file {path}: {exc}", language=language) from exc
            loaded = parse_records(payload, name)
            logger.debug("Read {} records from {}", len(loaded), path)
            records.extend(loaded)

        logger.info("Loaded {} records for language '{}'", len(records), language)
        return records

    def _manifest(self) -> dict[str, Any]:
        try:
            payload = self.manifest_path.read_bytes()
        except OSError as exc:
            raise CatalogLoadError(f"Cannot read catalog manifest {self.manifest_path}: {exc}") from exc
        return _decode_manifest(payload, str(self.manifest_path))


class HttpCatalogLoader:
    """Fetch the manifest and data files from a static HTTP location."""

    def __init__(
        self,
        base_url: str,
        manifest_name: str = "available_files.json",
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.manifest_name = manifest_name
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": "adam-catalog/0.1"})

    def list_languages(self) -> list[str]:
        return list(self._manifest())

    def load_articles(self, language: str) -> list[Record]:
        records: list[Record] = []
        for name in _files_for(self._manifest(), language):
            response = self._get(name)
            loaded = parse_records(response.content, name)
            logger.debug("Fetched {} records from {}", len(loaded), response.url)
            records.extend(loaded)

        logger.info("Loaded {} records for language '{}'", len(records), language)
        return records

    def _manifest(self) -> dict[str, Any]:
        response = self._get(self.manifest_name)
        return _decode_manifest(response.content, response.url)

    def _get(self, name: str) -> requests.Response:
        """GET ``name`` relative to the base URL, retrying transient failures."""
        url = f"{self.base_url}/{name.lstrip('/')}"
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.session.get(url, timeout=self.timeout)
                if response.status_code == 404:
                    raise CatalogLoadError(f"Not found: {url}", not_found=True)
                response.raise_for_status()
                return response
            except requests.RequestException as exc:
                logger.warning(
                    "Request failed (attempt {}/{}): {}",
                    attempt,
                    self.max_retries,
                    exc,
                )
                if attempt < self.max_retries:
                    time.sleep(self.retry_delay)
                else:
                    logger.error("Max retries reached; request for {} failed", url)
                    raise CatalogLoadError(f"Failed to fetch {url}: {exc}") from exc
        raise CatalogLoadError(f"Failed to fetch {url}")


def build_loader(config: CatalogConfig, *, base_path: Path | None = None) -> CatalogLoader:
    """Create the loader described by ``config``; relative paths resolve against ``base_path``."""
    if config.source == "http":
        assert config.base_url is not None  # guarded by CatalogConfig validation
        return HttpCatalogLoader(
            config.base_url,
            manifest_name=config.manifest_name,
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            timeout=config.timeout,
        )
    return LocalCatalogLoader(resolve_path(config.data_dir, base_path), config.manifest_name)


__all__ = [
    "CatalogLoadError",
    "CatalogLoader",
    "HttpCatalogLoader",
    "LocalCatalogLoader",
    "Record",
    "build_loader",
    "parse_records",
]
