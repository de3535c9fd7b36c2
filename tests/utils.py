"""Builders shared by the catalog tests."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Iterable

from adam.catalog import Article

CSV_COLUMNS = ["id", "title", "summary", "translated_summary", "ilr_quantized", "ilr_range", "link"]


def make_article(position: int = 0, **fields: Any) -> Article:
    """Create an article with only the given fields set."""
    return Article(position=position, **fields)


def make_articles(count: int, **fields: Any) -> list[Article]:
    return [make_article(index, id=f"a-{index}", title=f"Article {index}", **fields) for index in range(count)]


def write_csv(path: Path, rows: Iterable[dict[str, str]]) -> None:
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)


def write_catalog(data_dir: Path, languages: dict[str, dict[str, list[dict[str, str]]]]) -> None:
    """Write a manifest plus one CSV per listed file."""
    data_dir.mkdir(parents=True, exist_ok=True)
    manifest: dict[str, list[str]] = {}
    for language, files in languages.items():
        manifest[language] = list(files)
        for name, rows in files.items():
            write_csv(data_dir / name, rows)
    (data_dir / "available_files.json").write_text(json.dumps(manifest), encoding="utf-8")
