"""Pytest helpers for path configuration and shared catalog fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from tests.utils import write_catalog  # noqa: E402


@pytest.fixture()
def catalog_dir(tmp_path: Path) -> Path:
    """A local catalog with two languages, one of them split over two files."""
    data_dir = tmp_path / "data"
    write_catalog(
        data_dir,
        {
            "spanish": {
                "es_part1.csv": [
                    {"id": "es-1", "title": "Climate Change in the Andes", "summary": "Glaciers retreat.",
                     "translated_summary": "Los glaciares retroceden.", "ilr_quantized": "1",
                     "ilr_range": "['1.00', '1.50']", "link": "https://example.org/es/1"},
                    {"id": "es-2", "title": "Mercados", "summary": "Markets of Madrid.",
                     "translated_summary": "", "ilr_quantized": "2",
                     "ilr_range": "['1.80', '2.40']", "link": ""},
                ],
                "es_part2.csv": [
                    {"id": "es-3", "title": "Economía", "summary": "Startups and climate policy.",
                     "translated_summary": "", "ilr_quantized": "1",
                     "ilr_range": "bad", "link": ""},
                ],
            },
            "french": {
                "fr.csv": [
                    {"id": "fr-1", "title": "Lyon", "summary": "Une journée.", "translated_summary": "",
                     "ilr_quantized": "2", "ilr_range": "['1.90', '2.60']", "link": ""},
                    {"id": "fr-2", "title": "Paris", "summary": "Le métro.", "translated_summary": "",
                     "ilr_quantized": "3", "ilr_range": "['2.50', '3.00']", "link": ""},
                ],
            },
        },
    )
    return data_dir
