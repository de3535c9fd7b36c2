"""Tests for the browsing session and its language loading."""

from __future__ import annotations

import asyncio
import json
import threading
from pathlib import Path
from typing import Any

import pytest

from adam.catalog import CatalogBrowser, CatalogLoadError, CatalogLoadingError, LocalCatalogLoader


class GatedLoader:
    """Loader whose responses are released by the test, one language at a time."""

    def __init__(self, catalog: dict[str, Any]) -> None:
        self.catalog = catalog
        self.gates = {language: threading.Event() for language in catalog}

    def list_languages(self) -> list[str]:
        return list(self.catalog)

    def load_articles(self, language: str) -> list[dict[str, Any]]:
        if not self.gates[language].wait(timeout=5):
            raise TimeoutError(f"gate for {language} was never opened")
        result = self.catalog[language]
        if isinstance(result, Exception):
            raise result
        return result


def _records(prefix: str, count: int, level: str = "1") -> list[dict[str, Any]]:
    return [{"id": f"{prefix}-{index}", "title": f"{prefix} {index}", "ilr_quantized": level} for index in range(count)]


@pytest.fixture()
def browser(catalog_dir: Path) -> CatalogBrowser:
    return CatalogBrowser(LocalCatalogLoader(catalog_dir))


def test_select_language_applies_default_level(browser: CatalogBrowser) -> None:
    view = asyncio.run(browser.select_language("spanish"))
    assert view.language == "spanish"
    assert not view.loading
    assert view.levels == ("1", "2")
    assert view.criteria.level == "1"
    assert [article.id for article in view.articles] == ["es-1", "es-3"]


def test_no_default_level_when_one_is_absent(browser: CatalogBrowser) -> None:
    view = asyncio.run(browser.select_language("french"))
    assert view.levels == ("2", "3")
    assert view.criteria.level is None
    assert view.total_results == 2


def test_fallback_levels_without_default_selection() -> None:
    loader = GatedLoader({"plain": _records("p", 3, level="")})
    loader.gates["plain"].set()
    browser = CatalogBrowser(loader)
    view = asyncio.run(browser.select_language("plain"))
    assert view.levels == ("1", "2", "3", "4", "5")
    assert view.criteria.level is None
    assert view.total_results == 3


def test_criteria_persist_across_language_switch(browser: CatalogBrowser) -> None:
    asyncio.run(browser.select_language("spanish"))
    browser.set_topic("climate")
    browser.set_low_bound(1.0)
    browser.set_level("2")

    view = asyncio.run(browser.select_language("french"))
    assert view.criteria.topic == "climate"
    assert view.criteria.low_bound == 1.0
    assert view.criteria.level is None


def test_each_criteria_change_recomputes_and_resets_page() -> None:
    loader = GatedLoader({"big": _records("b", 120)})
    loader.gates["big"].set()
    browser = CatalogBrowser(loader)
    asyncio.run(browser.select_language("big"))

    view = browser.advance(1)
    assert view.current_page == 2
    assert view.articles[0].id == "b-50"

    view = browser.set_topic("b 1")
    assert view.current_page == 1
    # "b 1", "b 10".."b 19", "b 100".."b 119"
    assert view.total_results == 31


def test_pagination_through_browser() -> None:
    loader = GatedLoader({"big": _records("b", 120)})
    loader.gates["big"].set()
    browser = CatalogBrowser(loader)
    view = asyncio.run(browser.select_language("big"))
    assert view.total_pages == 3

    browser.advance(1)
    view = browser.advance(1)
    assert view.current_page == 3
    assert len(view.articles) == 20

    view = browser.advance(1)
    assert view.current_page == 3
    view = browser.advance(-5)
    assert view.current_page == 3


def test_range_filter_via_browser(browser: CatalogBrowser) -> None:
    asyncio.run(browser.select_language("spanish"))
    view = browser.update_criteria(level=None, low_bound=1.0)
    assert [article.id for article in view.articles] == ["es-1", "es-2"]
    assert browser.results.range_failures == 1

    card = view.to_dict()["articles"][0]
    assert card["ilr_range"] == "[1.00, 1.50]"
    assert card["key"] == "es-1"


def test_load_failure_is_reported_and_clears_articles(browser: CatalogBrowser) -> None:
    asyncio.run(browser.select_language("spanish"))
    with pytest.raises(CatalogLoadError):
        asyncio.run(browser.select_language("german"))

    view = browser.view()
    assert not view.loading
    assert view.language == "german"
    assert "No files found for german" in (view.error or "")
    assert view.total_results == 0
    assert view.articles == ()


def test_malformed_manifest_entry_clears_previous_language(catalog_dir: Path) -> None:
    manifest = {"spanish": ["es_part1.csv", "es_part2.csv"], "broken": 5}
    (catalog_dir / "available_files.json").write_text(json.dumps(manifest))
    browser = CatalogBrowser(LocalCatalogLoader(catalog_dir))
    asyncio.run(browser.select_language("spanish"))

    with pytest.raises(CatalogLoadError, match="must be a file name"):
        asyncio.run(browser.select_language("broken"))

    view = browser.view()
    assert view.language == "broken"
    assert view.error
    assert view.articles == ()
    assert browser.articles == ()


def test_unexpected_loader_error_clears_previous_language() -> None:
    loader = GatedLoader({"good": _records("g", 2), "bad": TypeError("'int' object is not iterable")})
    for gate in loader.gates.values():
        gate.set()
    browser = CatalogBrowser(loader)
    asyncio.run(browser.select_language("good"))

    with pytest.raises(TypeError):
        asyncio.run(browser.select_language("bad"))

    view = browser.view()
    assert not view.loading
    assert view.language == "bad"
    assert view.error == "'int' object is not iterable"
    assert view.total_results == 0
    assert view.articles == ()


def test_stale_unexpected_failure_is_discarded() -> None:
    loader = GatedLoader({"a": RuntimeError("connection reset"), "b": _records("b", 2)})
    browser = CatalogBrowser(loader)

    async def scenario() -> None:
        task_a = asyncio.create_task(browser.select_language("a"))
        await asyncio.sleep(0)
        task_b = asyncio.create_task(browser.select_language("b"))
        await asyncio.sleep(0)

        loader.gates["b"].set()
        await task_b
        loader.gates["a"].set()
        stale_view = await task_a
        assert stale_view.language == "b"

    asyncio.run(scenario())
    view = browser.view()
    assert view.error is None
    assert [article.id for article in view.articles] == ["b-0", "b-1"]


def test_empty_language_clears_selection(browser: CatalogBrowser) -> None:
    asyncio.run(browser.select_language("spanish"))
    view = asyncio.run(browser.select_language(""))
    assert view.language is None
    assert view.total_results == 0


def test_operations_rejected_while_loading() -> None:
    loader = GatedLoader({"slow": _records("s", 2)})
    browser = CatalogBrowser(loader)

    async def scenario() -> None:
        task = asyncio.create_task(browser.select_language("slow"))
        await asyncio.sleep(0)
        assert browser.view().loading
        assert browser.view().articles == ()
        with pytest.raises(CatalogLoadingError):
            browser.set_topic("x")
        with pytest.raises(CatalogLoadingError):
            browser.advance(1)
        loader.gates["slow"].set()
        view = await task
        assert not view.loading
        assert view.total_results == 2

    asyncio.run(scenario())


def test_stale_response_arriving_last_is_discarded() -> None:
    loader = GatedLoader({"a": _records("a", 3), "b": _records("b", 2)})
    browser = CatalogBrowser(loader)

    async def scenario() -> None:
        task_a = asyncio.create_task(browser.select_language("a"))
        await asyncio.sleep(0)
        task_b = asyncio.create_task(browser.select_language("b"))
        await asyncio.sleep(0)

        loader.gates["b"].set()
        await task_b
        loader.gates["a"].set()
        await task_a

    asyncio.run(scenario())
    view = browser.view()
    assert view.language == "b"
    assert [article.id for article in view.articles] == ["b-0", "b-1"]


def test_stale_response_arriving_first_is_discarded() -> None:
    loader = GatedLoader({"a": _records("a", 3), "b": _records("b", 2)})
    browser = CatalogBrowser(loader)

    async def scenario() -> None:
        task_a = asyncio.create_task(browser.select_language("a"))
        await asyncio.sleep(0)
        task_b = asyncio.create_task(browser.select_language("b"))
        await asyncio.sleep(0)

        loader.gates["a"].set()
        await task_a
        assert browser.loading
        assert browser.articles == ()

        loader.gates["b"].set()
        await task_b

    asyncio.run(scenario())
    view = browser.view()
    assert not view.loading
    assert [article.id for article in view.articles] == ["b-0", "b-1"]


def test_malformed_records_are_skipped() -> None:
    loader = GatedLoader({"mixed": [{"id": "ok-1"}, "garbage", {"id": "ok-2"}]})
    loader.gates["mixed"].set()
    browser = CatalogBrowser(loader)
    view = asyncio.run(browser.select_language("mixed"))
    assert [article.id for article in view.articles] == ["ok-1", "ok-2"]
    assert [article.position for article in view.articles] == [0, 2]
