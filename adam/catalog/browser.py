"""Browsing session: the single owner of catalog state.

Every mutation goes through one recompute step, see
:func:`adam.catalog.engine.recompute`, and callers read the outcome through
:meth:`CatalogBrowser.view`. Loading a language is the only asynchronous
operation; the most recent request always wins.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Sequence

from loguru import logger

from .engine import DEFAULT_LEVELS, PREFERRED_LEVEL, available_levels, default_level, present_levels, recompute
from .loader import CatalogLoader, CatalogLoadError, Record
from .models import Article, FilterCriteria, ResultSet
from .paginator import PAGE_SIZE, PageState, advance, paginate
from .ranges import format_ilr_range

_UNSET: Any = object()


class CatalogLoadingError(RuntimeError):
    """Raised when filtering or paging is requested while a language is loading."""


@dataclass(frozen=True, slots=True)
class CatalogView:
    """Read-only projection of the session handed to the presentation layer."""

    language: str | None
    loading: bool
    error: str | None
    levels: tuple[str, ...]
    criteria: FilterCriteria
    current_page: int
    total_pages: int
    total_results: int
    articles: tuple[Article, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "language": self.language,
            "loading": self.loading,
            "error": self.error,
            "levels": list(self.levels),
            "criteria": self.criteria.to_dict(),
            "current_page": self.current_page,
            "total_pages": self.total_pages,
            "total_results": self.total_results,
            "articles": [_article_card(article) for article in self.articles],
        }


def _article_card(article: Article) -> dict[str, Any]:
    return {
        "key": article.key,
        "id": article.id,
        "title": article.title,
        "summary": article.summary,
        "translated_summary": article.translated_summary,
        "ilr_quantized": article.ilr_quantized,
        "ilr_range": format_ilr_range(article.ilr_range),
        "link": article.link,
    }


def build_articles(records: Sequence[Record]) -> tuple[Article, ...]:
    """Convert raw records, skipping (and logging) the ones that are not mappings."""
    articles: list[Article] = []
    for position, record in enumerate(records):
        try:
            articles.append(Article.from_record(record, position))
        except TypeError as exc:
            logger.warning("Skipping malformed record: {}", exc)
    return tuple(articles)


class CatalogBrowser:
    """Holds articles, criteria and the derived page for one browsing session."""

    def __init__(
        self,
        loader: CatalogLoader,
        *,
        page_size: int = PAGE_SIZE,
        default_levels: Sequence[str] = DEFAULT_LEVELS,
        preferred_level: str | None = PREFERRED_LEVEL,
    ) -> None:
        self.loader = loader
        self.page_size = page_size
        self.default_levels = tuple(default_levels)
        self.preferred_level = preferred_level

        self.language: str | None = None
        self.loading = False
        self.error: str | None = None
        self.articles: tuple[Article, ...] = ()
        self.levels: tuple[str, ...] = self.default_levels
        self.criteria = FilterCriteria()
        self.results = ResultSet()
        self.page = PageState.for_count(0, page_size)
        self._generation = 0

    # ------------------------------------------------------------------
    # public API
    def list_languages(self) -> list[str]:
        return self.loader.list_languages()

    async def select_language(self, language: str) -> CatalogView:
        """Load ``language`` and reset the level to its default.

        A newer call supersedes this one: its response is then discarded.
        Load failures empty the article set, are recorded on the view and
        re-raised to the caller. A superseded request never raises.
        """
        self._generation += 1
        generation = self._generation

        if not language:
            self.language = None
            self.loading = False
            self.error = None
            self._install(())
            return self.view()

        self.language = language
        self.loading = True
        self.error = None
        logger.info("Loading articles for language '{}'", language)

        try:
            records = await asyncio.to_thread(self.loader.load_articles, language)
        except CatalogLoadError as exc:
            if generation != self._generation:
                logger.info("Discarding failed load of '{}' superseded by a newer request", language)
                return self.view()
            logger.error("Error loading data for '{}': {}", language, exc)
            self.loading = False
            self.error = str(exc)
            self._install(())
            raise
        except Exception as exc:
            if generation != self._generation:
                logger.warning("Discarding failed load of '{}' superseded by a newer request: {}", language, exc)
                return self.view()
            logger.exception("Unexpected error loading data for '{}'", language)
            self.loading = False
            self.error = str(exc) or type(exc).__name__
            self._install(())
            raise

        if generation != self._generation:
            logger.info("Discarding stale articles for '{}' superseded by a newer request", language)
            return self.view()

        self.loading = False
        self._install(build_articles(records))
        logger.info(
            "Language '{}' ready: {} articles, {} matching",
            language,
            len(self.articles),
            len(self.results),
        )
        return self.view()

    def set_topic(self, topic: str) -> CatalogView:
        return self.update_criteria(topic=topic)

    def set_level(self, level: str | None) -> CatalogView:
        return self.update_criteria(level=level)

    def set_low_bound(self, value: float | None) -> CatalogView:
        return self.update_criteria(low_bound=value)

    def set_high_bound(self, value: float | None) -> CatalogView:
        return self.update_criteria(high_bound=value)

    def update_criteria(
        self,
        *,
        topic: str = _UNSET,
        level: str | None = _UNSET,
        low_bound: float | None = _UNSET,
        high_bound: float | None = _UNSET,
    ) -> CatalogView:
        """Change any criteria fields and recompute once; page goes back to 1."""
        self._ensure_ready()
        if topic is not _UNSET:
            self.criteria.topic = topic or ""
        if level is not _UNSET:
            self.criteria.level = level or None
        if low_bound is not _UNSET:
            self.criteria.low_bound = low_bound
        if high_bound is not _UNSET:
            self.criteria.high_bound = high_bound
        self._refresh()
        return self.view()

    def advance(self, delta: int) -> CatalogView:
        self._ensure_ready()
        moved = advance(self.page, delta)
        if moved is self.page:
            logger.debug(
                "Ignoring navigation by {} from page {} of {}",
                delta,
                self.page.current_page,
                self.page.total_pages,
            )
        self.page = moved
        return self.view()

    def view(self) -> CatalogView:
        return CatalogView(
            language=self.language,
            loading=self.loading,
            error=self.error,
            levels=self.levels,
            criteria=self.criteria.copy(),
            current_page=self.page.current_page,
            total_pages=self.page.total_pages,
            total_results=0 if self.loading else len(self.results),
            articles=() if self.loading else paginate(self.results, self.page),
        )

    # ------------------------------------------------------------------
    # internals
    def _ensure_ready(self) -> None:
        if self.loading:
            raise CatalogLoadingError(f"Articles for '{self.language}' are still loading")

    def _install(self, articles: tuple[Article, ...]) -> None:
        self.articles = articles
        self.levels = tuple(available_levels(articles, self.default_levels))
        self.criteria.level = default_level(present_levels(articles), self.preferred_level)
        self._refresh()

    def _refresh(self) -> None:
        self.results, self.page = recompute(self.articles, self.criteria, self.page_size)


__all__ = ["CatalogBrowser", "CatalogLoadingError", "CatalogView", "build_articles"]
