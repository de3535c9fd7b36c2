"""Filtering engine: applies the predicates over the whole article set."""

from __future__ import annotations

import re
from typing import Iterable, Sequence

from loguru import logger

from .models import Article, FilterCriteria, ResultSet
from .paginator import PAGE_SIZE, PageState
from .predicates import evaluate

DEFAULT_LEVELS: tuple[str, ...] = ("1", "2", "3", "4", "5")
PREFERRED_LEVEL = "1"

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def filter_articles(articles: Sequence[Article], criteria: FilterCriteria) -> ResultSet:
    """Keep the articles matching ``criteria``, preserving their order.

    Unparseable ranges exclude their article while a bound is set; they are
    counted on the result and never stop the pass.
    """
    kept: list[Article] = []
    failures = 0
    for article in articles:
        result = evaluate(article, criteria)
        if result.range_error is not None:
            failures += 1
            logger.debug("Article {} excluded by range filter: {}", article.key, result.range_error)
        if result.matched:
            kept.append(article)

    if failures:
        logger.warning("{} article(s) have an unparseable ILR range and were excluded", failures)
    logger.debug("Filter kept {} of {} articles", len(kept), len(articles))
    return ResultSet(articles=tuple(kept), range_failures=failures)


def _level_sort_key(label: str) -> tuple[int, int, str]:
    match = _LEADING_INT_RE.match(label)
    if match is None:
        return (1, 0, label)
    return (0, int(match.group(1)), label)


def present_levels(articles: Iterable[Article]) -> list[str]:
    """Distinct non-empty levels carried by ``articles``, ascending by numeric value."""
    levels = {article.ilr_quantized for article in articles if article.ilr_quantized}
    return sorted(levels, key=_level_sort_key)  # type: ignore[arg-type]


def available_levels(
    articles: Iterable[Article],
    fallback: Sequence[str] = DEFAULT_LEVELS,
) -> list[str]:
    """Levels offered for selection: those present, or ``fallback`` when none are."""
    return present_levels(articles) or list(fallback)


def default_level(levels: Sequence[str], preferred: str | None = PREFERRED_LEVEL) -> str | None:
    """Pick ``preferred`` when the articles actually carry it.

    Pass :func:`present_levels`, not the fallback list: a catalog without any
    level gets no default selection.
    """
    if preferred and preferred in levels:
        return preferred
    return None


def recompute(
    articles: Sequence[Article],
    criteria: FilterCriteria,
    page_size: int = PAGE_SIZE,
) -> tuple[ResultSet, PageState]:
    """Filter from scratch and start again on the first page."""
    results = filter_articles(articles, criteria)
    return results, PageState.for_count(len(results), page_size)


__all__ = [
    "DEFAULT_LEVELS",
    "PREFERRED_LEVEL",
    "available_levels",
    "default_level",
    "filter_articles",
    "present_levels",
    "recompute",
]
