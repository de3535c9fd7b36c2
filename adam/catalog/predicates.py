"""Topic, level and range predicates evaluated against a single article."""

from __future__ import annotations

from typing import NamedTuple

from .models import Article, FilterCriteria
from .ranges import RangeParseError, parse_ilr_range


class PredicateResult(NamedTuple):
    matched: bool
    range_error: RangeParseError | None = None


def topic_matches(article: Article, criteria: FilterCriteria) -> bool:
    if criteria.topic == "":
        return True
    needle = criteria.topic.lower()
    for text in (article.title, article.summary, article.translated_summary):
        if needle in (text or "").lower():
            return True
    return False


def level_matches(article: Article, criteria: FilterCriteria) -> bool:
    if not criteria.has_level:
        return True
    return article.ilr_quantized == criteria.level


def range_matches(article: Article, criteria: FilterCriteria) -> PredicateResult:
    """Check the article's ILR range against the criteria bounds.

    Articles without a range pass; articles whose range cannot be parsed fail
    while any bound is set.
    """
    if not criteria.has_bounds or not article.has_range:
        return PredicateResult(True)

    try:
        low, high = parse_ilr_range(article.ilr_range)  # type: ignore[arg-type]
    except RangeParseError as exc:
        return PredicateResult(False, exc)

    if criteria.low_bound is not None and low < criteria.low_bound:
        return PredicateResult(False)
    if criteria.high_bound is not None and high > criteria.high_bound:
        return PredicateResult(False)
    return PredicateResult(True)


def evaluate(article: Article, criteria: FilterCriteria) -> PredicateResult:
    """Evaluate every predicate; the range error, if any, is reported back."""
    topic_ok = topic_matches(article, criteria)
    level_ok = level_matches(article, criteria)
    range_result = range_matches(article, criteria)
    return PredicateResult(topic_ok and level_ok and range_result.matched, range_result.range_error)


def matches(article: Article, criteria: FilterCriteria) -> bool:
    return evaluate(article, criteria).matched


__all__ = [
    "PredicateResult",
    "evaluate",
    "level_matches",
    "matches",
    "range_matches",
    "topic_matches",
]
