"""Article catalog: filtering, pagination and loading."""

from __future__ import annotations

from .browser import CatalogBrowser, CatalogLoadingError, CatalogView, build_articles
from .engine import DEFAULT_LEVELS, available_levels, default_level, filter_articles, present_levels, recompute
from .loader import CatalogLoadError, CatalogLoader, HttpCatalogLoader, LocalCatalogLoader, build_loader
from .models import Article, FilterCriteria, ResultSet
from .paginator import PAGE_SIZE, PageState, advance, paginate
from .predicates import evaluate, matches
from .ranges import IlrRange, RangeParseError, format_ilr_range, parse_ilr_range

__all__ = [
    "Article",
    "CatalogBrowser",
    "CatalogLoadError",
    "CatalogLoader",
    "CatalogLoadingError",
    "CatalogView",
    "DEFAULT_LEVELS",
    "FilterCriteria",
    "HttpCatalogLoader",
    "IlrRange",
    "LocalCatalogLoader",
    "PAGE_SIZE",
    "PageState",
    "RangeParseError",
    "ResultSet",
    "advance",
    "available_levels",
    "build_articles",
    "build_loader",
    "default_level",
    "evaluate",
    "filter_articles",
    "format_ilr_range",
    "matches",
    "paginate",
    "parse_ilr_range",
    "present_levels",
    "recompute",
]
