"""Data models for the article catalog."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

_KNOWN_FIELDS: tuple[str, ...] = (
    "id",
    "title",
    "summary",
    "translated_summary",
    "ilr_quantized",
    "ilr_range",
    "link",
)


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return json.dumps(list(value))
    return str(value)


@dataclass(frozen=True, slots=True)
class Article:
    """A single article of the loaded catalog.

    ``None`` marks an absent field; the empty string is kept as-is.
    """

    position: int
    id: str | None = None
    title: str | None = None
    summary: str | None = None
    translated_summary: str | None = None
    ilr_quantized: str | None = None
    ilr_range: str | None = None
    link: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_record(cls, record: Mapping[str, Any], position: int) -> "Article":
        """Build an article from a raw field mapping (CSV row or JSON object)."""
        if not isinstance(record, Mapping):
            raise TypeError(f"Record at position {position} is not a mapping: {type(record).__name__}")

        values = {name: _as_text(record.get(name)) for name in _KNOWN_FIELDS}
        extra = {key: value for key, value in record.items() if key not in _KNOWN_FIELDS}
        return cls(position=position, extra=extra, **values)

    @property
    def key(self) -> str:
        """Identity used when iterating; never used for equality or dedup."""
        if self.id:
            return self.id
        return f"article-{self.position}-{self.title or ''}"

    @property
    def has_range(self) -> bool:
        return bool(self.ilr_range)


@dataclass(slots=True)
class FilterCriteria:
    """The active search criteria; one instance per browsing session."""

    topic: str = ""
    level: str | None = None
    low_bound: float | None = None
    high_bound: float | None = None

    @property
    def has_level(self) -> bool:
        return bool(self.level)

    @property
    def has_bounds(self) -> bool:
        return self.low_bound is not None or self.high_bound is not None

    def copy(self) -> "FilterCriteria":
        return FilterCriteria(
            topic=self.topic,
            level=self.level,
            low_bound=self.low_bound,
            high_bound=self.high_bound,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "topic": self.topic,
            "level": self.level,
            "low_bound": self.low_bound,
            "high_bound": self.high_bound,
        }


@dataclass(frozen=True, slots=True)
class ResultSet:
    """Filtered articles in their original relative order."""

    articles: tuple[Article, ...] = ()
    range_failures: int = 0

    def __len__(self) -> int:
        return len(self.articles)

    def __iter__(self) -> Iterator[Article]:
        return iter(self.articles)

    def __getitem__(self, index):  # type: ignore[no-untyped-def]
        return self.articles[index]

    @property
    def keys(self) -> list[str]:
        return [article.key for article in self.articles]


__all__ = ["Article", "FilterCriteria", "ResultSet"]
