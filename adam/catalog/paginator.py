"""Fixed-size pagination over a result set."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Sequence, TypeVar

PAGE_SIZE = 50

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PageState:
    """Position within a result set of ``total_count`` items."""

    current_page: int = 1
    page_size: int = PAGE_SIZE
    total_count: int = 0

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"page_size must be positive, got {self.page_size}")

    @classmethod
    def for_count(cls, total_count: int, page_size: int = PAGE_SIZE) -> "PageState":
        return cls(current_page=1, page_size=page_size, total_count=total_count)

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total_count / self.page_size))

    @property
    def offset(self) -> int:
        return (self.current_page - 1) * self.page_size

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def paginate(items: Sequence[T], state: PageState) -> tuple[T, ...]:
    """Return the slice of ``items`` shown on ``state.current_page``."""
    start = state.offset
    return tuple(items[start : start + state.page_size])


def advance(state: PageState, delta: int) -> PageState:
    """Move ``delta`` pages; targets outside ``[1, total_pages]`` leave the state unchanged."""
    target = state.current_page + delta
    if 1 <= target <= state.total_pages:
        return replace(state, current_page=target)
    return state


__all__ = ["PAGE_SIZE", "PageState", "advance", "paginate"]
