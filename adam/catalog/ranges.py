"""Parser for the stringified ILR range field.

Corpora store the range as a two-element list literal, frequently emitted
with single quotes (``"['1.00', '2.00']"``). Single quotes are rewritten to
double quotes, then the text must match the grammar::

    range  := ws "[" ws value ws "," ws value ws "]" ws
    value  := number | '"' ws decimal ws '"'

Anything else is a :class:`RangeParseError`.
"""

from __future__ import annotations

import math
import re
from typing import NamedTuple

from loguru import logger

_NUMBER = r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?"
_VALUE = rf'(?:{_NUMBER}|"[^"]*")'
_RANGE_RE = re.compile(rf"^\s*\[\s*(?P<low>{_VALUE})\s*,\s*(?P<high>{_VALUE})\s*\]\s*$")
_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")

NOT_AVAILABLE = "N/A"


class RangeParseError(ValueError):
    """Raised when an ``ilr_range`` value is not a two-element numeric list."""

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f"Invalid ILR range {raw!r}: {reason}")
        self.raw = raw
        self.reason = reason


class IlrRange(NamedTuple):
    low: float
    high: float


def _coerce(token: str, raw: str) -> float:
    if token.startswith('"'):
        text = token[1:-1].strip()
        if not _DECIMAL_RE.match(text):
            raise RangeParseError(raw, f"element {token} is not numeric")
    else:
        text = token
    value = float(text)
    if not math.isfinite(value):
        raise RangeParseError(raw, f"element {token} is not finite")
    return value


def parse_ilr_range(raw: str) -> IlrRange:
    """Parse ``raw`` into an :class:`IlrRange`.

    >>> parse_ilr_range("['1.00', '2.00']")
    IlrRange(low=1.0, high=2.0)
    """
    if not isinstance(raw, str):
        raise RangeParseError(repr(raw), "value is not a string")

    normalized = raw.replace("'", '"')
    match = _RANGE_RE.match(normalized)
    if match is None:
        raise RangeParseError(raw, "expected a two-element list of numbers")
    return IlrRange(_coerce(match.group("low"), raw), _coerce(match.group("high"), raw))


def format_ilr_range(raw: str | None) -> str:
    """Render a range for display, ``"N/A"`` when absent or unparseable."""
    if not raw:
        return NOT_AVAILABLE
    try:
        low, high = parse_ilr_range(raw)
    except RangeParseError as exc:
        logger.debug("Cannot display ILR range: {}", exc)
        return NOT_AVAILABLE
    return f"[{low:.2f}, {high:.2f}]"


__all__ = ["IlrRange", "NOT_AVAILABLE", "RangeParseError", "format_ilr_range", "parse_ilr_range"]
