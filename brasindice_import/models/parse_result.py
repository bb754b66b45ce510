from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .parsed_row import ParsedRow

"""Parse result models: per-line errors, aggregate stats and the batch result.

ParseError.error_type uses UPPER_SNAKE classifications so that rejected rows
can be written to the JSON Lines error log without translation.
"""

__all__ = [
    "ERROR_INVALID_COLUMN_COUNT",
    "ERROR_MISSING_IDENTITY",
    "ERROR_UNEXPECTED",
    "ParseError",
    "ParseStats",
    "ParseResult",
]

ERROR_INVALID_COLUMN_COUNT = "INVALID_COLUMN_COUNT"
ERROR_MISSING_IDENTITY = "MISSING_IDENTITY"
ERROR_UNEXPECTED = "UNEXPECTED_ERROR"


@dataclass(frozen=True)
class ParseError:
    """One rejected line. Never fatal to the overall parse."""
    # 1-indexed over non-blank lines. Store batch failures use the 1-based
    # position of the batch's first parsed row instead.
    row: int
    message: str
    data: dict[str, Any] | None = None
    error_type: str = ERROR_UNEXPECTED


@dataclass(frozen=True)
class ParseStats:
    total: int = 0
    parsed: int = 0
    errors: int = 0


@dataclass(frozen=True)
class ParseResult:
    """Aggregate of one parse call.

    ``success`` is False as soon as a single line fails, even though every
    other line is still parsed and returned in ``rows``.
    """
    success: bool
    rows: list[ParsedRow] = field(default_factory=list)
    errors: list[ParseError] = field(default_factory=list)
    stats: ParseStats = field(default_factory=ParseStats)
