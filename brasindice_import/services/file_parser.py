from __future__ import annotations

import logging

from ..constants import ERROR_LINE_PREVIEW
from ..models.parse_result import ERROR_UNEXPECTED, ParseError, ParseResult, ParseStats
from ..models.parsed_row import ParsedRow
from ..parsing.row_mapper import RowMappingError, map_fields
from ..parsing.tokenizer import split_line

"""File parser: drives the tokenizer and row mapper over a whole export.

parse() is a pure function of its input string. It never raises on malformed
lines: every failure becomes a ParseError and processing continues, so
callers can import the valid rows while surfacing the invalid ones.
"""

__all__ = [
    "split_content",
    "parse",
]

logger = logging.getLogger(__name__)

UNKNOWN_LINE_ERROR = "Erro desconhecido ao processar linha"


def split_content(content: str, *, strip_carriage_returns: bool = True) -> list[str]:
    """Split on ``\\n`` and drop blank / whitespace-only lines.

    With ``strip_carriage_returns`` a trailing ``\\r`` (CRLF exports) is
    removed from each line so it cannot leak into the last field.
    """
    lines = content.split("\n")
    if strip_carriage_returns:
        lines = [line[:-1] if line.endswith("\r") else line for line in lines]
    return [line for line in lines if line.strip()]


def parse(content: str, *, strip_carriage_returns: bool = True) -> ParseResult:
    """Parse BRASÍNDICE TXT content into rows, errors and stats.

    Args:
        content: Whole file content, already decoded
        strip_carriage_returns: Drop a trailing ``\\r`` from each line

    Returns:
        ParseResult whose ``success`` is True only when no line failed
    """
    lines = split_content(content, strip_carriage_returns=strip_carriage_returns)
    rows: list[ParsedRow] = []
    errors: list[ParseError] = []

    for index, line in enumerate(lines):
        line_number = index + 1
        try:
            rows.append(map_fields(split_line(line)))
        except RowMappingError as e:
            data = e.data if e.data is not None else {"line": line[:ERROR_LINE_PREVIEW]}
            errors.append(
                ParseError(row=line_number, message=e.message, data=data, error_type=e.error_type)
            )
            logger.debug("line %d rejected: %s", line_number, e.message)
        except Exception as e:
            errors.append(
                ParseError(
                    row=line_number,
                    message=str(e) or UNKNOWN_LINE_ERROR,
                    data={"line": line[:ERROR_LINE_PREVIEW]},
                    error_type=ERROR_UNEXPECTED,
                )
            )
            logger.debug("line %d failed unexpectedly", line_number, exc_info=True)

    stats = ParseStats(total=len(lines), parsed=len(rows), errors=len(errors))
    return ParseResult(success=stats.errors == 0, rows=rows, errors=errors, stats=stats)
