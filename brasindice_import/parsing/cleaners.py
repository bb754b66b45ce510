from __future__ import annotations

import math
import re

"""Field cleaners: pure normalization primitives used by the row mapper.

None of these raise on bad input; unparseable values degrade to None (or, for
EANs, to the unrepaired string).
"""

__all__ = [
    "parse_number",
    "clean_string",
    "clean_ean",
]

# Longest leading float literal, same acceptance as JavaScript parseFloat
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_WHITESPACE = re.compile(r"\s+")
# str.strip() keeps U+FEFF; JavaScript trim() removes it
_BOM = "\ufeff"


def _parse_float_prefix(text: str) -> float | None:
    match = _NUMBER_PREFIX.match(text)
    if match is None:
        return None
    return float(match.group(0))


def _trim(text: str) -> str:
    return text.strip().strip(_BOM).strip()


def _strip_outer_quotes(text: str) -> str:
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text


def parse_number(value: str | None) -> float | None:
    """Parse a number written with the Brazilian decimal comma.

    Only the first comma becomes a dot, so thousand separators are not
    understood: ``"1.234,56"`` reads as ``1.234``.

    >>> parse_number("1,5")
    1.5
    >>> parse_number("abc") is None
    True
    """
    if not value:
        return None
    cleaned = _trim(value).replace(",", ".", 1)
    return _parse_float_prefix(cleaned)


def clean_string(value: str | None) -> str | None:
    """Trim and drop one leading/trailing quote; empty -> None."""
    if not value:
        return None
    cleaned = _strip_outer_quotes(_trim(value))
    return cleaned if cleaned else None


def clean_ean(value: str | None) -> str | None:
    """Clean an EAN code, repairing scientific notation.

    Spreadsheet tools turn ``7891230000000`` into ``7.89123E+12``; such values
    are parsed back and rounded to the nearest integer digit string.
    """
    if not value:
        return None
    cleaned = _strip_outer_quotes(_trim(value))
    cleaned = _WHITESPACE.sub("", cleaned).replace("-", "")
    if "E" in cleaned or "e" in cleaned:
        number = _parse_float_prefix(cleaned)
        if number is not None and math.isfinite(number):
            return str(math.floor(number + 0.5))
    if not cleaned or cleaned == "-":
        return None
    return cleaned
