from __future__ import annotations

import math

"""Small number formatting helpers shared by validation, import progress and SUMMARY output."""

__all__ = [
    "round_half_up",
    "format_count_pt_br",
    "format_metric",
]


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (``round()`` would round to even)."""
    return math.floor(value + 0.5)


def format_count_pt_br(value: int) -> str:
    """Render an integer with pt-BR thousand separators.

    >>> format_count_pt_br(12345)
    '12.345'
    """
    return f"{value:,}".replace(",", ".")


def format_metric(value: float) -> str:
    """Format elapsed/throughput numbers for the SUMMARY line.

    Integers print without a decimal part and very small values avoid
    scientific notation.
    """
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)
