from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

"""Concentration extractor for BRASÍNDICE presentation strings.

Derives a single normalized drug-strength token (``"50MG"``, ``"10MG/ML"``,
``"(0,15+0,03)MG"``...) from free text. Rules are tried strictly in order and
the first match wins: structured forms (parenthesized, additive) must pre-empt
the looser ones, and compound units are always listed before simple units so
that ``mg/ml`` is read as one unit rather than ``mg`` followed by ``/ml``.

Values keep their original decimal-comma formatting; only whitespace is
removed and letters are upper-cased.
"""

__all__ = [
    "ConcentrationRule",
    "CONCENTRATION_RULES",
    "extract_concentration",
]

_VALUE = r"(\d+(?:[.,]\d+)?)"
_COMPOUND_UNIT = r"(?:mg/ml|mcg/ml|mg/g|mcg/g|ui/ml)"
# compound first, then simple (greedy-longest-match)
_UNIT = r"(?:mg/ml|mcg/ml|mg/g|mcg/g|ui/ml|mcg/dose|mg|mcg|ui|g|ml|%)"


@dataclass(frozen=True)
class ConcentrationRule:
    name: str
    pattern: re.Pattern[str]
    render: Callable[[re.Match[str]], str]


def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


def _render_combined(m: re.Match[str]) -> str:
    values = re.sub(r"\s+", "", m.group(1))
    return f"({values}){m.group(2)}".upper()


def _render_addition(m: re.Match[str]) -> str:
    return f"{m.group(1)}{m.group(2)}+{m.group(3)}{m.group(4)}".upper()


def _render_compact(m: re.Match[str]) -> str:
    return f"{m.group(1)}+{m.group(2)}{m.group(3)}".upper()


def _render_ratio(m: re.Match[str]) -> str:
    left_unit = m.group(2) or ""
    return f"{m.group(1)}{left_unit}/{m.group(3)}{m.group(4)}".upper()


def _render_simple(m: re.Match[str]) -> str:
    return f"{m.group(1)}{m.group(2)}".upper()


def _render_percent(m: re.Match[str]) -> str:
    return f"{m.group(1)}%"


CONCENTRATION_RULES: tuple[ConcentrationRule, ...] = (
    # "(0,15 + 0,03) mg", "(5 + 2) mg/ml"
    ConcentrationRule(
        "combined_parenthesized",
        _compile(rf"^\(([\d.,\s+]+)\)\s*({_UNIT})"),
        _render_combined,
    ),
    # "6,67 mg/ml + 333,4 mg/ml"
    ConcentrationRule(
        "addition_compound",
        _compile(rf"^{_VALUE}\s*({_COMPOUND_UNIT})\s*\+\s*{_VALUE}\s*({_COMPOUND_UNIT})"),
        _render_addition,
    ),
    # "100 mg + 20 mg"
    ConcentrationRule(
        "addition_full",
        _compile(rf"^{_VALUE}\s*({_UNIT})\s*\+\s*{_VALUE}\s*({_UNIT})"),
        _render_addition,
    ),
    # "80 + 12,5 mg"
    ConcentrationRule(
        "addition_compact",
        _compile(rf"^{_VALUE}\s*\+\s*{_VALUE}\s*({_UNIT})"),
        _render_compact,
    ),
    # "6 / 200 mcg", "8 mg/12,5 mg"
    ConcentrationRule(
        "ratio",
        _compile(rf"^{_VALUE}\s*(mg|mcg|ui|g)?\s*/\s*{_VALUE}\s*(mg|mcg|ui|g|ml)"),
        _render_ratio,
    ),
    # "50 mg", "10 mg/ml", "7.000 UI"
    ConcentrationRule(
        "simple",
        _compile(rf"^{_VALUE}\s*({_UNIT})"),
        _render_simple,
    ),
    # "Fr. 100 ml 2%"
    ConcentrationRule(
        "percent_anywhere",
        _compile(rf"{_VALUE}\s*%"),
        _render_percent,
    ),
    # "Fr. 100 ml - susp 250 mg/5 ml"
    ConcentrationRule(
        "suspension_anywhere",
        _compile(rf"{_VALUE}\s*(mg|mcg|g)\s*/\s*{_VALUE}\s*(ml)"),
        _render_ratio,
    ),
)


def extract_concentration(presentation: str | None) -> str | None:
    """Return the normalized concentration token of a presentation, or None.

    >>> extract_concentration("(0,15 + 0,03) mg")
    '(0,15+0,03)MG'
    >>> extract_concentration("frasco ampola") is None
    True
    """
    if not presentation:
        return None
    text = presentation.strip()
    for rule in CONCENTRATION_RULES:
        match = rule.pattern.search(text)
        if match is not None:
            return rule.render(match)
    return None
