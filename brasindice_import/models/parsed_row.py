from __future__ import annotations

from dataclasses import dataclass

"""ParsedRow model: one BRASÍNDICE line after cleaning and derivation.

A ParsedRow has no identity beyond ``external_code`` and is never mutated
after the row mapper builds it.
"""

__all__ = [
    "ExtraAttributes",
    "ParsedRow",
]


@dataclass(frozen=True)
class ExtraAttributes:
    """Lower-priority attributes kept for traceability (not promoted)."""
    ggrem: str | None
    anvisa: str | None
    ipi: float | None
    dispensavel: bool
    ult_reajuste: str | None
    hierarquia: str | None


@dataclass(frozen=True)
class ParsedRow:
    """Structured result of mapping one 23-column line.

    ``entry_unit`` and ``base_unit`` are always None: the export carries no
    unit information and downstream fills them from other reference sources.
    """
    external_code: str  # manufacturer_id + "_" + brasindice_id + "_" + brasindice_code
    product_name: str
    presentation: str | None
    concentration: str | None
    quantity: float | None
    tiss: str | None
    tuss: str | None
    ean: str | None
    manufacturer_code: str | None
    manufacturer_name: str
    category: str | None
    pf: float | None
    pmc: float | None
    unit_pf: float | None
    unit_pmc: float | None
    extra: ExtraAttributes
    entry_unit: str | None = None
    base_unit: str | None = None
