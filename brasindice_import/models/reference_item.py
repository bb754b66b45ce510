from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""ReferenceItemPayload: the generic shape persisted by the reference-item store.

Source-specific attributes (prices per unit, GGREM, ANVISA, ...) live in the
open ``extra_data`` map so that other reference sources can share the table.
"""

__all__ = [
    "ReferenceItemPayload",
]


@dataclass(frozen=True)
class ReferenceItemPayload:
    product_name: str
    presentation: str | None
    concentration: str | None
    entry_unit: str | None
    base_unit: str | None
    quantity: float | None
    tiss: str | None
    tuss: str | None
    ean: str | None
    manufacturer_code: str | None
    manufacturer_name: str
    category: str | None
    subcategory: str | None
    extra_data: dict[str, Any] = field(default_factory=dict)
