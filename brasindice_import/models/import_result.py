from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .parse_result import ParseError

"""Models for pushing parsed rows into the reference-item store.

ImportStats is mutable on purpose: the importer accumulates counters batch by
batch. Everything handed back to callers is wrapped in the frozen
ImportResult.
"""

__all__ = [
    "ImportStats",
    "ImportProgress",
    "ImportResult",
    "PriceRecord",
    "PriceSnapshot",
]


@dataclass
class ImportStats:
    read: int = 0
    inserted: int = 0
    updated: int = 0
    unchanged: int = 0
    skipped: int = 0  # duplicated external codes collapsed inside a batch
    errors: int = 0


@dataclass(frozen=True)
class ImportProgress:
    """Progress notification passed to the ``on_progress`` callback."""
    phase: str  # parsing | processing | saving
    current: int
    total: int
    percentage: int
    message: str


@dataclass(frozen=True)
class PriceSnapshot:
    """Latest stored PF/PMC of an existing item."""
    pf: float | None = None
    pmc: float | None = None


@dataclass(frozen=True)
class PriceRecord:
    item_id: str
    import_batch_id: str
    price_type: str  # pf | pmc
    price_value: float
    currency: str
    valid_from: str  # YYYY-MM-DD
    price_meta: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ImportResult:
    success: bool
    stats: ImportStats
    errors: list[ParseError] = field(default_factory=list)
    aborted: bool = False
