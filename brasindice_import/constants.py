from __future__ import annotations

from enum import IntEnum

"""Fixed layout and tuning constants for the BRASÍNDICE TXT export.

The export has no header row: every line carries exactly 23 positional
fields. Column positions below are 0-based.
"""

__all__ = [
    "EXPECTED_COLUMN_COUNT",
    "ERROR_LINE_PREVIEW",
    "VALIDATION_SAMPLE_SIZE",
    "ESTIMATED_LINES_PER_SECOND",
    "BrasindiceColumn",
]

EXPECTED_COLUMN_COUNT = 23
ERROR_LINE_PREVIEW = 100  # chars of the offending line kept in error data
VALIDATION_SAMPLE_SIZE = 10
ESTIMATED_LINES_PER_SECOND = 200  # fixed throughput assumption, not measured


class BrasindiceColumn(IntEnum):
    """Positional column map of a BRASÍNDICE line."""
    MANUFACTURER_ID = 0
    MANUFACTURER_NAME = 1
    BRASINDICE_ID = 2
    DESCRIPTION = 3
    BRASINDICE_CODE = 4
    PRESENTATION = 5
    PMC = 6
    PF = 7
    QUANTITY = 8
    PMC_LABEL = 9
    UNIT_PMC = 10
    PFB_LABEL = 11
    UNIT_PFB = 12
    LAST_ADJUSTMENT = 13
    IPI = 14
    DISPENSABLE = 15
    EAN = 16
    TISS = 17
    UNUSED = 18
    TUSS = 19
    GGREM = 20
    ANVISA = 21
    HIERARCHY = 22
