"""Domain models for the BRASÍNDICE price-table importer.

This package contains all domain model classes used throughout the
application: parsed rows, parse/validation results, the reference-item
payload and the import bookkeeping types.
"""

from .error_record import ErrorRecord
from .import_result import ImportProgress, ImportResult, ImportStats, PriceRecord, PriceSnapshot
from .parse_result import ParseError, ParseResult, ParseStats
from .parsed_row import ExtraAttributes, ParsedRow
from .reference_item import ReferenceItemPayload
from .validation_result import ValidationResult

__all__ = [
    # Parsing models
    "ExtraAttributes",
    "ParsedRow",
    "ParseError",
    "ParseResult",
    "ParseStats",
    "ValidationResult",
    # Output / persistence models
    "ReferenceItemPayload",
    "ErrorRecord",
    "ImportProgress",
    "ImportResult",
    "ImportStats",
    "PriceRecord",
    "PriceSnapshot",
]
