"""BRASÍNDICE pharmaceutical price-table parser and importer.

Public operations:

    result = parse(content)                    # ParseResult
    check = validate(content, file_size_bytes) # ValidationResult
    payload = to_reference_item_payload(row)   # ReferenceItemPayload
"""

from .models import ParsedRow, ParseError, ParseResult, ParseStats, ReferenceItemPayload, ValidationResult
from .services.file_parser import parse
from .services.payload import to_reference_item_payload
from .services.validator import validate

__all__ = [
    "parse",
    "validate",
    "to_reference_item_payload",
    "ParsedRow",
    "ParseError",
    "ParseResult",
    "ParseStats",
    "ReferenceItemPayload",
    "ValidationResult",
]

__version__ = "0.1.0"
