"""Pure text-processing primitives for BRASÍNDICE lines."""

from .cleaners import clean_ean, clean_string, parse_number
from .concentration import extract_concentration
from .row_mapper import ColumnCountError, MissingIdentityError, RowMappingError, map_fields
from .tokenizer import split_line

__all__ = [
    "clean_ean",
    "clean_string",
    "parse_number",
    "extract_concentration",
    "split_line",
    "map_fields",
    "RowMappingError",
    "ColumnCountError",
    "MissingIdentityError",
]
