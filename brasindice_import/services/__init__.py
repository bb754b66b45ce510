"""Services built on the parsing primitives: parse, validate, build payloads, import."""

from .file_parser import parse
from .importer import import_rows
from .payload import to_reference_item_payload
from .reader import parse_file, read_brasindice_file, validate_file
from .validator import validate

__all__ = [
    "parse",
    "validate",
    "to_reference_item_payload",
    "read_brasindice_file",
    "parse_file",
    "validate_file",
    "import_rows",
]
