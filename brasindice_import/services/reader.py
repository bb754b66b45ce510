from __future__ import annotations

import codecs
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from ..models.parse_result import ParseResult
from ..models.validation_result import ValidationResult
from .file_parser import parse
from .validator import validate

"""File acquisition: bytes on disk -> decoded text for the parser.

BRASÍNDICE exports are produced by Windows tooling and are not consistently
UTF-8, so decoding walks an ordered encoding list (primary first, fallbacks
after, duplicates dropped) until one succeeds.
"""

__all__ = [
    "DEFAULT_FALLBACK_ENCODINGS",
    "SourceReadError",
    "SourceText",
    "build_encoding_list",
    "read_brasindice_file",
    "parse_file",
    "validate_file",
]

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"
DEFAULT_FALLBACK_ENCODINGS: tuple[str, ...] = ("cp1252", "latin-1")


class SourceReadError(Exception):
    """Raised when the source file is missing, unreadable or undecodable."""


@dataclass(frozen=True)
class SourceText:
    path: Path
    text: str
    size_bytes: int
    encoding: str  # encoding that actually decoded the file


def build_encoding_list(primary: str | None, fallbacks: Iterable[str] | None = None) -> list[str]:
    """Ordered, case-insensitively de-duplicated encoding candidates."""
    ordered: list[str] = []
    seen: set[str] = set()
    candidates = [primary, *(fallbacks if fallbacks is not None else DEFAULT_FALLBACK_ENCODINGS)]
    for candidate in candidates:
        if not candidate:
            continue
        normalized = candidate.strip()
        key = normalized.lower()
        if not normalized or key in seen:
            continue
        seen.add(key)
        ordered.append(normalized)
    return ordered


def read_brasindice_file(
    path: Path,
    encoding: str | None = DEFAULT_ENCODING,
    fallback_encodings: Iterable[str] | None = None,
) -> SourceText:
    """Read and decode a BRASÍNDICE TXT export.

    Raises:
        SourceReadError: file not found, I/O failure or no encoding decodes it
    """
    if not path.exists():
        raise SourceReadError(f"file not found: {path}")
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise SourceReadError(f"error reading {path}: {e}") from e

    tried: list[str] = []
    for candidate in build_encoding_list(encoding, fallback_encodings):
        tried.append(candidate)
        try:
            # utf-8-sig drops a leading BOM (Windows exports)
            codec = "utf-8-sig" if codecs.lookup(candidate).name == "utf-8" else candidate
            text = raw.decode(codec)
        except (UnicodeDecodeError, LookupError):
            logger.debug("decode failed encoding=%s file=%s", candidate, path.name)
            continue
        return SourceText(path=path, text=text, size_bytes=len(raw), encoding=candidate)
    raise SourceReadError(f"could not decode {path.name} with encodings {tried}")


def parse_file(path: Path, encoding: str | None = DEFAULT_ENCODING) -> ParseResult:
    source = read_brasindice_file(path, encoding)
    return parse(source.text)


def validate_file(path: Path, encoding: str | None = DEFAULT_ENCODING) -> ValidationResult:
    source = read_brasindice_file(path, encoding)
    return validate(source.text, source.size_bytes)
