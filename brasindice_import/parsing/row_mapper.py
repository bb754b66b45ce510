from __future__ import annotations

from collections.abc import Sequence

from ..constants import EXPECTED_COLUMN_COUNT, BrasindiceColumn as Col
from ..models.parse_result import ERROR_INVALID_COLUMN_COUNT, ERROR_MISSING_IDENTITY
from ..models.parsed_row import ExtraAttributes, ParsedRow
from .cleaners import clean_ean, clean_string, parse_number
from .concentration import extract_concentration

"""Row mapper: tokenized 23-column line -> ParsedRow.

Row-level problems are raised as RowMappingError subclasses. The file parser
catches them and turns them into ParseError entries, so a bad line never
aborts the batch.
"""

__all__ = [
    "RowMappingError",
    "ColumnCountError",
    "MissingIdentityError",
    "map_fields",
]


class RowMappingError(Exception):
    """Base class for row-level mapping failures."""
    error_type = "ROW_MAPPING_ERROR"

    def __init__(self, message: str, data: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data


class ColumnCountError(RowMappingError):
    """Raised when a line does not tokenize to exactly 23 fields."""
    error_type = ERROR_INVALID_COLUMN_COUNT


class MissingIdentityError(RowMappingError):
    """Raised when manufacturer id, brasíndice id or brasíndice code is empty."""
    error_type = ERROR_MISSING_IDENTITY


def build_external_code(manufacturer_id: str, brasindice_id: str, brasindice_code: str) -> str:
    # 同一カタログ品目を複数メーカーが販売するため fabricante_id を含める
    return f"{manufacturer_id}_{brasindice_id}_{brasindice_code}"


def map_fields(fields: Sequence[str]) -> ParsedRow:
    """Map tokenized fields into a ParsedRow.

    Raises:
        ColumnCountError: field count differs from EXPECTED_COLUMN_COUNT
            (no partial mapping is attempted)
        MissingIdentityError: one of the three identity fields is empty
    """
    if len(fields) != EXPECTED_COLUMN_COUNT:
        raise ColumnCountError(
            f"Número de colunas inválido: esperado {EXPECTED_COLUMN_COUNT}, "
            f"encontrado {len(fields)}"
        )

    manufacturer_id = clean_string(fields[Col.MANUFACTURER_ID])
    brasindice_id = clean_string(fields[Col.BRASINDICE_ID])
    brasindice_code = clean_string(fields[Col.BRASINDICE_CODE])
    if not manufacturer_id or not brasindice_id or not brasindice_code:
        raise MissingIdentityError(
            "Código Brasíndice (Fabricante ID, ID ou CODE) ausente",
            data={
                "manufacturer_id": manufacturer_id,
                "brasindice_id": brasindice_id,
                "brasindice_code": brasindice_code,
            },
        )

    presentation = clean_string(fields[Col.PRESENTATION])
    dispensable = clean_string(fields[Col.DISPENSABLE])
    hierarchy = clean_string(fields[Col.HIERARCHY])

    return ParsedRow(
        external_code=build_external_code(manufacturer_id, brasindice_id, brasindice_code),
        product_name=clean_string(fields[Col.DESCRIPTION]) or "",
        presentation=presentation,
        concentration=extract_concentration(presentation),
        quantity=parse_number(fields[Col.QUANTITY]),
        tiss=clean_string(fields[Col.TISS]),
        tuss=clean_string(fields[Col.TUSS]),
        ean=clean_ean(fields[Col.EAN]),
        manufacturer_code=manufacturer_id,
        manufacturer_name=clean_string(fields[Col.MANUFACTURER_NAME]) or "",
        category=hierarchy,
        pf=parse_number(fields[Col.PF]),
        pmc=parse_number(fields[Col.PMC]),
        unit_pf=parse_number(fields[Col.UNIT_PFB]),
        unit_pmc=parse_number(fields[Col.UNIT_PMC]),
        extra=ExtraAttributes(
            ggrem=clean_string(fields[Col.GGREM]),
            anvisa=clean_string(fields[Col.ANVISA]),
            ipi=parse_number(fields[Col.IPI]),
            dispensavel=dispensable is not None and dispensable.upper() == "S",
            ult_reajuste=clean_string(fields[Col.LAST_ADJUSTMENT]),
            hierarquia=hierarchy,
        ),
    )
