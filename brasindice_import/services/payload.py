from __future__ import annotations

from ..models.parsed_row import ParsedRow
from ..models.reference_item import ReferenceItemPayload

__all__ = [
    "to_reference_item_payload",
]


def to_reference_item_payload(row: ParsedRow) -> ReferenceItemPayload:
    """Project a ParsedRow into the generic reference-item shape.

    Unit prices and the traceability attributes go to ``extra_data``;
    ``subcategory`` is always None (the export has no such concept).
    """
    return ReferenceItemPayload(
        product_name=row.product_name,
        presentation=row.presentation,
        concentration=row.concentration,
        entry_unit=row.entry_unit,
        base_unit=row.base_unit,
        quantity=row.quantity,
        tiss=row.tiss,
        tuss=row.tuss,
        ean=row.ean,
        manufacturer_code=row.manufacturer_code,
        manufacturer_name=row.manufacturer_name,
        category=row.category,
        subcategory=None,
        extra_data={
            "ggrem": row.extra.ggrem,
            "anvisa": row.extra.anvisa,
            "ipi": row.extra.ipi,
            "dispensavel": row.extra.dispensavel,
            "ult_reajuste": row.extra.ult_reajuste,
            "hierarquia": row.extra.hierarquia,
            "unit_pf": row.unit_pf,
            "unit_pmc": row.unit_pmc,
        },
    )
