from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import date

from ..models.import_result import ImportProgress, ImportResult, ImportStats, PriceRecord, PriceSnapshot
from ..models.parse_result import ParseError, ParseResult
from ..models.parsed_row import ParsedRow
from ..models.reference_item import ReferenceItemPayload
from ..store.reference_store import ReferenceItemStore, StoreError
from .formatting import format_count_pt_br, format_metric, round_half_up
from .payload import to_reference_item_payload

"""Reference-item import: push a ParseResult into a ReferenceItemStore.

Rows are processed in fixed-size batches. Per batch:
1. collapse duplicated external codes (last occurrence wins)
2. split into new items (insert) and existing items (update)
3. skip updates whose PF/PMC did not change
4. write price history for new items and items whose prices changed
"""

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "UPDATE_SUB_BATCH_SIZE",
    "ERROR_BATCH_INSERT_FAILED",
    "ERROR_BATCH_UPDATE_FAILED",
    "normalize_price",
    "import_rows",
]

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100
UPDATE_SUB_BATCH_SIZE = 50
PRICE_CURRENCY = "BRL"
PRICE_SOURCE = "brasindice"

ERROR_BATCH_INSERT_FAILED = "BATCH_INSERT_FAILED"
ERROR_BATCH_UPDATE_FAILED = "BATCH_UPDATE_FAILED"

ProgressCallback = Callable[[ImportProgress], None]


def normalize_price(price: float | None) -> float | None:
    """Comparable price: None/0 mean "no price", otherwise 2 decimals."""
    if price is None or price == 0:
        return None
    return round_half_up(price * 100) / 100


def _has_price_changes(row: ParsedRow, current: PriceSnapshot) -> bool:
    return (
        normalize_price(current.pf) != normalize_price(row.pf)
        or normalize_price(current.pmc) != normalize_price(row.pmc)
    )


def _notify(
    callback: ProgressCallback | None, phase: str, current: int, total: int, message: str
) -> None:
    if callback is None:
        return
    percentage = round_half_up(current / total * 100) if total else 100
    callback(ImportProgress(phase=phase, current=current, total=total, percentage=percentage, message=message))


def _build_price_records(
    row: ParsedRow,
    item_id: str,
    *,
    import_batch_id: str,
    reference_date: str,
    tax_percentage: float,
) -> list[PriceRecord]:
    records: list[PriceRecord] = []
    tax_label = format_metric(tax_percentage)
    for price_type, value in (("pf", row.pf), ("pmc", row.pmc)):
        # 0 は「価格なし」を意味するので履歴に残さない
        if value is None or value <= 0:
            continue
        records.append(
            PriceRecord(
                item_id=item_id,
                import_batch_id=import_batch_id,
                price_type=price_type,
                price_value=value,
                currency=PRICE_CURRENCY,
                valid_from=reference_date,
                price_meta={"label": f"{price_type.upper()} {tax_label}", "source": PRICE_SOURCE},
            )
        )
    return records


def import_rows(
    parse_result: ParseResult,
    store: ReferenceItemStore,
    *,
    import_batch_id: str,
    reference_date: str | date,
    tax_percentage: float = 20,
    batch_size: int = DEFAULT_BATCH_SIZE,
    on_progress: ProgressCallback | None = None,
    abort_event: threading.Event | None = None,
) -> ImportResult:
    """Import parsed rows into the reference-item store.

    Args:
        parse_result: Output of ``parse``; its errors are carried over
        store: Persistence collaborator
        import_batch_id: Identifier stamped on inserted/updated items and prices
        reference_date: ``valid_from`` of the price history records
        tax_percentage: ICMS rate the prices refer to (used in price labels)
        batch_size: Rows per store round-trip
        on_progress: Optional progress callback. Phases: ``parsing`` once
            (rows found, always 100%), ``processing`` per batch, ``saving`` at the end
        abort_event: Checked at each batch boundary; when set the import stops

    Returns:
        ImportResult. ``success`` is False when any row or batch failed or the
        import was aborted.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    valid_from = reference_date.isoformat() if isinstance(reference_date, date) else reference_date

    stats = ImportStats(read=parse_result.stats.total, errors=parse_result.stats.errors)
    errors: list[ParseError] = list(parse_result.errors)
    rows = parse_result.rows
    total = len(rows)
    _notify(
        on_progress,
        "parsing",
        total,
        total,
        f"{format_count_pt_br(total)} registros encontrados",
    )

    for batch_start in range(0, total, batch_size):
        if abort_event is not None and abort_event.is_set():
            logger.warning("import aborted at row %d of %d", batch_start, total)
            return ImportResult(success=False, stats=stats, errors=errors, aborted=True)

        batch = rows[batch_start:batch_start + batch_size]
        unique: dict[str, ParsedRow] = {}
        for row in batch:
            unique[row.external_code] = row
        stats.skipped += len(batch) - len(unique)
        batch_rows = list(unique.values())

        _notify(
            on_progress,
            "processing",
            batch_start,
            total,
            f"Processando {format_count_pt_br(batch_start)} de {format_count_pt_br(total)}...",
        )

        existing_ids = store.find_item_ids([row.external_code for row in batch_rows])
        current_prices = store.latest_prices(list(existing_ids.values())) if existing_ids else {}

        to_insert: list[tuple[str, ReferenceItemPayload]] = []
        changed: list[tuple[str, ReferenceItemPayload]] = []
        unchanged = 0
        for row in batch_rows:
            payload = to_reference_item_payload(row)
            existing_id = existing_ids.get(row.external_code)
            if existing_id is None:
                to_insert.append((row.external_code, payload))
            elif _has_price_changes(row, current_prices.get(existing_id, PriceSnapshot())):
                changed.append((existing_id, payload))
            else:
                unchanged += 1
        stats.unchanged += unchanged

        inserted_ids: dict[str, str] = {}
        if to_insert:
            try:
                inserted_ids = store.insert_items(to_insert, import_batch_id)
            except StoreError as e:
                stats.errors += len(to_insert)
                errors.append(
                    ParseError(
                        row=batch_start + 1,
                        message=f"Erro ao inserir lote: {e}",
                        error_type=ERROR_BATCH_INSERT_FAILED,
                    )
                )
                logger.error("batch insert failed at row %d: %s", batch_start, e)
            else:
                stats.inserted += len(inserted_ids)

        changed_ids: set[str] = set()
        for start in range(0, len(changed), UPDATE_SUB_BATCH_SIZE):
            sub_batch = changed[start:start + UPDATE_SUB_BATCH_SIZE]
            try:
                store.update_items(sub_batch, import_batch_id)
            except StoreError as e:
                stats.errors += len(sub_batch)
                errors.append(
                    ParseError(
                        row=batch_start + 1,
                        message=f"Erro ao atualizar lote: {e}",
                        error_type=ERROR_BATCH_UPDATE_FAILED,
                    )
                )
                logger.error("batch update failed at row %d: %s", batch_start, e)
                continue
            stats.updated += len(sub_batch)
            changed_ids.update(item_id for item_id, _ in sub_batch)

        prices: dict[tuple[str, str], PriceRecord] = {}
        for row in batch_rows:
            item_id = existing_ids.get(row.external_code) or inserted_ids.get(row.external_code)
            if item_id is None:
                continue
            if row.external_code not in inserted_ids and item_id not in changed_ids:
                continue
            for record in _build_price_records(
                row,
                item_id,
                import_batch_id=import_batch_id,
                reference_date=valid_from,
                tax_percentage=tax_percentage,
            ):
                prices[(record.item_id, record.price_type)] = record

        if prices:
            try:
                store.insert_prices(list(prices.values()))
            except StoreError as e:
                logger.warning("price history write failed at row %d: %s", batch_start, e)

    _notify(on_progress, "saving", total, total, "Finalizando importação...")
    logger.info(
        "import finished read=%d inserted=%d updated=%d unchanged=%d skipped=%d errors=%d",
        stats.read, stats.inserted, stats.updated, stats.unchanged, stats.skipped, stats.errors,
    )
    return ImportResult(success=stats.errors == 0, stats=stats, errors=errors)
