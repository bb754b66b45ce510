from __future__ import annotations

import threading
from datetime import date

import pytest

from brasindice_import.constants import BrasindiceColumn as Col
from brasindice_import.models import PriceRecord
from brasindice_import.services.file_parser import parse
from brasindice_import.services.importer import import_rows, normalize_price
from brasindice_import.store.reference_store import InMemoryReferenceItemStore, StoreError

"""Unit tests for import_rows(): batching, dedupe, change detection, price history."""

REF_DATE = date(2024, 4, 1)


@pytest.fixture()
def make_content(make_line):
    def _make(*overrides: dict[int, str]) -> str:
        return "\n".join(make_line(o) for o in overrides)
    return _make


def _ids(n: int) -> list[dict[int, str]]:
    return [{Col.MANUFACTURER_ID: str(100 + i)} for i in range(n)]


def _run(content: str, store, **kwargs):
    kwargs.setdefault("import_batch_id", "batch-1")
    kwargs.setdefault("reference_date", REF_DATE)
    return import_rows(parse(content), store, **kwargs)


class FailingStore(InMemoryReferenceItemStore):
    def __init__(self, *, fail_insert=False, fail_update=False, fail_prices=False):
        super().__init__()
        self.fail_insert = fail_insert
        self.fail_update = fail_update
        self.fail_prices = fail_prices
        self.update_calls: list[int] = []

    def insert_items(self, items, import_batch_id):
        if self.fail_insert:
            raise StoreError("duplicate key")
        return super().insert_items(items, import_batch_id)

    def update_items(self, items, import_batch_id):
        self.update_calls.append(len(items))
        if self.fail_update:
            raise StoreError("timeout")
        return super().update_items(items, import_batch_id)

    def insert_prices(self, records):
        if self.fail_prices:
            raise StoreError("price table locked")
        return super().insert_prices(records)


@pytest.mark.parametrize(
    "price, expected",
    [(None, None), (0, None), (0.0, None), (10.004, 10.0), (10.006, 10.01), (98.75, 98.75)],
)
def test_normalize_price(price, expected):
    assert normalize_price(price) == expected


def test_import_inserts_new_items(make_content):
    store = InMemoryReferenceItemStore()
    result = _run(make_content(*_ids(3)), store, batch_size=2)

    assert result.success is True
    assert result.aborted is False
    assert (result.stats.read, result.stats.inserted, result.stats.updated) == (3, 3, 0)
    assert len(store.items) == 3
    assert {item.external_code for item in store.items.values()} == {
        "100_00456_0789", "101_00456_0789", "102_00456_0789",
    }
    assert all(item.first_import_batch_id == "batch-1" for item in store.items.values())


def test_import_writes_price_history(make_content):
    store = InMemoryReferenceItemStore()
    _run(make_content({}), store, tax_percentage=18)

    assert len(store.prices) == 2
    by_type = {p.price_type: p for p in store.prices}
    pf = by_type["pf"]
    assert pf.price_value == pytest.approx(98.75)
    assert pf.currency == "BRL"
    assert pf.valid_from == "2024-04-01"
    assert pf.import_batch_id == "batch-1"
    assert pf.price_meta == {"label": "PF 18", "source": "brasindice"}
    assert by_type["pmc"].price_meta["label"] == "PMC 18"


def test_import_accepts_reference_date_string(make_content):
    store = InMemoryReferenceItemStore()
    _run(make_content({}), store, reference_date="2025-01-31")
    assert {p.valid_from for p in store.prices} == {"2025-01-31"}


def test_import_skips_zero_and_missing_prices(make_content):
    store = InMemoryReferenceItemStore()
    _run(make_content({Col.PF: "0,00", Col.PMC: ""}), store)
    assert len(store.items) == 1
    assert store.prices == []


def test_import_collapses_duplicates_within_batch(make_content):
    store = InMemoryReferenceItemStore()
    result = _run(make_content({Col.PMC: "10,00"}, {Col.PMC: "20,00"}), store)

    assert result.stats.inserted == 1
    assert result.stats.skipped == 1
    assert len(store.items) == 1
    assert [p.price_value for p in store.prices if p.price_type == "pmc"] == [20.0]


def test_import_duplicates_across_batches_are_not_skipped(make_content):
    store = InMemoryReferenceItemStore()
    result = _run(make_content({}, {}), store, batch_size=1)

    assert result.stats.inserted == 1
    assert result.stats.skipped == 0
    assert result.stats.unchanged == 1


def test_reimport_same_prices_is_unchanged(make_content):
    store = InMemoryReferenceItemStore()
    content = make_content(*_ids(4))
    _run(content, store)
    price_count = len(store.prices)

    result = _run(content, store, import_batch_id="batch-2")

    assert result.success is True
    assert result.stats.unchanged == 4
    assert result.stats.inserted == 0
    assert result.stats.updated == 0
    assert len(store.prices) == price_count
    assert all(item.last_import_batch_id == "batch-1" for item in store.items.values())


def test_reimport_with_changed_price_updates(make_content):
    store = InMemoryReferenceItemStore()
    _run(make_content(*_ids(2)), store)

    changed = [{Col.MANUFACTURER_ID: "100", Col.PMC: "130,00"}, {Col.MANUFACTURER_ID: "101"}]
    result = _run(make_content(*changed), store, import_batch_id="batch-2", reference_date=date(2024, 5, 1))

    assert result.stats.updated == 1
    assert result.stats.unchanged == 1
    item_id = store.find_item_ids(["100_00456_0789"])["100_00456_0789"]
    assert store.items[item_id].last_import_batch_id == "batch-2"
    assert store.latest_prices([item_id])[item_id].pmc == pytest.approx(130.0)
    new_records = [p for p in store.prices if p.import_batch_id == "batch-2"]
    assert {(p.item_id, p.price_type) for p in new_records} == {(item_id, "pf"), (item_id, "pmc")}


def test_price_comparison_uses_two_decimals(make_content):
    store = InMemoryReferenceItemStore()
    _run(make_content({}), store)
    item_id = next(iter(store.items))
    store.insert_prices(
        [PriceRecord(item_id, "manual", "pmc", 125.504, "BRL", "2024-04-01")]
    )

    result = _run(make_content({}), store, import_batch_id="batch-2")
    assert result.stats.unchanged == 1


def test_existing_item_without_price_history_is_updated(make_content):
    store = InMemoryReferenceItemStore()
    _run(make_content({}), store)
    store.prices.clear()

    result = _run(make_content({}), store, import_batch_id="batch-2")
    assert result.stats.updated == 1
    assert len(store.prices) == 2


def test_updates_are_written_in_sub_batches(make_content):
    store = FailingStore()
    content = make_content(*_ids(120))
    _run(content, store, batch_size=200)
    store.prices.clear()

    result = _run(content, store, batch_size=200, import_batch_id="batch-2")
    assert result.stats.updated == 120
    assert store.update_calls == [50, 50, 20]


def test_parse_errors_are_carried_over(make_line):
    content = "\n".join([make_line(), make_line(count=3)])
    result = import_rows(
        parse(content), InMemoryReferenceItemStore(), import_batch_id="b", reference_date=REF_DATE
    )
    assert result.success is False
    assert result.stats.read == 2
    assert result.stats.inserted == 1
    assert result.stats.errors == 1
    assert result.errors[0].error_type == "INVALID_COLUMN_COUNT"


def test_insert_failure_counts_batch_as_errors(make_content):
    store = FailingStore(fail_insert=True)
    result = _run(make_content(*_ids(3)), store, batch_size=2)

    assert result.success is False
    assert result.stats.inserted == 0
    assert result.stats.errors == 3
    assert [e.message for e in result.errors] == ["Erro ao inserir lote: duplicate key"] * 2
    assert {e.error_type for e in result.errors} == {"BATCH_INSERT_FAILED"}
    assert [e.row for e in result.errors] == [1, 3]
    assert store.prices == []


def test_update_failure_counts_sub_batch_as_errors(make_content):
    store = FailingStore()
    _run(make_content(*_ids(2)), store)
    store.prices.clear()
    store.fail_update = True

    result = _run(make_content(*_ids(2)), store, import_batch_id="batch-2")
    assert result.success is False
    assert result.stats.errors == 2
    assert result.stats.updated == 0
    assert result.errors[0].message == "Erro ao atualizar lote: timeout"
    assert result.errors[0].row == 1
    assert store.prices == []


def test_price_write_failure_is_not_an_error(make_content):
    store = FailingStore(fail_prices=True)
    result = _run(make_content({}), store)
    assert result.success is True
    assert result.stats.inserted == 1
    assert result.stats.errors == 0


def test_abort_before_start(make_content):
    event = threading.Event()
    event.set()
    store = InMemoryReferenceItemStore()
    result = _run(make_content(*_ids(3)), store, abort_event=event)

    assert result.aborted is True
    assert result.success is False
    assert store.items == {}


def test_abort_between_batches(make_content):
    event = threading.Event()

    def on_progress(progress):
        if progress.current == 2:
            event.set()

    store = InMemoryReferenceItemStore()
    result = _run(make_content(*_ids(5)), store, batch_size=2, abort_event=event, on_progress=on_progress)

    assert result.aborted is True
    assert result.stats.inserted == 4


def test_progress_notifications(make_content):
    events = []
    _run(make_content(*_ids(5)), InMemoryReferenceItemStore(), batch_size=2, on_progress=events.append)

    assert [(e.phase, e.current, e.percentage) for e in events] == [
        ("parsing", 5, 100),
        ("processing", 0, 0),
        ("processing", 2, 40),
        ("processing", 4, 80),
        ("saving", 5, 100),
    ]
    assert events[0].message == "5 registros encontrados"
    assert events[2].message == "Processando 2 de 5..."
    assert events[-1].message == "Finalizando importação..."


def test_progress_with_no_rows():
    events = []
    result = import_rows(
        parse(""), InMemoryReferenceItemStore(),
        import_batch_id="b", reference_date=REF_DATE, on_progress=events.append,
    )
    assert result.success is True
    assert [(e.phase, e.total, e.percentage) for e in events] == [("parsing", 0, 100), ("saving", 0, 100)]


@pytest.mark.parametrize("batch_size", [0, -1])
def test_invalid_batch_size(batch_size):
    with pytest.raises(ValueError):
        import_rows(parse(""), InMemoryReferenceItemStore(), import_batch_id="b",
                    reference_date=REF_DATE, batch_size=batch_size)


def test_parsing_notification_counts_rows_found(make_line):
    events = []
    content = "\n".join([make_line(), make_line(count=4), make_line({Col.MANUFACTURER_ID: "9"})])
    import_rows(
        parse(content), InMemoryReferenceItemStore(),
        import_batch_id="b", reference_date=REF_DATE, on_progress=events.append,
    )
    parsing = events[0]
    assert (parsing.phase, parsing.current, parsing.total, parsing.percentage) == ("parsing", 2, 2, 100)
    assert parsing.message == "2 registros encontrados"
    assert events[1].phase == "processing"
