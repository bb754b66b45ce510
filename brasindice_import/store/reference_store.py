from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from ..models.import_result import PriceRecord, PriceSnapshot
from ..models.reference_item import ReferenceItemPayload

"""Reference-item persistence seam.

The importer only talks to the ReferenceItemStore protocol; how items and
price history are actually persisted (hosted Postgres, REST, ...) belongs to
the deployment. InMemoryReferenceItemStore backs dry runs and tests.
"""

__all__ = [
    "StoreError",
    "ReferenceItemStore",
    "StoredItem",
    "InMemoryReferenceItemStore",
]


class StoreError(Exception):
    pass


class ReferenceItemStore(Protocol):
    def find_item_ids(self, external_codes: Sequence[str]) -> dict[str, str]:
        """Map each already-stored external code to its item id."""
        ...

    def latest_prices(self, item_ids: Sequence[str]) -> dict[str, PriceSnapshot]:
        """Latest PF/PMC per item id (items without history may be absent)."""
        ...

    def insert_items(
        self, items: Sequence[tuple[str, ReferenceItemPayload]], import_batch_id: str
    ) -> dict[str, str]:
        """Insert (external_code, payload) pairs; return external_code -> new id."""
        ...

    def update_items(
        self, items: Sequence[tuple[str, ReferenceItemPayload]], import_batch_id: str
    ) -> int:
        """Update (item_id, payload) pairs; return number of updated items."""
        ...

    def insert_prices(self, records: Sequence[PriceRecord]) -> int:
        ...


@dataclass
class StoredItem:
    item_id: str
    external_code: str
    payload: ReferenceItemPayload
    first_import_batch_id: str
    last_import_batch_id: str
    is_active: bool = True


class InMemoryReferenceItemStore:
    """Dict-backed ReferenceItemStore. Not thread safe (serial importer)."""

    def __init__(self) -> None:
        self.items: dict[str, StoredItem] = {}
        self.prices: list[PriceRecord] = []
        self._code_index: dict[str, str] = {}

    def find_item_ids(self, external_codes: Sequence[str]) -> dict[str, str]:
        return {code: self._code_index[code] for code in external_codes if code in self._code_index}

    def latest_prices(self, item_ids: Sequence[str]) -> dict[str, PriceSnapshot]:
        wanted = set(item_ids)
        latest: dict[tuple[str, str], PriceRecord] = {}
        # valid_from が同じ場合は後から登録された価格を優先
        for record in self.prices:
            if record.item_id not in wanted:
                continue
            key = (record.item_id, record.price_type)
            current = latest.get(key)
            if current is None or record.valid_from >= current.valid_from:
                latest[key] = record

        snapshots: dict[str, PriceSnapshot] = {}
        for item_id in wanted:
            pf = latest.get((item_id, "pf"))
            pmc = latest.get((item_id, "pmc"))
            if pf is None and pmc is None:
                continue
            snapshots[item_id] = PriceSnapshot(
                pf=pf.price_value if pf else None,
                pmc=pmc.price_value if pmc else None,
            )
        return snapshots

    def insert_items(
        self, items: Sequence[tuple[str, ReferenceItemPayload]], import_batch_id: str
    ) -> dict[str, str]:
        inserted: dict[str, str] = {}
        for external_code, payload in items:
            existing_id = self._code_index.get(external_code)
            if existing_id is not None:
                # upsert: 競合時は既存行を更新
                stored = self.items[existing_id]
                stored.payload = payload
                stored.last_import_batch_id = import_batch_id
                inserted[external_code] = existing_id
                continue
            item_id = uuid4().hex
            self.items[item_id] = StoredItem(
                item_id=item_id,
                external_code=external_code,
                payload=payload,
                first_import_batch_id=import_batch_id,
                last_import_batch_id=import_batch_id,
            )
            self._code_index[external_code] = item_id
            inserted[external_code] = item_id
        return inserted

    def update_items(
        self, items: Sequence[tuple[str, ReferenceItemPayload]], import_batch_id: str
    ) -> int:
        for item_id, payload in items:
            stored = self.items.get(item_id)
            if stored is None:
                raise StoreError(f"item not found: {item_id}")
            stored.payload = payload
            stored.last_import_batch_id = import_batch_id
            stored.is_active = True
        return len(items)

    def insert_prices(self, records: Sequence[PriceRecord]) -> int:
        self.prices.extend(records)
        return len(records)
