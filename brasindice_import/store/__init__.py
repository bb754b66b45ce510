from .reference_store import InMemoryReferenceItemStore, ReferenceItemStore, StoredItem, StoreError

__all__ = [
    "InMemoryReferenceItemStore",
    "ReferenceItemStore",
    "StoredItem",
    "StoreError",
]
