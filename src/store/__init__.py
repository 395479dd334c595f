"""In-memory ledger store package."""

from src.store.ids import IdFactory, SequentialIdFactory, new_id
from src.store.ledger_store import LedgerStore, utc_now

__all__ = [
    "IdFactory",
    "LedgerStore",
    "SequentialIdFactory",
    "new_id",
    "utc_now",
]
