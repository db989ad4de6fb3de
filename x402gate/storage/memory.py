"""
Process-local entitlement store.
Lost on restart and not shared between replicas; use the redis or sql backend for that.
"""
import threading

from x402gate.paywall.models import SettlementRecord
from x402gate.storage.base import EntitlementStore


class MemoryEntitlementStore(EntitlementStore):
    def __init__(self) -> None:
        self._records: dict[str, SettlementRecord] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> SettlementRecord | None:
        with self._lock:
            return self._records.get(key)

    def put(self, key: str, record: SettlementRecord) -> None:
        # Records are frozen, so swapping the reference is the whole write
        with self._lock:
            self._records[key] = record

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
