from abc import ABC, abstractmethod

from x402gate.paywall.models import SettlementRecord


class EntitlementStore(ABC):
    """
    entitlement key -> SettlementRecord.
    No eviction, no TTL. put() overwrites and is atomic per key.
    """

    @abstractmethod
    def get(self, key: str) -> SettlementRecord | None:
        """Return the record, or None if the key was never settled."""
        raise NotImplementedError

    @abstractmethod
    def put(self, key: str, record: SettlementRecord) -> None:
        raise NotImplementedError

    def ping(self) -> bool:
        """Readiness check for /ready."""
        return True

    def is_entitled(self, key: str) -> bool:
        if not key:
            return False
        record = self.get(key)
        return record is not None and record.settled
