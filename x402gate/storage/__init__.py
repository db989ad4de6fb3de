"""
Entitlement store backends. build_entitlement_store picks one from settings.
"""
import logging

from x402gate.core.config import Settings
from x402gate.storage.base import EntitlementStore
from x402gate.storage.memory import MemoryEntitlementStore

logger = logging.getLogger(__name__)


def build_entitlement_store(settings: Settings) -> EntitlementStore:
    backend = settings.entitlement_backend
    logger.info("entitlement_store_selected", extra={"backend": backend})
    if backend == "redis":
        from x402gate.storage.redis_store import RedisEntitlementStore

        return RedisEntitlementStore(settings.redis_url)
    if backend == "sql":
        from x402gate.storage.sql_store import SqlEntitlementStore

        return SqlEntitlementStore.from_url(settings.database_url)
    return MemoryEntitlementStore()


__all__ = [
    "EntitlementStore",
    "MemoryEntitlementStore",
    "build_entitlement_store",
]
