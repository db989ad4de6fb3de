"""
Redis-backed entitlement store (shared between replicas).
One JSON value per key, written with a single SET: atomic per key, no TTL.
"""
import logging

import redis

from x402gate.paywall.models import SettlementRecord
from x402gate.storage.base import EntitlementStore

logger = logging.getLogger(__name__)


class RedisEntitlementStore(EntitlementStore):
    def __init__(self, redis_url: str | None = None, client: redis.Redis | None = None) -> None:
        if client is None:
            if not redis_url:
                raise ValueError("redis_url or client is required")
            client = redis.Redis.from_url(redis_url, decode_responses=True)
        self.client = client

    def _key(self, key: str) -> str:
        return f"entitlement:{key}"

    def get(self, key: str) -> SettlementRecord | None:
        raw = self.client.get(self._key(key))
        if not raw:
            return None
        return SettlementRecord.model_validate_json(raw)

    def put(self, key: str, record: SettlementRecord) -> None:
        self.client.set(self._key(key), record.model_dump_json(by_alias=True))

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            logger.warning("entitlement_store_ping_failed", extra={"backend": "redis", "error": str(e)})
            return False
