"""
SQLAlchemy-backed entitlement store.
put() is a merge in its own transaction; a concurrent insert of the same key is retried as an update.
"""
import logging
from datetime import timezone

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from x402gate.db.base import Base
from x402gate.db.session import build_engine, build_session_factory
from x402gate.models.entitlement import Entitlement
from x402gate.paywall.challenge import payment_ref
from x402gate.paywall.models import SettlementRecord
from x402gate.storage.base import EntitlementStore

logger = logging.getLogger(__name__)


class SqlEntitlementStore(EntitlementStore):
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    @classmethod
    def from_url(cls, database_url: str, *, create_schema: bool = True) -> "SqlEntitlementStore":
        engine = build_engine(database_url)
        if create_schema:
            Base.metadata.create_all(engine, tables=[Entitlement.__table__])
        return cls(build_session_factory(engine))

    def get(self, key: str) -> SettlementRecord | None:
        with self._session_factory() as db:
            row = db.get(Entitlement, key)
            if row is None:
                return None
            recorded_at = row.recorded_at
            if recorded_at.tzinfo is None:
                # SQLite drops tzinfo; values are always written in UTC
                recorded_at = recorded_at.replace(tzinfo=timezone.utc)
            return SettlementRecord(
                settled=row.settled,
                transaction_hash=row.tx_hash,
                recorded_at=recorded_at,
            )

    def put(self, key: str, record: SettlementRecord) -> None:
        try:
            self._merge(key, record)
        except IntegrityError:
            logger.warning("entitlement_insert_race", extra={"payment_ref": payment_ref(key), "backend": "sql"})
            self._merge(key, record)

    def _merge(self, key: str, record: SettlementRecord) -> None:
        with self._session_factory() as db:
            try:
                db.merge(
                    Entitlement(
                        payment_id=key,
                        settled=record.settled,
                        tx_hash=record.transaction_hash,
                        recorded_at=record.recorded_at,
                    )
                )
                db.commit()
            except Exception:
                db.rollback()
                raise

    def ping(self) -> bool:
        try:
            with self._session_factory() as db:
                db.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("entitlement_store_ping_failed", extra={"backend": "sql", "error": str(e)})
            return False
