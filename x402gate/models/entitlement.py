"""
Entitlement model — settled x402 payments keyed by the paymentId issued in the challenge.
Rows are only inserted/updated after a confirmed settle; never deleted by the service.
"""
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, String

from x402gate.db.base import Base


class Entitlement(Base):
    __tablename__ = "entitlements"

    payment_id = Column(String, primary_key=True)
    settled = Column(Boolean, nullable=False, default=True)
    tx_hash = Column(String, nullable=True)                  # хэш транзакции от фасилитатора
    recorded_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
