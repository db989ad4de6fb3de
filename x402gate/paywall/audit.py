"""
Аудит оплат: record_settlement вызывается координатором на каждый исход verify/settle.
"""
from __future__ import annotations

import logging
from typing import Literal

from x402gate.paywall.challenge import payment_ref
from x402gate.utils.metrics import settlements_total

logger = logging.getLogger(__name__)

SettlementOutcome = Literal["settle_success", "verify_failed", "settle_failed", "error"]


def record_settlement(
    payment_id: str,
    outcome: SettlementOutcome,
    *,
    network: str | None = None,
    tx_hash: str | None = None,
    reason: str | None = None,
    latency_ms: int | None = None,
) -> None:
    """
    Записать исход попытки оплаты для аналитики и разборов.
    settle_success пишем только после того как entitlement сохранён в store.
    """
    settlements_total.labels(outcome=outcome).inc()
    level = logging.INFO if outcome == "settle_success" else logging.WARNING
    logger.log(
        level,
        "paywall_settlement",
        extra={
            "payment_id": payment_id,
            "payment_ref": payment_ref(payment_id),
            "outcome": outcome,
            "network": network,
            "tx_hash": tx_hash,
            "error": reason,
            "latency_ms": latency_ms,
        },
    )
