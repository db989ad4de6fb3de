"""
Settlement Coordinator: verify -> settle через фасилитатор -> запись entitlement.
Строго двухфазно: settle не стартует без успешного verify, store пишем только после payment.settled.
Любая ошибка транспорта пробрасывается как есть (fail-closed, entitlement не выдаём).
"""
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from x402gate.paywall.audit import record_settlement
from x402gate.paywall.challenge import payment_ref
from x402gate.paywall.models import (
    PaymentStatus,
    SettlementFailure,
    SettlementRecord,
    SettlementResult,
    SettlementSuccess,
)
from x402gate.services.facilitator import Facilitator, VerifyRequest

if TYPE_CHECKING:
    from x402gate.storage.base import EntitlementStore

logger = logging.getLogger(__name__)


class SettlementCoordinator:
    def __init__(self, store: EntitlementStore) -> None:
        self.store = store

    def settle(
        self,
        facilitator: Facilitator,
        payment_id: str,
        payment_header: str,
        payment_requirements: dict[str, Any],
    ) -> SettlementResult:
        """
        Проверить и провести оплату; при успехе сохранить {settled, txHash, recordedAt} по payment_id.

        Возвращает SettlementSuccess или SettlementFailure(verify_failed | settle_failed).
        Исключения фасилитатора не перехватываются.
        """
        start = time.monotonic()
        network = payment_requirements.get("network")
        self._check_correlation(payment_id, payment_requirements)

        body = VerifyRequest(
            payment_header=payment_header,
            payment_requirements=payment_requirements,
        )

        try:
            verify = facilitator.verify_payment(body)
            if not verify.is_valid:
                record_settlement(
                    payment_id,
                    "verify_failed",
                    network=network,
                    reason=verify.invalid_reason,
                    latency_ms=_elapsed_ms(start),
                )
                return SettlementFailure(
                    error=PaymentStatus.VERIFY_FAILED,
                    details=verify.to_wire(),
                )

            settle = facilitator.settle_payment(body)
            if not settle.is_settled:
                record_settlement(
                    payment_id,
                    "settle_failed",
                    network=network,
                    reason=settle.error or settle.event,
                    latency_ms=_elapsed_ms(start),
                )
                return SettlementFailure(
                    error=PaymentStatus.SETTLE_FAILED,
                    details=settle.to_wire(),
                )
        except Exception as e:
            record_settlement(
                payment_id,
                "error",
                network=network,
                reason=f"{type(e).__name__}: {e}",
                latency_ms=_elapsed_ms(start),
            )
            raise

        self.store.put(
            payment_id,
            SettlementRecord(
                settled=True,
                transaction_hash=settle.tx_hash,
                recorded_at=datetime.now(timezone.utc),
            ),
        )
        record_settlement(
            payment_id,
            "settle_success",
            network=network,
            tx_hash=settle.tx_hash,
            latency_ms=_elapsed_ms(start),
        )
        return SettlementSuccess(tx_hash=settle.tx_hash)

    @staticmethod
    def _check_correlation(payment_id: str, payment_requirements: dict[str, Any]) -> None:
        # Ключ доверяем как bearer-токену; расхождение только логируем
        extra = payment_requirements.get("extra")
        echoed = extra.get("paymentId") if isinstance(extra, dict) else None
        if echoed and echoed != payment_id:
            logger.warning(
                "paywall_payment_id_mismatch",
                extra={
                    "payment_ref": payment_ref(payment_id),
                    "error": f"requirements carry {payment_ref(str(echoed))}",
                },
            )


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
