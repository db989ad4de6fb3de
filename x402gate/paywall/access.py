"""
AccessGate: решение пропустить запрос или выдать 402-challenge.
Гейт только читает store; переход unauthenticated -> entitled делает SettlementCoordinator.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from starlette.requests import Request

from x402gate.paywall.challenge import issue_challenge
from x402gate.paywall.config import PaywallConfig
from x402gate.paywall.errors import PaymentRequiredError
from x402gate.paywall.models import AccessDecision
from x402gate.utils.metrics import admissions_total

if TYPE_CHECKING:
    from x402gate.storage.base import EntitlementStore

logger = logging.getLogger(__name__)

PAYMENT_ID_HEADER = "x-payment-id"

KeyExtractor = Callable[[Request], "str | None"]


class AccessGate:
    def __init__(
        self,
        config: PaywallConfig,
        store: EntitlementStore,
        key_extractor: KeyExtractor | None = None,
    ) -> None:
        self.config = config
        self.store = store
        self.key_extractor = key_extractor

    def resolve_key(self, request: Request) -> str:
        """
        Ключ entitlement по приоритету: key_extractor -> заголовок x-payment-id -> "".
        Экстрактор, вернувший None, не блокирует фолбэк на заголовок.
        """
        key = None
        if self.key_extractor is not None:
            key = self.key_extractor(request)
        if key is None:
            key = request.headers.get(PAYMENT_ID_HEADER)
        return (key or "").strip()

    def decide(self, entitlement_key: str) -> AccessDecision:
        """
        Пропускаем только если ключ непустой и в store есть запись с settled=True.
        Иначе — новый challenge со свежим paymentId.
        """
        if self.store.is_entitled(entitlement_key):
            admissions_total.inc()
            return AccessDecision(admitted=True, entitlement_key=entitlement_key)

        return AccessDecision(
            admitted=False,
            entitlement_key=entitlement_key,
            challenge=issue_challenge(self.config),
        )

    def __call__(self, request: Request) -> str:
        """FastAPI-зависимость: вернуть ключ при допуске, иначе PaymentRequiredError (-> 402)."""
        decision = self.decide(self.resolve_key(request))
        if not decision.admitted:
            raise PaymentRequiredError(decision.challenge)
        return decision.entitlement_key
