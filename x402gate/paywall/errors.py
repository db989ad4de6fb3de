"""
Ошибки протокола оплаты. Рендерятся в HTTP-ответы обработчиками в x402gate.api.errors.
"""
from __future__ import annotations

from x402gate.paywall.models import PaymentChallenge


class PaywallError(Exception):
    """Base class for paywall protocol errors."""


class PaymentRequiredError(PaywallError):
    """Нет entitlement: отдать 402 с challenge."""

    def __init__(self, challenge: PaymentChallenge):
        super().__init__("payment required")
        self.challenge = challenge


class MissingPaymentFieldsError(PaywallError):
    """POST /api/pay без paymentId / paymentHeader / paymentRequirements."""

    def __init__(self, missing: list[str]):
        super().__init__("missing payment fields")
        self.missing = missing
