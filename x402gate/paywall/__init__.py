"""
x402 paywall (внутренняя библиотека).
Challenge (issue_challenge), settlement (SettlementCoordinator) и допуск (AccessGate) разделены;
общее состояние — только EntitlementStore, передаётся явно.
"""
from x402gate.paywall.access import AccessGate
from x402gate.paywall.audit import record_settlement
from x402gate.paywall.challenge import issue_challenge, new_payment_id, payment_ref
from x402gate.paywall.config import PaywallConfig
from x402gate.paywall.errors import MissingPaymentFieldsError, PaymentRequiredError
from x402gate.paywall.models import (
    AccessDecision,
    PaymentChallenge,
    PaymentOption,
    PaymentStatus,
    SettlementFailure,
    SettlementRecord,
    SettlementRequest,
    SettlementResult,
    SettlementSuccess,
)
from x402gate.paywall.settlement import SettlementCoordinator

__all__ = [
    "AccessDecision",
    "AccessGate",
    "MissingPaymentFieldsError",
    "PaymentChallenge",
    "PaymentOption",
    "PaymentRequiredError",
    "PaymentStatus",
    "PaywallConfig",
    "SettlementCoordinator",
    "SettlementFailure",
    "SettlementRecord",
    "SettlementRequest",
    "SettlementResult",
    "SettlementSuccess",
    "issue_challenge",
    "new_payment_id",
    "payment_ref",
    "record_settlement",
]
