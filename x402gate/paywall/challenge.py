"""
Challenge Issuer: issue_challenge(config) -> PaymentChallenge.
Чистая функция от конфига + энтропия. На каждый вызов — новый paymentId.
"""
from __future__ import annotations

import hashlib
import logging
import secrets

from x402gate.paywall.config import PaywallConfig
from x402gate.paywall.models import PaymentChallenge, PaymentOption
from x402gate.utils.metrics import challenges_issued_total

logger = logging.getLogger(__name__)

PAYMENT_ID_PREFIX = "pay_"


def new_payment_id() -> str:
    """128 бит из secrets, hex. Ключ работает как bearer-токен, поэтому только CSPRNG."""
    return f"{PAYMENT_ID_PREFIX}{secrets.token_hex(16)}"


def payment_ref(payment_id: str) -> str:
    """Короткий sha256-отпечаток ключа для логов: сам paymentId в лог не пишем."""
    return hashlib.sha256(payment_id.encode()).hexdigest()[:12]


def issue_challenge(config: PaywallConfig) -> PaymentChallenge:
    """
    Собрать 402-challenge с одним вариантом оплаты (scheme=exact).
    Доп. поля из config.extra кладём в extra, paymentId перезаписать нельзя.
    """
    payment_id = new_payment_id()
    option = PaymentOption(
        network=config.network,
        asset=config.asset,
        pay_to=config.pay_to,
        max_amount_required=config.max_amount_required,
        max_timeout_seconds=config.max_timeout_seconds,
        description=config.description,
        mime_type=config.mime_type,
        resource=config.resource,
        output_schema=config.output_schema,
        extra={**config.extra, "paymentId": payment_id},
    )
    challenges_issued_total.labels(network=config.network).inc()
    logger.info(
        "paywall_challenge_issued",
        extra={"payment_ref": payment_ref(payment_id), "network": config.network},
    )
    return PaymentChallenge(accepts=[option])
