"""
DTO paywall: PaymentOption/PaymentChallenge (402-ответ), SettlementRecord (запись в store),
SettlementRequest/SettlementResult (POST /api/pay), AccessDecision (результат гейта).
Wire-формат — camelCase (x402 / Base discovery schema).
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

X402_VERSION = 1


class PaymentStatus(str, Enum):
    """Стабильные машинные коды исходов оплаты."""

    VERIFY_FAILED = "verify_failed"
    VERIFY_SUCCESS = "verify_success"
    SETTLE_FAILED = "settle_failed"
    SETTLE_SUCCESS = "settle_success"
    PAYMENT_REQUIRED = "payment_required"


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ----- Challenge (402) -----


class PaymentOption(_WireModel):
    """
    Элемент accepts[] в формате Base discovery schema (x402scan и др. потребители).
    Нестандартные поля — только в extra, именованные поля не заменяем.
    """

    scheme: Literal["exact"] = "exact"
    network: str
    asset: str
    pay_to: str
    max_amount_required: str
    max_timeout_seconds: int
    description: str
    mime_type: str
    resource: str
    output_schema: dict[str, Any] | None = None
    extra: dict[str, Any] = Field(default_factory=dict)

    @property
    def payment_id(self) -> str | None:
        return self.extra.get("paymentId")


class PaymentChallenge(_WireModel):
    """Тело 402-ответа. Собирается заново на каждый неоплаченный запрос, не хранится."""

    x402_version: int = X402_VERSION
    error: str = PaymentStatus.PAYMENT_REQUIRED.value
    accepts: list[PaymentOption]


# ----- Entitlement -----


class SettlementRecord(_WireModel):
    """Запись entitlement: создаётся/перезаписывается только при успешном settle."""

    settled: bool
    transaction_hash: str | None = None
    recorded_at: datetime


# ----- Settlement (POST /api/pay) -----


class SettlementRequest(_WireModel):
    """Тело POST /api/pay. paymentRequirements — эхо PaymentOption, передаётся фасилитатору как есть."""

    payment_id: str
    payment_header: str
    payment_requirements: dict[str, Any]


class SettlementSuccess(_WireModel):
    ok: Literal[True] = True
    tx_hash: str | None = None


class SettlementFailure(_WireModel):
    ok: Literal[False] = False
    error: Literal[PaymentStatus.VERIFY_FAILED, PaymentStatus.SETTLE_FAILED]
    details: dict[str, Any] = Field(default_factory=dict)


SettlementResult = Union[SettlementSuccess, SettlementFailure]


# ----- Решение гейта (чистая логика, без I/O кроме чтения store) -----


class AccessDecision(BaseModel):
    """Результат AccessGate.decide: пропустить запрос или отдать challenge."""

    admitted: bool = Field(..., description="True = запрос идёт дальше к ресурсу")
    entitlement_key: str = Field("", description="Ключ, по которому проверялся store")
    challenge: PaymentChallenge | None = Field(
        None,
        description="402-ответ; заполнен только при admitted=False",
    )

    model_config = {"frozen": True}
