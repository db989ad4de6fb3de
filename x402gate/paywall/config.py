"""
Paywall config — типизированная структура параметров challenge, собирается из Settings один раз при старте.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from x402gate.core.config import Settings

DEFAULT_MAX_TIMEOUT_SECONDS = 300
DEFAULT_MIME_TYPE = "application/json"

DEFAULT_OUTPUT_SCHEMA: dict[str, Any] = {
    "input": {"type": "http", "method": "GET"},
    "output": {"type": "object", "fields": {"response": {"type": "string"}}},
}


class PaywallConfig(BaseModel):
    """Параметры оплаты для Challenge Issuer / AccessGate."""

    network: str
    pay_to: str
    asset: str
    max_amount_required: str
    description: str
    resource: str
    output_schema: dict[str, Any] | None = None
    max_timeout_seconds: int = DEFAULT_MAX_TIMEOUT_SECONDS
    mime_type: str = DEFAULT_MIME_TYPE
    # Доп. метаданные для accepts[].extra (paymentId всегда генерируется отдельно)
    extra: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @field_validator("pay_to")
    @classmethod
    def validate_pay_to(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("pay_to is required")
        return v.strip()

    @classmethod
    def from_settings(cls, settings: Settings, *, description: str | None = None) -> "PaywallConfig":
        return cls(
            network=settings.network,
            pay_to=settings.merchant_address,
            asset=settings.resolved_asset,
            max_amount_required=settings.price_base_units,
            description=description or settings.resource_description,
            resource=settings.public_resource_url,
            output_schema=DEFAULT_OUTPUT_SCHEMA,
            max_timeout_seconds=settings.max_timeout_seconds,
            mime_type=settings.resource_mime_type,
        )
