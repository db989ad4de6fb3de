"""
Wire models for the x402 facilitator REST API (/verify, /settle).
Responses keep unknown fields so they can be returned to the client as failure details.
"""
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

X402_VERSION = 1
SETTLED_EVENT = "payment.settled"


class _FacilitatorModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class VerifyRequest(_FacilitatorModel):
    """Body for both /verify and /settle."""

    x402_version: int = X402_VERSION
    payment_header: str
    payment_requirements: dict[str, Any]


class VerifyResponse(_FacilitatorModel):
    is_valid: bool
    invalid_reason: str | None = None


class SettleResponse(_FacilitatorModel):
    event: str
    tx_hash: str | None = None
    error: str | None = None

    @property
    def is_settled(self) -> bool:
        return self.event == SETTLED_EVENT
