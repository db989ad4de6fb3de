"""Shared fixtures: settings without .env, fake facilitator, app + TestClient."""
from typing import Any

import pytest
from fastapi.testclient import TestClient

from x402gate.core.config import Settings
from x402gate.main import create_app
from x402gate.paywall.config import PaywallConfig
from x402gate.services.facilitator import (
    Facilitator,
    SettleResponse,
    VerifyRequest,
    VerifyResponse,
)
from x402gate.storage.memory import MemoryEntitlementStore

MERCHANT = "0x" + "ab" * 20


class FakeFacilitator(Facilitator):
    """Records calls; returns scripted responses or raises `error`."""

    def __init__(
        self,
        *,
        is_valid: bool = True,
        event: str = "payment.settled",
        tx_hash: str | None = "0xabc",
        error: Exception | None = None,
    ) -> None:
        self.is_valid = is_valid
        self.event = event
        self.tx_hash = tx_hash
        self.error = error
        self.calls: list[tuple[str, VerifyRequest]] = []

    def verify_payment(self, request: VerifyRequest) -> VerifyResponse:
        self.calls.append(("verify", request))
        if self.error is not None:
            raise self.error
        body: dict[str, Any] = {"isValid": self.is_valid}
        if not self.is_valid:
            body["invalidReason"] = "invalid_signature"
        return VerifyResponse.model_validate(body)

    def settle_payment(self, request: VerifyRequest) -> SettleResponse:
        self.calls.append(("settle", request))
        body: dict[str, Any] = {"x402Version": 1, "event": self.event}
        if self.tx_hash:
            body["txHash"] = self.tx_hash
        return SettleResponse.model_validate(body)

    @property
    def methods(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def settings() -> Settings:
    return Settings(merchant_address=MERCHANT, _env_file=None)


@pytest.fixture
def paywall_config(settings: Settings) -> PaywallConfig:
    return PaywallConfig.from_settings(settings)


@pytest.fixture
def store() -> MemoryEntitlementStore:
    return MemoryEntitlementStore()


@pytest.fixture
def facilitator() -> FakeFacilitator:
    return FakeFacilitator()


@pytest.fixture
def client(settings, store, facilitator) -> TestClient:
    app = create_app(settings, store=store, facilitator=facilitator)
    with TestClient(app) as test_client:
        yield test_client


def requirements(payment_id: str = "p1") -> dict[str, Any]:
    """paymentRequirements as a client would echo them back from a challenge."""
    return {
        "scheme": "exact",
        "network": "cronos-testnet",
        "asset": "0xc01efAaF7C5C61bEbFAeb358E1161b537b8bC0e0",
        "payTo": MERCHANT,
        "maxAmountRequired": "1000000",
        "maxTimeoutSeconds": 300,
        "description": "Unlock /api/data",
        "mimeType": "application/json",
        "resource": "http://localhost:8787/api/secret",
        "extra": {"paymentId": payment_id},
    }
