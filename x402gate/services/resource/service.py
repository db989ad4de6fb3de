"""
ResourceService — protected payload and settlement entry point for POST /api/pay.
Performs no entitlement checks itself: GET /api/data is guarded by AccessGate upstream.
"""
import logging

from x402gate.paywall.models import SettlementRequest, SettlementResult
from x402gate.paywall.settlement import SettlementCoordinator
from x402gate.services.facilitator import Facilitator

logger = logging.getLogger(__name__)

SECRET_RESPONSE = "paid content unlocked"


class ResourceService:
    def __init__(self, coordinator: SettlementCoordinator, facilitator: Facilitator):
        self.coordinator = coordinator
        self.facilitator = facilitator

    def get_secret_payload(self) -> dict:
        return {"ok": True, "response": SECRET_RESPONSE}

    def settle_payment(self, request: SettlementRequest) -> SettlementResult:
        return self.coordinator.settle(
            self.facilitator,
            request.payment_id,
            request.payment_header,
            request.payment_requirements,
        )
