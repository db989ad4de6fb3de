from x402gate.core.config import Settings
from x402gate.services.circuit_breaker import build_circuit_breaker
from x402gate.services.facilitator.client import Facilitator, FacilitatorClient
from x402gate.services.facilitator.errors import (
    FacilitatorError,
    FacilitatorRejectedError,
    FacilitatorTransportError,
    FacilitatorUnavailableError,
)
from x402gate.services.facilitator.schemas import (
    SETTLED_EVENT,
    SettleResponse,
    VerifyRequest,
    VerifyResponse,
)


def build_facilitator(settings: Settings) -> FacilitatorClient:
    breaker = build_circuit_breaker("facilitator", settings, exclude=[FacilitatorRejectedError])
    return FacilitatorClient(
        settings.facilitator_url,
        timeout=settings.facilitator_timeout,
        breaker=breaker,
    )


__all__ = [
    "Facilitator",
    "FacilitatorClient",
    "FacilitatorError",
    "FacilitatorRejectedError",
    "FacilitatorTransportError",
    "FacilitatorUnavailableError",
    "SETTLED_EVENT",
    "SettleResponse",
    "VerifyRequest",
    "VerifyResponse",
    "build_facilitator",
]
