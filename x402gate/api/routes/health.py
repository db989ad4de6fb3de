from fastapi import APIRouter, Depends, Response

from x402gate.api.deps import get_entitlement_store
from x402gate.storage.base import EntitlementStore


router = APIRouter()


@router.get("/health")
def health() -> dict:
    """Liveness check - always returns 200 if app is running."""
    return {"status": "ok"}


@router.get("/ready")
def readiness(response: Response, store: EntitlementStore = Depends(get_entitlement_store)) -> dict:
    """Readiness check - returns 503 if the entitlement store is unavailable."""
    if store.ping():
        return {"status": "ready"}
    response.status_code = 503
    return {"status": "not_ready", "error": f"{type(store).__name__} ping failed"}
