"""
Resource routes (mounted under /api).
GET /data — protected by the x402 paywall; POST /pay — verify + settle a payment.
"""
import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from x402gate.api.deps import get_resource_service, require_paid_access
from x402gate.paywall.errors import MissingPaymentFieldsError
from x402gate.paywall.models import SettlementRequest
from x402gate.services.resource.service import ResourceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["resource"])


@router.get("/data")
def get_data(
    entitlement_key: str = Depends(require_paid_access),
    service: ResourceService = Depends(get_resource_service),
) -> dict:
    """Protected payload; 402 challenge is raised by require_paid_access."""
    return service.get_secret_payload()


@router.post("/pay")
async def pay(
    request: Request,
    service: ResourceService = Depends(get_resource_service),
):
    """
    Body: { paymentId, paymentHeader, paymentRequirements }.
    400 {error: "missing payment fields"} before any facilitator call if something is absent.
    """
    body = await _read_json_object(request)
    settlement_request = _parse_settlement_request(body)

    # Facilitator calls are blocking (httpx sync + pybreaker)
    result = await run_in_threadpool(service.settle_payment, settlement_request)
    if not result.ok:
        return JSONResponse(status_code=400, content=result.to_wire())
    return result.to_wire()


async def _read_json_object(request: Request) -> dict[str, Any]:
    raw = await request.body()
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _parse_settlement_request(body: dict[str, Any]) -> SettlementRequest:
    payment_id = body.get("paymentId")
    payment_header = body.get("paymentHeader")
    payment_requirements = body.get("paymentRequirements")

    missing = []
    if not isinstance(payment_id, str) or not payment_id.strip():
        missing.append("paymentId")
    if not isinstance(payment_header, str) or not payment_header:
        missing.append("paymentHeader")
    if not isinstance(payment_requirements, dict):
        missing.append("paymentRequirements")
    if missing:
        raise MissingPaymentFieldsError(missing)

    return SettlementRequest(
        payment_id=payment_id.strip(),
        payment_header=payment_header,
        payment_requirements=payment_requirements,
    )
