"""
Exception handlers: protocol errors -> fixed x402 wire bodies.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from x402gate.paywall.errors import MissingPaymentFieldsError, PaymentRequiredError
from x402gate.services.facilitator import FacilitatorError

logger = logging.getLogger(__name__)


async def payment_required_handler(request: Request, exc: PaymentRequiredError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_402_PAYMENT_REQUIRED,
        content=exc.challenge.to_wire(),
    )


async def missing_fields_handler(request: Request, exc: MissingPaymentFieldsError) -> JSONResponse:
    logger.info(
        "paywall_missing_fields",
        extra={"path": request.url.path, "error": ",".join(exc.missing)},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "missing payment fields"},
    )


async def facilitator_error_handler(request: Request, exc: FacilitatorError) -> JSONResponse:
    logger.error(
        "facilitator_error",
        exc_info=exc,
        extra={"path": request.url.path, "status_code": exc.status_code, "error": str(exc)},
    )
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"error": "facilitator_unavailable"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PaymentRequiredError, payment_required_handler)
    app.add_exception_handler(MissingPaymentFieldsError, missing_fields_handler)
    app.add_exception_handler(FacilitatorError, facilitator_error_handler)
