"""
Main FastAPI application for the x402 paywall API.
Serves the paywalled resource, settlement endpoint, health and metrics.

Run: uvicorn x402gate.main:create_app --factory --port 8787
"""
import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from x402gate.api.errors import register_exception_handlers
from x402gate.api.routes import health, resource
from x402gate.core.config import Settings, get_settings
from x402gate.core.logging import configure_logging, request_id_var
from x402gate.paywall.access import AccessGate, KeyExtractor
from x402gate.paywall.config import PaywallConfig
from x402gate.paywall.settlement import SettlementCoordinator
from x402gate.services.facilitator import Facilitator, build_facilitator
from x402gate.services.resource.service import ResourceService
from x402gate.storage import EntitlementStore, build_entitlement_store
from x402gate.utils.metrics import router as metrics_router


logger = logging.getLogger("x402gate")


def create_app(
    settings: Settings | None = None,
    *,
    store: EntitlementStore | None = None,
    facilitator: Facilitator | None = None,
    key_extractor: KeyExtractor | None = None,
) -> FastAPI:
    """
    Build the app. Settings are validated here, so a missing MERCHANT_ADDRESS
    fails at startup rather than on the first request.
    store/facilitator may be injected (tests, embedding).
    """
    settings = settings or get_settings()
    configure_logging(settings)

    # An empty MemoryEntitlementStore is falsy
    if store is None:
        store = build_entitlement_store(settings)
    if facilitator is None:
        facilitator = build_facilitator(settings)
    paywall_config = PaywallConfig.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "x402gate_started",
            extra={"network": paywall_config.network, "backend": settings.entitlement_backend},
        )
        yield
        close = getattr(facilitator, "close", None)
        if callable(close):
            close()

    app = FastAPI(
        title="x402 Paywall API",
        description="Paywalled resource with x402 payment settlement",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.entitlement_store = store
    app.state.access_gate = AccessGate(paywall_config, store, key_extractor=key_extractor)
    app.state.resource_service = ResourceService(SettlementCoordinator(store), facilitator)

    # CORS
    origins = settings.cors_origins_list or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get(settings.request_id_header) or uuid.uuid4().hex
        token = request_id_var.set(request_id)
        start = time.time()
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers[settings.request_id_header] = request_id
        logger.info(
            "http_request",
            extra={
                "request_id": request_id,
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "latency_ms": int((time.time() - start) * 1000),
            },
        )
        return response

    register_exception_handlers(app)

    # Routers
    app.include_router(health.router, tags=["health"])
    app.include_router(resource.router)
    app.include_router(metrics_router)

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "x402gate.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        workers=settings.uvicorn_workers,
    )
