"""
FastAPI dependencies. Everything stateful lives on app.state and is built in create_app().
"""
from fastapi import Request

from x402gate.paywall.access import AccessGate
from x402gate.services.resource.service import ResourceService
from x402gate.storage.base import EntitlementStore


def get_access_gate(request: Request) -> AccessGate:
    return request.app.state.access_gate


def get_entitlement_store(request: Request) -> EntitlementStore:
    return request.app.state.entitlement_store


def get_resource_service(request: Request) -> ResourceService:
    return request.app.state.resource_service


def require_paid_access(request: Request) -> str:
    """Admit the request or raise PaymentRequiredError (rendered as 402)."""
    return get_access_gate(request)(request)
