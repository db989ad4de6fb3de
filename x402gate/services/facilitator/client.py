"""
Facilitator client wrapper using httpx sync client.
Sync on purpose: settlement runs inside FastAPI's threadpool and pybreaker wraps plain calls.
"""
import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import httpx
import pybreaker
from pydantic import BaseModel, ValidationError

from x402gate.services.facilitator.errors import (
    FacilitatorError,
    FacilitatorRejectedError,
    FacilitatorTransportError,
    FacilitatorUnavailableError,
)
from x402gate.services.facilitator.schemas import (
    X402_VERSION,
    SettleResponse,
    VerifyRequest,
    VerifyResponse,
)
from x402gate.utils.metrics import (
    facilitator_request_duration_seconds,
    facilitator_requests_total,
)


logger = logging.getLogger(__name__)


class Facilitator(ABC):
    """Anything that can verify and settle an x402 payment header."""

    @abstractmethod
    def verify_payment(self, request: VerifyRequest) -> VerifyResponse:
        raise NotImplementedError

    @abstractmethod
    def settle_payment(self, request: VerifyRequest) -> SettleResponse:
        raise NotImplementedError


class FacilitatorClient(Facilitator):
    """
    HTTP client for the x402 facilitator (POST {base}/verify, POST {base}/settle).
    Errors are raised as FacilitatorError subclasses; the caller never gets a partial result.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        breaker: pybreaker.CircuitBreaker | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._breaker = breaker
        self._client = client

    @property
    def client(self) -> httpx.Client:
        """Lazy initialization of httpx client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self._timeout)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def verify_payment(self, request: VerifyRequest) -> VerifyResponse:
        return self._call("verify", request, VerifyResponse, expected_key="isValid")

    def settle_payment(self, request: VerifyRequest) -> SettleResponse:
        return self._call("settle", request, SettleResponse, expected_key="event")

    def _record_request(self, method: str, status: str, duration: float) -> None:
        facilitator_requests_total.labels(method=method, status=status).inc()
        facilitator_request_duration_seconds.labels(method=method).observe(duration)

    def _call(self, method: str, request: VerifyRequest, model: type[BaseModel], expected_key: str) -> Any:
        start = time.time()
        try:
            if self._breaker is not None:
                result = self._breaker.call(self._post, method, request, model, expected_key)
            else:
                result = self._post(method, request, model, expected_key)
        except pybreaker.CircuitBreakerError as e:
            self._record_request(method, "error", time.time() - start)
            logger.error(
                "facilitator_circuit_open",
                extra={"facilitator_method": method, "error": str(e)},
            )
            raise FacilitatorUnavailableError(f"facilitator {method}: circuit open") from e
        except FacilitatorError as e:
            self._record_request(method, "error", time.time() - start)
            logger.error(
                "facilitator_request_failed",
                extra={"facilitator_method": method, "status_code": e.status_code, "error": str(e)},
            )
            raise
        self._record_request(method, "success", time.time() - start)
        return result

    def _post(self, method: str, request: VerifyRequest, model: type[BaseModel], expected_key: str) -> Any:
        url = f"{self._base_url}/{method}"
        try:
            resp = self.client.post(
                url,
                json=request.to_wire(),
                headers={"X402-Version": str(X402_VERSION)},
            )
        except httpx.HTTPError as e:
            raise FacilitatorTransportError(f"facilitator {method}: {type(e).__name__}: {e}") from e

        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.status_code >= 500:
            raise FacilitatorTransportError(
                f"facilitator {method}: HTTP {resp.status_code}",
                status_code=resp.status_code,
                detail=data if isinstance(data, dict) else {},
            )
        # 4xx with a proper verify/settle body is still an answer (e.g. isValid=false)
        if isinstance(data, dict) and expected_key in data:
            try:
                return model.model_validate(data)
            except ValidationError as e:
                raise FacilitatorTransportError(
                    f"facilitator {method}: malformed response ({e.error_count()} invalid fields)",
                    status_code=resp.status_code,
                    detail=data,
                ) from e
        if resp.is_success:
            raise FacilitatorTransportError(
                f"facilitator {method}: malformed response (no {expected_key})",
                status_code=resp.status_code,
            )
        raise FacilitatorRejectedError(
            f"facilitator {method}: HTTP {resp.status_code}",
            status_code=resp.status_code,
            detail=data if isinstance(data, dict) else {},
        )
