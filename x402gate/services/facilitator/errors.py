class FacilitatorError(Exception):
    """Facilitator unreachable or answered with something we cannot interpret."""

    def __init__(self, message: str, status_code: int | None = None, detail: dict | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail or {}


class FacilitatorTransportError(FacilitatorError):
    """Network error, 5xx or malformed 2xx body. Counts against the circuit breaker."""


class FacilitatorRejectedError(FacilitatorError):
    """4xx without a verify/settle body (bad request from our side). Not counted by the breaker."""


class FacilitatorUnavailableError(FacilitatorError):
    """Circuit breaker is open."""
