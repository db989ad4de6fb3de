"""
Prometheus-based metrics for production monitoring.
Provides /metrics endpoint for scraping.
"""
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi import APIRouter, Response


# Counters
challenges_issued_total = Counter(
    "x402_challenges_issued_total",
    "Total number of 402 payment challenges issued",
    ["network"],
)

admissions_total = Counter(
    "x402_admissions_total",
    "Total number of requests admitted by an existing entitlement",
)

settlements_total = Counter(
    "x402_settlements_total",
    "Total settlement attempts by outcome",
    ["outcome"],  # settle_success, verify_failed, settle_failed, error
)

facilitator_requests_total = Counter(
    "x402_facilitator_requests_total",
    "Total facilitator API requests",
    ["method", "status"],
)

circuit_breaker_state = Gauge(
    "circuit_breaker_state",
    "Circuit breaker state (0=closed, 1=open)",
    ["name"],
)

# Histograms
facilitator_request_duration_seconds = Histogram(
    "x402_facilitator_request_duration_seconds",
    "Facilitator API request duration",
    ["method"],
    buckets=[0.1, 0.5, 1, 2, 5, 10, 30],
)


# Metrics endpoint router
router = APIRouter()


@router.get("/metrics")
def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint for scraping."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
