"""
Prometheus metrics for gateway helpers.

Counts gateway round trips by outcome and times the transport call. The FastAPI
app additionally exposes request metrics at /metrics.
"""

from prometheus_client import Counter, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

gateway_requests = Counter(
    "gateway_helpers_requests_total",
    "Total number of gateway request/response cycles",
    ["gateway", "outcome"],  # outcome: success, rejected, malformed, ...
)

gateway_latency = Histogram(
    "gateway_helpers_request_latency_seconds",
    "Time spent waiting on the gateway transport",
    ["gateway"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)


def record_outcome(gateway: str, outcome: str):
    gateway_requests.labels(gateway=gateway, outcome=outcome).inc()


def init_metrics(app):
    """
    Initialize Prometheus metrics instrumentation for the FastAPI app.

    Args:
        app: FastAPI application instance

    Returns:
        Instrumentator instance
    """
    inst = Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
    )
    inst.instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)
    return inst
