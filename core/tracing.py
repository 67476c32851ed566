import os

import structlog
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

log = structlog.get_logger(__name__)


def init_tracer(app_name: str = "gateway-helpers"):
    """Initialize OpenTelemetry tracer with OTLP exporter"""
    provider = TracerProvider(resource=Resource.create({"service.name": app_name}))

    # DISABLE_TRACING keeps spans in-process (tests, local runs without a collector)
    if os.getenv("DISABLE_TRACING", "").lower() in {"1", "true", "yes"}:
        trace.set_tracer_provider(provider)
        return provider

    try:
        exporter = OTLPSpanExporter()
    except Exception as exc:  # pragma: no cover – only hit when collector absent
        log.warning("OTLP exporter unavailable, tracing to console", error=str(exc))
        exporter = ConsoleSpanExporter()

    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    return provider


def get_tracer(name: str):
    return trace.get_tracer(name)
