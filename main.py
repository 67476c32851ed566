"""
Gateway Helpers - Main Application Entry Point

This module initializes the FastAPI application exposing the payment gateway
helpers: a storefront posts an order intent and receives the form fields or
redirect parameters for the chosen gateway.
"""

import structlog
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from api import routes
from api.middleware import log_api_entry
from core.dependencies import clear_settings, get_settings, init_settings
from core.logging import configure_logging
from core.metrics import init_metrics
from core.settings import Settings
from core.tracing import init_tracer
from integrations import INTEGRATIONS
from integrations.errors import ConfigurationError, GatewayError

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application startup and shutdown events."""
    # Startup
    init_settings()
    settings = get_settings()

    init_tracer(settings.OTEL_SERVICE_NAME)
    log.info("app.startup", environment=settings.ENVIRONMENT)

    yield
    # Shutdown
    clear_settings()


app = FastAPI(
    title="Gateway Helpers",
    description="""
    ## Payment Gateway Helpers

    Translates a merchant's order intent into the field mapping, request and
    response format of individual payment gateways.

    ### Gateways:
    - **PxPay**: XML GenerateRequest round trip, returns redirect parameters
    - **Klarna**: signed checkout form fields
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

FastAPIInstrumentor.instrument_app(app)

if get_settings().METRICS_ENABLED:
    init_metrics(app)

app.middleware("http")(log_api_entry)


@app.exception_handler(GatewayError)
async def gateway_exception_handler(request: Request, exc: GatewayError):
    status_code = 422 if isinstance(exc, ConfigurationError) else 502
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": str(exc),
            "error": type(exc).__name__,
            "gateway": exc.gateway,
        },
    )


@app.get("/")
async def root():
    """Root endpoint providing API information."""
    return {
        "name": "Gateway Helpers",
        "version": "1.0.0",
        "gateways": sorted(INTEGRATIONS),
        "endpoints": {
            "checkout": "/api/v1/checkout/{service} - Build a gateway checkout",
            "services": "/api/v1/checkout - Registered services",
            "docs": "/docs - Interactive API documentation",
            "health": "/health - Health check endpoint",
            "metrics": "/metrics - Prometheus metrics",
        },
    }


@app.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    """Health check endpoint alias."""
    return await health_check(settings)


@app.get("/healthz")
async def health_check(settings: Settings = Depends(get_settings)):
    """Health check endpoint to verify API status."""
    return {
        "status": "ok",
        "app_name": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "integration_mode": settings.INTEGRATION_MODE,
    }


API_PREFIX = "/api/v1"

app.include_router(routes.router, prefix=API_PREFIX)


def main():
    configure_logging()
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
