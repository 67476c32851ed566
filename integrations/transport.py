"""
HTTP transport for gateway round trips.

ssl_post performs one blocking POST and returns the body text. Timeouts and TLS
verification are handled by requests; nothing here retries.
"""

import time
from typing import Callable

import requests
import structlog

from core.dependencies import get_settings
from core.logging import GatewayEvents
from core.metrics import gateway_latency
from core.tracing import get_tracer
from integrations.errors import TransportError

log = structlog.get_logger(__name__)
tracer = get_tracer(__name__)

Transport = Callable[..., str]


def ssl_post(
    url: str,
    data: str | dict,
    headers: dict[str, str] | None = None,
    timeout: float | None = None,
    gateway: str = "unknown",
) -> str:
    """POST `data` to `url` and return the response body as text."""
    if timeout is None:
        timeout = get_settings().HTTP_TIMEOUT

    with tracer.start_as_current_span("gateway.post") as span:
        span.set_attribute("gateway.name", gateway)
        span.set_attribute("http.url", url)
        started = time.perf_counter()
        try:
            r = requests.post(url, data=data, headers=headers, timeout=timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            span.record_exception(e)
            log.error(
                GatewayEvents.REQUEST_SENT,
                gateway=gateway,
                url=url,
                error=str(e),
            )
            raise TransportError(str(e), url=url, gateway=gateway) from e
        finally:
            gateway_latency.labels(gateway=gateway).observe(
                time.perf_counter() - started
            )

        span.set_attribute("http.status_code", r.status_code)
        log.info(
            GatewayEvents.REQUEST_SENT,
            gateway=gateway,
            url=url,
            status_code=r.status_code,
        )
        return r.text


class PostsData:
    """Mixin giving a helper an `ssl_post` bound to its transport."""

    transport: Transport = staticmethod(ssl_post)
    gateway: str = "unknown"

    def ssl_post(self, url: str, data, headers: dict[str, str] | None = None) -> str:
        return self.transport(url, data, headers=headers, gateway=self.gateway)
