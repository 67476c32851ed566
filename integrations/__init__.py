"""
Payment gateway integrations.

Each gateway package exposes a ``Helper`` mapping semantic order fields onto
its wire format. Use ``payment_service_for`` to build one by service name.
"""

from types import ModuleType

from integrations import klarna, pxpay
from integrations.errors import ConfigurationError
from integrations.helper import Helper

INTEGRATIONS: dict[str, ModuleType] = {
    "klarna": klarna,
    "pxpay": pxpay,
}


def integration(service: str) -> ModuleType:
    try:
        return INTEGRATIONS[service.lower()]
    except KeyError:
        raise ConfigurationError(
            f"unknown payment service {service!r}", field="service"
        ) from None


def payment_service_for(order, account, service: str, options=None, **kwargs) -> Helper:
    """Build the helper for `service`, e.g. ``payment_service_for(1, "user", "pxpay", {...})``."""
    return integration(service).Helper(order, account, options, **kwargs)
