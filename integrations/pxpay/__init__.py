"""
PxPay (Payment Express) hosted payment page integration.

The helper POSTs a GenerateRequest XML document to the token URL and redirects
the customer to the URI returned by the gateway.
"""

from integrations.pxpay.helper import GatewayResponse, Helper

__all__ = ["GatewayResponse", "Helper"]
