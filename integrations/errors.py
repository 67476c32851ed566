"""
Gateway error taxonomy.

Every failure a helper can raise derives from GatewayError. None of them are
retried; they surface to the immediate caller.
"""


class GatewayError(Exception):
    """Base class for all gateway helper errors."""

    def __init__(self, message: str, gateway: str | None = None):
        super().__init__(message)
        self.gateway = gateway


class ConfigurationError(GatewayError):
    """Required configuration is missing or invalid; no request was sent."""

    def __init__(self, message: str, field: str | None = None, gateway: str | None = None):
        super().__init__(message, gateway=gateway)
        self.field = field


class TransportError(GatewayError):
    """The HTTP POST to the gateway failed."""

    def __init__(self, message: str, url: str | None = None, gateway: str | None = None):
        super().__init__(message, gateway=gateway)
        self.url = url


class MalformedResponseError(GatewayError):
    """The gateway reply could not be parsed or lacked expected structure."""

    def __init__(
        self, message: str, raw_response: str | None = None, gateway: str | None = None
    ):
        if raw_response is not None:
            message = f"{message} - raw_response:{raw_response}"
        super().__init__(message, gateway=gateway)
        self.raw_response = raw_response


class ApplicationRejectionError(GatewayError):
    """The gateway explicitly reported the request as invalid."""

    def __init__(
        self,
        explanation: str | None,
        valid: str | None = None,
        gateway: str | None = None,
    ):
        super().__init__(
            f"failed to get token - message was {explanation}", gateway=gateway
        )
        self.explanation = explanation
        self.valid = valid
