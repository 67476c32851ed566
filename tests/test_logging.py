import pytest
import structlog

from core.logging import GatewayEvents, configure_logging
from integrations.errors import ApplicationRejectionError


class _TestLogger:
    def __init__(self):
        self.output = []

    def __call__(self, logger, method_name, event_dict):
        """Process log events and store them for test assertions"""
        self.output.append(event_dict.copy())
        return event_dict


def test_structlog_json():
    test_logger = _TestLogger()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            test_logger,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    try:
        log = structlog.get_logger("test.gateway")
        log.bind(gateway="pxpay", order="1001").info(GatewayEvents.REQUEST_SENT)
    finally:
        configure_logging()

    log_dict = test_logger.output[-1]
    assert log_dict["gateway"] == "pxpay"
    assert log_dict["order"] == "1001"
    assert log_dict["event"] == "gateway.request.sent"
    assert "timestamp" in log_dict
    assert log_dict["level"] == "info"


def test_pxpay_round_trip_events(fake_transport, log_output):
    from integrations.pxpay import Helper

    fake_transport.response = (
        '<Request valid="1"><URI>https://gw.example/pay?token=ABC</URI></Request>'
    )
    helper = Helper(
        "1001",
        "user",
        {"amount": 1, "credential2": "secret-key", "return_url": "http://t/return"},
        transport=fake_transport,
    )
    helper.form_fields()

    events = [e["event"] for e in log_output]
    assert GatewayEvents.REQUEST_BUILT in events
    assert GatewayEvents.RESPONSE_PARSED in events
    parsed = next(e for e in log_output if e["event"] == GatewayEvents.RESPONSE_PARSED)
    assert parsed["gateway"] == "pxpay"
    assert parsed["valid"] == "1"


def test_secrets_are_not_logged(fake_transport, log_output):
    from integrations.pxpay import Helper

    fake_transport.response = '<Request valid="0"><URI>Invalid Key</URI></Request>'
    helper = Helper(
        "1001",
        "user",
        {"credential2": "secret-key", "return_url": "http://t/return"},
        transport=fake_transport,
    )
    with pytest.raises(ApplicationRejectionError):
        helper.form_fields()

    assert log_output
    assert "secret-key" not in repr(log_output)


def test_gateway_event_names():
    assert GatewayEvents.REQUEST_REJECTED == "gateway.request.rejected"
    assert GatewayEvents.FIELD_UNMAPPED == "gateway.field.unmapped"
