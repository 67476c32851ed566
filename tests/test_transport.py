"""
Tests for the requests-based transport.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from integrations.errors import TransportError
from integrations.transport import ssl_post

URL = "https://sec.paymentexpress.com/pxpay/pxaccess.aspx"


def mock_response(status_code=200, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.raise_for_status.return_value = None
    return response


@patch("integrations.transport.requests.post")
def test_ssl_post_returns_body_text(mock_post):
    mock_post.return_value = mock_response(text="<Request valid='1'/>")

    body = ssl_post(URL, "<GenerateRequest/>", gateway="pxpay")

    assert body == "<Request valid='1'/>"
    mock_post.assert_called_once_with(
        URL, data="<GenerateRequest/>", headers=None, timeout=60.0
    )


@patch("integrations.transport.requests.post")
def test_ssl_post_uses_configured_timeout(mock_post, monkeypatch):
    from core.dependencies import clear_settings

    monkeypatch.setenv("HTTP_TIMEOUT", "5")
    clear_settings()
    mock_post.return_value = mock_response()

    ssl_post(URL, "body")

    assert mock_post.call_args.kwargs["timeout"] == 5.0


@patch("integrations.transport.requests.post")
def test_ssl_post_wraps_network_errors(mock_post):
    mock_post.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(TransportError) as exc_info:
        ssl_post(URL, "body", gateway="pxpay")

    assert exc_info.value.url == URL
    assert exc_info.value.gateway == "pxpay"
    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)
    assert "connection refused" in str(exc_info.value)


@patch("integrations.transport.requests.post")
def test_ssl_post_wraps_http_status_errors(mock_post):
    response = mock_response(status_code=500)
    response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
    mock_post.return_value = response

    with pytest.raises(TransportError, match="500 Server Error"):
        ssl_post(URL, "body")


@patch("integrations.transport.requests.post")
def test_helper_transport_error_propagates(mock_post):
    from integrations.pxpay import Helper

    mock_post.side_effect = requests.Timeout("read timed out")
    helper = Helper("order", "user", {"amount": 1, "return_url": "http://t/return"})

    with pytest.raises(TransportError, match="read timed out"):
        helper.form_fields()
