"""
PxPay helper.

Pass the PxPay user id as the account and the PxPay key as ``credential2``.
The amount is rounded to two decimals, so prefer passing it pre-formatted.

    helper = Helper("order_id", "pxpay_user_ID", {
        "amount": "157.00", "currency": "USD", "credential2": "pxpay_key",
    })
    helper.customer(email="customer@email.com")
    helper.description("Order 123 for MyStore")
    # PxPay shows an error page instead of capturing card details when either
    # return URL is missing.
    helper.return_url("https://shop.example/pxpay/return")
    # copied verbatim to the notification
    helper.set("custom1", "custom text 1")
    redirect_params = helper.form_fields()

PxPay accounts have Failproof Notification enabled by default: the return URL
is also called by the PxPay servers right after a successful transaction.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from urllib.parse import parse_qs, urlsplit

import structlog

from core.logging import GatewayEvents
from core.metrics import record_outcome
from integrations.errors import (
    ApplicationRejectionError,
    ConfigurationError,
    MalformedResponseError,
    TransportError,
)
from integrations.formatting import format_amount
from integrations.helper import FieldMapping
from integrations.helper import Helper as BaseHelper

log = structlog.get_logger(__name__)

VALID = "1"
INVALID = "0"
MERCHANT_REFERENCE_LIMIT = 50


@dataclass(frozen=True)
class GatewayResponse:
    valid: str | None
    redirect: str | None
    message: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.valid == VALID

    @property
    def explanation(self) -> str | None:
        return self.message if self.message is not None else self.redirect


class Helper(BaseHelper):
    gateway = "pxpay"
    mappings = (
        FieldMapping("account", "PxPayUserId"),
        FieldMapping("credential2", "PxPayKey"),
        FieldMapping("currency", "CurrencyInput"),
        FieldMapping("description", "MerchantReference"),
        FieldMapping("order", "TxnId"),
        FieldMapping("customer", {"email": "EmailAddress"}),
        FieldMapping("custom1", "TxnData1"),
        FieldMapping("custom2", "TxnData2"),
        FieldMapping("custom3", "TxnData3"),
    )

    def __init__(self, order, account, options=None, **kwargs):
        super().__init__(order, account, options, **kwargs)
        self.add_field("AmountInput", format_amount(self.options.amount))
        self.add_field("EnableAddBillCard", "0")
        self.add_field("TxnType", "Purchase")

    def return_url(self, url):
        self.add_field("UrlSuccess", url)
        self.add_field("UrlFail", url)

    def cancel_return_url(self, url):
        self.add_field("UrlFail", url)

    def form_fields(self) -> dict[str, list[str]]:
        """Request a payment token and return the redirect query parameters."""
        # With either return URL blank PxPay issues a token but sends the
        # customer to its error page.
        self._require("UrlSuccess", "must specify return_url")
        self._require("UrlFail", "must specify cancel_return_url")

        try:
            raw_response = self.ssl_post(self._token_url(), self.generate_request())
        except TransportError:
            record_outcome(self.gateway, "transport_error")
            raise

        try:
            result = self.parse_response(raw_response)
        except MalformedResponseError:
            record_outcome(self.gateway, "malformed")
            raise

        if not result.is_valid:
            log.warning(
                GatewayEvents.REQUEST_REJECTED,
                gateway=self.gateway,
                order=self.order,
                explanation=result.explanation,
            )
            record_outcome(self.gateway, "rejected")
            raise ApplicationRejectionError(
                result.explanation, valid=result.valid, gateway=self.gateway
            )

        query = urlsplit(result.redirect).query
        if not query:
            log.error(
                GatewayEvents.RESPONSE_MALFORMED,
                gateway=self.gateway,
                order=self.order,
                reason="redirect without query",
            )
            record_outcome(self.gateway, "malformed")
            raise MalformedResponseError(
                "Response did not include query parameters",
                raw_response=raw_response,
                gateway=self.gateway,
            )

        record_outcome(self.gateway, "success")
        return parse_qs(query, keep_blank_values=True)

    def form_method(self) -> str:
        return "GET"

    def service_url(self) -> str:
        return self.settings.PXPAY_SERVICE_URL

    def generate_request(self) -> str:
        root = ET.Element("GenerateRequest")
        for name, value in self.fields.items():
            if name == "MerchantReference":
                value = value[:MERCHANT_REFERENCE_LIMIT]
            ET.SubElement(root, name).text = value

        log.info(
            GatewayEvents.REQUEST_BUILT,
            gateway=self.gateway,
            order=self.order,
            fields=list(self.fields),
        )
        return ET.tostring(root, encoding="unicode")

    def parse_response(self, raw_response: str) -> GatewayResponse:
        """Extract validity and redirect URI from a GenerateRequest reply.

        Valid:   <Request valid="1"><URI>https://sec.paymentexpress.com/pxpay/pxpay.aspx?userid=PxpayUser&amp;request=REQUEST_TOKEN</URI></Request>
        Soft:    <Request valid="1"><Reco>IP</Reco><ResponseText>Invalid Access Info</ResponseText></Request>
        Invalid: <Request valid="0"><URI>Invalid TxnType</URI></Request>

        A reply without a URI is treated as invalid and its ResponseText used
        as the explanation.
        """
        try:
            document = ET.fromstring(raw_response)
        except ET.ParseError as e:
            log.error(
                GatewayEvents.RESPONSE_MALFORMED,
                gateway=self.gateway,
                order=self.order,
                reason=str(e),
            )
            raise MalformedResponseError(
                f"unparsable response ({e})",
                raw_response=raw_response,
                gateway=self.gateway,
            ) from e

        request = document if document.tag == "Request" else document.find(".//Request")
        if request is None:
            raise MalformedResponseError(
                "Response did not include a Request element",
                raw_response=raw_response,
                gateway=self.gateway,
            )

        # An empty <URI/> counts as absent
        redirect = request.findtext("URI") or None
        if redirect is None:
            result = GatewayResponse(INVALID, None, request.findtext("ResponseText"))
        else:
            valid = request.get("valid")
            if valid is None:
                raise MalformedResponseError(
                    "Response did not include a validity indicator",
                    raw_response=raw_response,
                    gateway=self.gateway,
                )
            result = GatewayResponse(valid, redirect)

        log.info(
            GatewayEvents.RESPONSE_PARSED,
            gateway=self.gateway,
            order=self.order,
            valid=result.valid,
        )
        return result

    def _require(self, field: str, message: str):
        if not self.fields.get(field):
            log.error(
                GatewayEvents.CONFIG_INVALID,
                gateway=self.gateway,
                order=self.order,
                field=field,
            )
            record_outcome(self.gateway, "config_error")
            raise ConfigurationError(
                f"error - {message}", field=field, gateway=self.gateway
            )

    def _token_url(self) -> str:
        return self.settings.PXPAY_TOKEN_URL
