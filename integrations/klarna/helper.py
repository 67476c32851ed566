"""
Klarna Checkout helper.

The account is the Klarna merchant id and ``credential2`` the shared secret
used to sign the form. Line items are numbered in the order they are added.
"""

from collections.abc import Mapping
from typing import Any

import structlog

from core.logging import GatewayEvents
from core.metrics import record_outcome
from integrations.helper import FieldMapping
from integrations.helper import Helper as BaseHelper
from integrations.klarna.signature import sign

log = structlog.get_logger(__name__)

LOCALES = {"NO": "nb-no", "FI": "fi-fi", "SE": "sv-se"}
DEFAULT_LOCALE = "sv-se"


def guess_locale(country_code: str | None) -> str:
    return LOCALES.get((country_code or "").strip().upper(), DEFAULT_LOCALE)


class Helper(BaseHelper):
    gateway = "klarna"
    mappings = (
        FieldMapping("currency", "purchase_currency"),
        FieldMapping("account", "merchant_id"),
        FieldMapping(
            "cancel_return_url",
            ("merchant_terms_uri", "merchant_checkout_uri", "merchant_base_uri"),
        ),
        FieldMapping("notify_url", "merchant_push_uri"),
        FieldMapping("return_url", "merchant_confirmation_uri"),
        FieldMapping("customer", {"email": "shipping_address_email"}),
    )
    operations = BaseHelper.operations | {"line_item"}
    structured_operations = BaseHelper.structured_operations | {"line_item"}

    def __init__(self, order, account, options=None, **kwargs):
        self.line_items: list[Mapping[str, Any]] = []
        super().__init__(order, account, options, **kwargs)
        self.shared_secret = self.options.credential2
        self.add_field("platform_type", self.settings.APPLICATION_ID)
        self.add_field("test_mode", str(self.test).lower())

    @property
    def application_id(self) -> str:
        return self.settings.APPLICATION_ID

    def billing_address(self, **params):
        country = params.get("country")
        self.add_field("purchase_country", country)
        self.add_field("locale", guess_locale(country))

    def shipping_address(self, **params):
        self.add_field("shipping_address_given_name", params.get("first_name"))
        self.add_field("shipping_address_family_name", params.get("last_name"))
        street = [
            params[k] for k in ("address1", "address2") if params.get(k) is not None
        ]
        self.add_field("shipping_address_street_address", ", ".join(map(str, street)))
        self.add_field("shipping_address_postal_code", params.get("zip"))
        self.add_field("shipping_address_city", params.get("city"))
        self.add_field("shipping_address_country", params.get("country"))
        self.add_field("shipping_address_phone", params.get("phone"))

    def line_item(self, item: Mapping[str, Any] | None = None, **params):
        item = {**(item or {}), **params}
        i = len(self.line_items)
        self.line_items.append(item)
        for name in (
            "type",
            "reference",
            "name",
            "quantity",
            "unit_price",
            "discount_rate",
            "tax_rate",
        ):
            self.add_field(f"cart_item-{i}_{name}", item.get(name))
        return self.fields

    def sign_fields(self):
        self.add_field(
            "merchant_digest", sign(self.fields, self.line_items, self.shared_secret)
        )

    def form_fields(self) -> dict[str, str]:
        self.sign_fields()
        log.info(
            GatewayEvents.REQUEST_BUILT,
            gateway=self.gateway,
            order=self.order,
            fields=list(self.fields),
            line_items=len(self.line_items),
        )
        record_outcome(self.gateway, "form_built")
        return super().form_fields()

    def service_url(self) -> str:
        if self.test:
            return self.settings.KLARNA_TEST_SERVICE_URL
        return self.settings.KLARNA_SERVICE_URL
