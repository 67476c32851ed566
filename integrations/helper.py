"""
Base gateway helper.

A helper owns one Field Set (wire field name -> string value) for the duration
of a single request. Gateways declare a static table of FieldMapping entries
translating semantic keys (``account``, ``customer`` ...) into the wire names
they expect, and override the named operations whose behaviour differs.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, ClassVar, NamedTuple

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError

from core.dependencies import get_settings
from core.logging import GatewayEvents
from core.metrics import record_outcome
from core.settings import Settings
from integrations.errors import ConfigurationError
from integrations.transport import PostsData, Transport

log = structlog.get_logger(__name__)


class FieldMapping(NamedTuple):
    """One semantic key and the wire field name(s) it populates.

    ``wire`` is a single name, a tuple of names written with the same value,
    or a mapping of sub-key to wire name for structured values.
    """

    key: str
    wire: str | tuple[str, ...] | Mapping[str, str]


class HelperOptions(BaseModel):
    """Options recognised by every helper constructor."""

    model_config = ConfigDict(extra="forbid")

    amount: Decimal | int | float | str | None = None
    currency: str | None = None
    test: bool = False
    credential2: str | None = None
    credential3: str | None = None
    credential4: str | None = None
    country: str | None = None
    account_name: str | None = None
    transaction_type: str | None = None
    authcode: str | None = None
    notify_url: str | None = None
    return_url: str | None = None
    cancel_return_url: str | None = None
    redirect_param: str | None = None
    forward_url: str | None = None


def is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


class Helper(PostsData):
    """Maps semantic order/payment fields onto a gateway's wire fields."""

    gateway: ClassVar[str] = "generic"
    mappings: ClassVar[tuple[FieldMapping, ...]] = ()
    # Named operations reachable through apply()
    operations: ClassVar[frozenset[str]] = frozenset(
        {
            "return_url",
            "notify_url",
            "cancel_return_url",
            "description",
            "customer",
            "billing_address",
            "shipping_address",
        }
    )
    structured_operations: ClassVar[frozenset[str]] = frozenset(
        {"customer", "billing_address", "shipping_address"}
    )

    def __init__(
        self,
        order,
        account,
        options: dict[str, Any] | None = None,
        *,
        settings: Settings | None = None,
        transport: Transport | None = None,
    ):
        try:
            self.options = HelperOptions(**(options or {}))
        except ValidationError as e:
            field = str(e.errors()[0]["loc"][0])
            log.error(GatewayEvents.CONFIG_INVALID, gateway=self.gateway, field=field)
            record_outcome(self.gateway, "config_error")
            raise ConfigurationError(
                f"invalid helper options: {e}", field=field, gateway=self.gateway
            ) from e

        self.settings = settings or get_settings()
        if transport is not None:
            self.transport = transport
        self.order = order
        self.fields: dict[str, str] = {}
        self._mapping_table = {m.key: m.wire for m in self.mappings}

        self._populate("order", order)
        self._populate("account", account)
        for key in ("amount", "currency", "credential2", "credential3", "credential4"):
            self._populate(key, getattr(self.options, key))
        if self.options.notify_url:
            self.notify_url(self.options.notify_url)
        if self.options.return_url:
            self.return_url(self.options.return_url)
        if self.options.cancel_return_url:
            self.cancel_return_url(self.options.cancel_return_url)

    @property
    def test(self) -> bool:
        return self.options.test or self.settings.INTEGRATION_MODE == "test"

    def mapping_for(self, key: str):
        return self._mapping_table.get(key)

    def _populate(self, key: str, value):
        if self.mapping_for(key) is not None:
            self.set(key, value)

    def add_field(self, name, value):
        """Store `value` under wire field `name`; blank names or values are skipped."""
        if is_blank(name) or is_blank(value):
            return
        self.fields[str(name)] = str(value)

    def add_fields(self, key: str, params: Mapping[str, Any]):
        sub_mapping = self.mapping_for(key)
        if not isinstance(sub_mapping, Mapping):
            return
        for k, v in params.items():
            field = sub_mapping.get(k)
            if field:
                self.add_field(field, v)

    def set(self, key: str, value=None, **parts):
        """Populate the wire field(s) mapped to semantic `key`.

        Unmapped keys are ignored, but logged so typos do not vanish silently.
        """
        mapping = self.mapping_for(key)
        if mapping is None:
            if not is_blank(value) or parts:
                log.warning(GatewayEvents.FIELD_UNMAPPED, gateway=self.gateway, key=key)
            return

        if isinstance(mapping, Mapping):
            structured = dict(value) if isinstance(value, Mapping) else {}
            structured.update(parts)
            for sub_key, field in mapping.items():
                self.add_field(field, structured.get(sub_key))
        elif isinstance(mapping, tuple):
            for field in mapping:
                self.add_field(field, value)
        else:
            self.add_field(mapping, value)

    def apply(self, key: str, value):
        """Route a semantic field through the gateway's named operation, if any.

        Raises ConfigurationError when the value's shape does not fit the key:
        structured keys take a mapping, everything else a scalar.
        """
        if key in self.operations:
            structured = key in self.structured_operations
        else:
            structured = isinstance(self.mapping_for(key), Mapping)
        if structured != isinstance(value, Mapping):
            expected = "a mapping" if structured else "a scalar value"
            log.error(GatewayEvents.CONFIG_INVALID, gateway=self.gateway, field=key)
            raise ConfigurationError(
                f"{key} expects {expected}", field=key, gateway=self.gateway
            )

        if key not in self.operations:
            return self.set(key, value)
        operation = getattr(self, key)
        if structured:
            return operation(**value)
        return operation(value)

    # Named operations. Gateways override the ones they treat specially.

    def return_url(self, url):
        self.set("return_url", url)

    def notify_url(self, url):
        self.set("notify_url", url)

    def cancel_return_url(self, url):
        self.set("cancel_return_url", url)

    def description(self, text):
        self.set("description", text)

    def customer(self, **params):
        self.set("customer", params)

    def billing_address(self, **params):
        self._add_address("billing_address", params)

    def shipping_address(self, **params):
        self._add_address("shipping_address", params)

    def _add_address(self, key: str, params: dict[str, Any]):
        mapping = self.mapping_for(key)
        if not isinstance(mapping, Mapping):
            return
        self.add_fields(key, params)

    def form_fields(self) -> dict:
        return dict(self.fields)

    def form_method(self) -> str:
        return "POST"

    def service_url(self) -> str:
        raise NotImplementedError
