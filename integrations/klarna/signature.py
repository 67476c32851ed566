"""Merchant digest: SHA-256 over selected field values plus the shared secret, base64 encoded."""

import base64
import hashlib
from collections.abc import Mapping, Sequence

SIGNED_HEAD_FIELDS = ("purchase_country", "purchase_currency", "locale")
SIGNED_ITEM_FIELDS = ("type", "reference", "quantity", "unit_price", "discount_rate")
SIGNED_TAIL_FIELDS = (
    "merchant_id",
    "merchant_terms_uri",
    "merchant_checkout_uri",
    "merchant_base_uri",
    "merchant_confirmation_uri",
)


def digest(payload: str, shared_secret: str | None) -> str:
    data = (payload + (shared_secret or "")).encode("utf-8")
    return base64.b64encode(hashlib.sha256(data).digest()).decode("ascii")


def sign(fields: Mapping[str, str], line_items: Sequence, shared_secret: str | None) -> str:
    # Missing fields contribute an empty string
    parts = [fields.get(name, "") for name in SIGNED_HEAD_FIELDS]
    for i in range(len(line_items)):
        parts.extend(
            fields.get(f"cart_item-{i}_{name}", "") for name in SIGNED_ITEM_FIELDS
        )
    parts.extend(fields.get(name, "") for name in SIGNED_TAIL_FIELDS)
    return digest("".join(parts), shared_secret)
