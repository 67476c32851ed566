from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from integrations.errors import ConfigurationError

CENTS = Decimal("0.01")


def format_amount(amount) -> str:
    """Format an amount with exactly two decimal places.

    Rounds half up on the decimal form of the value, so 157.005 becomes
    "157.01" regardless of binary float representation. A missing amount
    formats as "0.00".
    """
    if amount is None or amount == "":
        return "0.00"
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
        if not value.is_finite():
            raise InvalidOperation
        return str(value.quantize(CENTS, rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError) as e:
        raise ConfigurationError(f"invalid amount {amount!r}", field="amount") from e
