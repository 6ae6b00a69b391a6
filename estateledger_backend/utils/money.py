from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from estateledger_backend.errors import ValidationFailed

CENTS = Decimal("0.01")


def to_decimal(value, field="amount", allow_zero=False):
    """Coerce a JSON number/string into a 2-place Decimal, rejecting junk and negatives."""
    if value is None or value == "" or isinstance(value, bool):
        raise ValidationFailed(f"Missing required field: {field}")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationFailed(f"Invalid {field}: must be a number")
    if not amount.is_finite():
        raise ValidationFailed(f"Invalid {field}: must be a number")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationFailed(f"Invalid {field}: must be greater than zero")
    return quantize(amount)


def quantize(amount) -> Decimal:
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_rupees(amount) -> str:
    """Rs display format: thousands separators, paisa only when non-zero."""
    amount = quantize(amount)
    if amount == amount.to_integral_value():
        return f"{amount:,.0f}"
    return f"{amount:,.2f}"
