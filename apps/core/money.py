"""
Money helpers.

All ledger arithmetic uses Decimal with two decimal places (cents). Amounts
are validated on the way in: anything with sub-cent precision is rejected
instead of being rounded, so a pledge can never drift from what the user
entered.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from .exceptions import InvalidAmountError

CENT = Decimal('0.01')
ZERO = Decimal('0.00')


def to_amount(value, *, field: str = 'Amount', allow_zero: bool = False) -> Decimal:
    """
    Convert user input into a validated cent-precise Decimal.

    Args:
        value: Decimal, int, float or numeric string
        field: Name used in error messages
        allow_zero: Accept 0 (used for optional surcharges)

    Returns:
        Decimal quantized to cents

    Raises:
        InvalidAmountError: If value is not a finite number, is negative,
            is zero (unless allowed) or has more than two decimal places
    """
    if isinstance(value, bool) or value is None:
        raise InvalidAmountError(f"{field} must be a number")

    try:
        # str() keeps floats like 0.1 from turning into 0.1000000000000000055
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(f"{field} must be a number")

    if not amount.is_finite():
        raise InvalidAmountError(f"{field} must be a finite number")

    try:
        quantized = amount.quantize(CENT)
    except InvalidOperation:
        raise InvalidAmountError(f"{field} is too large")

    if quantized != amount:
        raise InvalidAmountError(f"{field} cannot have more than two decimal places")

    if quantized < 0:
        raise InvalidAmountError(f"{field} cannot be negative")

    if quantized == 0 and not allow_zero:
        raise InvalidAmountError(f"{field} must be greater than 0")

    return quantized


def round_cents(value: Decimal) -> Decimal:
    """Round half-up to cents."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def clamp_ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Return numerator / denominator clamped to [0, 1]."""
    if denominator <= 0:
        return Decimal('0')
    ratio = numerator / denominator
    return max(Decimal('0'), min(Decimal('1'), ratio))


def cents_to_amount(cents: int) -> Decimal:
    """Convert integer cents (as stored for budgets) to a currency amount."""
    return (Decimal(cents or 0) / Decimal(100)).quantize(CENT)
