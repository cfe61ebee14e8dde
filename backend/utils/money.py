from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from exceptions import InvalidAmountError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
# Largest magnitude a Numeric(18, 2) column holds.
MAX_AMOUNT = Decimal("9999999999999999.99")


def to_decimal(value, allow_negative: bool = False) -> Decimal:
    """
    Convert an incoming money value to an exact Decimal.

    Accepts Decimal, int and numeric strings ("1234.50"). Binary floats are
    refused because they cannot represent most cent values exactly. None is
    treated as zero.
    """
    if value is None:
        return ZERO
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidAmountError(value, "money must be passed as a decimal string, not a float")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(value, "not a number")
    if not amount.is_finite():
        raise InvalidAmountError(value, "not a finite number")
    if abs(amount) > MAX_AMOUNT:
        raise InvalidAmountError(value, f"exceeds the maximum amount {MAX_AMOUNT}")
    if amount.as_tuple().exponent < -2 and amount != amount.quantize(CENT):
        raise InvalidAmountError(value, "more than 2 decimal places")
    if amount < 0 and not allow_negative:
        raise InvalidAmountError(value, "must not be negative")
    return amount.quantize(CENT)


def check_bounds(amount: Decimal) -> Decimal:
    """Refuse a computed amount that would not fit a money column."""
    if abs(amount) > MAX_AMOUNT:
        raise InvalidAmountError(amount, f"exceeds the maximum amount {MAX_AMOUNT}")
    return amount


def quantize(amount: Decimal) -> Decimal:
    """Round a computed amount to cents."""
    return check_bounds(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def money_sum(amounts) -> Decimal:
    total = ZERO
    for amount in amounts:
        total += amount
    return total


def format_money(amount) -> str:
    """Render an amount the way it crosses the API boundary, e.g. "1234.50"."""
    if amount is None:
        amount = ZERO
    return str(Decimal(amount).quantize(CENT))


def as_money(value) -> Decimal:
    """Normalise a value read back from storage (None, int, float or Decimal) to cents."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value.quantize(CENT)
    return Decimal(str(value)).quantize(CENT)
