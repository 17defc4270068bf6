# app/utils/decimal_utils.py
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from app.core.config import CURRENCY_SYMBOL

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

_TRUTHY = {"true", "1", "yes", "paid"}


def normalize_amount(value) -> Decimal:
    """Coerce a weakly typed stored field into a non-negative 2-place Decimal.

    Rows coming back from the database (or from a staff-typed form field)
    may hold numbers, numeric strings, ``None`` or garbage. Anything that is
    not a finite number, or is negative, becomes ``0.00``. Never raises.
    Booleans are not amounts and also become ``0.00``.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        number = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return ZERO
        try:
            number = Decimal(text)
        except InvalidOperation:
            return ZERO
    else:
        return ZERO

    if not number.is_finite() or number <= 0:
        return ZERO

    try:
        return number.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # beyond the context precision
        return ZERO


def round2(value: Decimal) -> Decimal:
    return value.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    return min(high, max(low, value))


def to_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, Decimal)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return False


def money_text(value) -> str:
    return f"{CURRENCY_SYMBOL}{normalize_amount(value)}"
