"""
Currency helpers
Decimal conversion, Indian rupee rounding rules and en-IN display formatting.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from . import billing_config as cfg
from .models import GSTValidationError, Number


def to_decimal(value: Number, field: str = "amount") -> Decimal:
    """Convert a numeric input to Decimal.

    Floats go through ``str()`` so ``0.1`` becomes ``Decimal("0.1")``.
    Strings may carry thousands separators or a rupee sign.
    Raises GSTValidationError for anything that is not a finite number.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise GSTValidationError(
            f"{field} must be a number, got {type(value).__name__}", field, value
        )
    try:
        if isinstance(value, float):
            result = Decimal(str(value))
        elif isinstance(value, str):
            cleaned = value.replace(",", "").replace(cfg.CURRENCY_SYMBOL, "").strip()
            result = Decimal(cleaned)
        else:
            result = Decimal(value)
    except (InvalidOperation, ValueError) as exc:
        raise GSTValidationError(f"{field} is not a valid number: {value!r}", field, value) from exc

    if not result.is_finite():
        raise GSTValidationError(f"{field} must be finite, got {value!r}", field, value)
    return result


def to_money(value: Decimal, field: str = "amount") -> Decimal:
    """Round to 2 decimal places, half away from zero (toFixed(2) semantics).

    Amounts too large to hold to the paisa in the current Decimal context
    raise GSTValidationError.
    """
    try:
        return value.quantize(cfg.MONEY_QUANT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise GSTValidationError(f"{field} is too large: {value}", field, value) from exc


def round_to_indian_currency(amount: Number, is_cash_transaction: bool = False) -> Decimal:
    """Round an amount for settlement.

    Cash is rounded to the nearest 5 paise, digital payments to the nearest paisa.
    Apply this only when collecting payment, never inside tax computation.
    """
    value = to_decimal(amount)
    if is_cash_transaction:
        steps = (value / cfg.CASH_ROUNDING_STEP).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return to_money(steps * cfg.CASH_ROUNDING_STEP)
    return value.quantize(cfg.DIGITAL_ROUNDING_STEP, rounding=ROUND_HALF_UP)


def format_indian_currency(amount: Number, show_symbol: bool = True) -> str:
    """Format with en-IN lakh/crore grouping and 2 decimals.

    Example: 12345678.5 -> "₹1,23,45,678.50"
    """
    value = to_money(to_decimal(amount))
    sign = "-" if value < 0 else ""
    whole, fraction = f"{abs(value):.2f}".split(".")

    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])

    symbol = cfg.CURRENCY_SYMBOL if show_symbol else ""
    return f"{sign}{symbol}{whole}.{fraction}"
