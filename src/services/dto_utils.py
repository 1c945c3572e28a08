"""DTO utilities for service layer.

Provides the money conversion and rounding rules shared by the cost engine
and the output adapters:

- Inputs are converted to Decimal through their string form, so a stored
  float such as 0.1 becomes Decimal("0.1") rather than its binary expansion.
- Currency figures round to 2 places, suggested prices to whole units,
  both ROUND_HALF_UP.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from src.utils.constants import CURRENCY_DECIMAL_PLACES, PRICE_DECIMAL_PLACES

Number = Union[Decimal, float, int, str]

_CURRENCY_QUANTUM = Decimal(1).scaleb(-CURRENCY_DECIMAL_PLACES)
_PRICE_QUANTUM = Decimal(1).scaleb(-PRICE_DECIMAL_PLACES)


def to_decimal(value: Number) -> Decimal:
    """
    Convert a numeric value to Decimal without binary float artifacts.

    Examples:
        >>> to_decimal(0.1)
        Decimal('0.1')
        >>> to_decimal(Decimal("2.50"))
        Decimal('2.50')
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_currency(value: Number) -> Decimal:
    """
    Round a currency amount to 2 decimal places (ROUND_HALF_UP).

    Examples:
        >>> round_currency(Decimal("12.345"))
        Decimal('12.35')
        >>> round_currency(80)
        Decimal('80.00')
    """
    return to_decimal(value).quantize(_CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def round_price(value: Number) -> Decimal:
    """
    Round a selling price to a whole currency unit (ROUND_HALF_UP).

    Examples:
        >>> round_price(Decimal("304.2857"))
        Decimal('304')
        >>> round_price(Decimal("12.5"))
        Decimal('13')
    """
    return to_decimal(value).quantize(_PRICE_QUANTUM, rounding=ROUND_HALF_UP)


def cost_to_string(value: Union[Number, None]) -> str:
    """
    Convert a cost value to a 2-decimal string format.

    Args:
        value: Cost value (Decimal, float, int, str, or None)

    Returns:
        String formatted as "12.34". Returns "0.00" if value is None.

    Examples:
        >>> cost_to_string(Decimal("12.345"))
        '12.35'
        >>> cost_to_string(None)
        '0.00'
    """
    if value is None:
        return "0.00"
    return str(round_currency(value))


def decimal_to_json(value: Decimal) -> Union[int, float]:
    """
    Convert a rounded Decimal into a JSON number.

    Whole-unit values (scale 0) become ints; everything else becomes a float.
    """
    if value.as_tuple().exponent >= 0:
        return int(value)
    return float(value)
