"""Coercion of spreadsheet cell values into amounts and plain text."""

from decimal import Decimal
from numbers import Integral, Real
from typing import Any, Union
import math
import re

_NON_AMOUNT_CHARS = re.compile(r"[^\d-]")
_LEADING_INTEGER = re.compile(r"-?\d+")


def normalize_amount(value: Any) -> Union[int, float, Decimal]:
    """
    Coerce a cell value into an integer amount (CLP has no cents).

    Text keeps only digits and minus signs and is read like JavaScript's
    parseInt, so "$ 1.234.567" -> 1234567 and "12-3" -> 12. Blank cells,
    NaN, None and anything unparseable collapse into 0.

    Args:
        value: Raw cell value

    Returns:
        The amount as int; a non-integral finite number (float or Decimal)
        is returned as is
    """
    if isinstance(value, str):
        match = _LEADING_INTEGER.match(_NON_AMOUNT_CHARS.sub("", value))
        return int(match.group()) if match else 0

    if isinstance(value, Decimal):
        if not value.is_finite() or value == 0:
            return 0
        if value == value.to_integral_value():
            return int(value)
        return value

    if isinstance(value, bool) or not isinstance(value, Real):
        return 0

    if isinstance(value, Integral):
        return int(value)

    number = float(value)
    if not math.isfinite(number) or number == 0:
        return 0
    if number.is_integer():
        return int(number)
    return value


def normalize_text(value: Any) -> str:
    """
    Render a cell as text.

    Numbers read from spreadsheets come back as floats; integral ones lose
    their ".0" so document numbers compare as typed ("1001", not "1001.0").
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, Integral):
        return str(int(value))
    if isinstance(value, Real):
        number = float(value)
        if math.isnan(number):
            return ""
        if math.isfinite(number) and number.is_integer():
            return str(int(number))
        return str(value)
    # pandas NaT and similar missing markers
    if str(value) in ("NaT", "nan", "<NA>"):
        return ""
    return str(value).strip()
