"""
Coercion of cell values to numbers and display text.
"""

import math
import re
from datetime import date, datetime, time
from decimal import Decimal
from numbers import Real
from typing import Any

NAN = float("nan")

NUMERIC_TEXT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
INFINITY_TEXT = re.compile(r"^([+-]?)Infinity$")


def number_to_text(number: float) -> str:
    """
    Render a float the way spreadsheet-style display expects.

    Integral values drop the fractional part, infinities spell out.

    Examples:
        >>> number_to_text(5.0)
        '5'
        >>> number_to_text(0.25)
        '0.25'
        >>> number_to_text(float("-inf"))
        '-Infinity'
    """
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number.is_integer() and abs(number) < 1e21:
        return str(int(number))
    return repr(number)


def to_number(value: Any) -> float:
    """
    Coerce a cell value to a float.

    Numbers and numeric strings convert; None, blank or non-numeric strings,
    dates and other objects give NaN. Booleans count as 1 and 0.

    Examples:
        >>> to_number(" 42 ")
        42.0
        >>> to_number("abc")
        nan
        >>> to_number(None)
        nan
    """
    if value is None:
        return NAN
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (date, time)):
        return NAN
    if isinstance(value, (Real, Decimal)):
        try:
            return float(value)
        except (OverflowError, ValueError):
            return NAN
    if isinstance(value, str):
        text = value.strip()
        if NUMERIC_TEXT.match(text):
            return float(text)
        infinity = INFINITY_TEXT.match(text)
        if infinity:
            return float("-inf") if infinity.group(1) == "-" else float("inf")
    return NAN


def display_text(value: Any) -> str:
    """
    Stringify a cell value for display.

    None renders as an empty string, never as ``"None"``.

    Examples:
        >>> display_text(None)
        ''
        >>> display_text(12.0)
        '12'
        >>> display_text(True)
        'true'
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, float):
        return number_to_text(value)
    return str(value)


def is_date_value(value: Any) -> bool:
    return isinstance(value, (datetime, date))
