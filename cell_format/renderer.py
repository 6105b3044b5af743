"""
Value substitution: turns a directive-free sub-format and a cell value into
display text.
"""

import calendar
import math
import re
from datetime import datetime
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, Dict, List

import pandas as pd

from .sections import iter_quoted
from .values import display_text, is_date_value, number_to_text

EMOJI_MAP: Dict[str, str] = {
    "TRAFFIC_RED": "\U0001F534",
    "TRAFFIC_YELLOW": "\U0001F7E1",
    "TRAFFIC_GREEN": "\U0001F7E2",
    "UP_ARROW": "⬆️",
    "DOWN_ARROW": "⬇️",
    "NEUTRAL": "➡️",
    "CHECK": "✅",
    "CROSS": "❌",
    "WARNING": "⚠️",
    "STAR": "⭐",
    "FIRE": "\U0001F525",
    "THUMBS_UP": "\U0001F44D",
    "THUMBS_DOWN": "\U0001F44E",
}

EMOJI_MACRO = re.compile(r"\$([A-Z_]+)\$")

NUMBER_RUN = re.compile(
    r"(?:[0#?][0#?,]*(?:\.[0#?]*)?|\.[0#?]+)(?:[eE][+-][0#?]+)?%?"
)
PLACEHOLDER = re.compile(r"@|" + NUMBER_RUN.pattern)

DATE_TOKEN = re.compile(
    r"AM/PM|am/pm|YYYY|yyyy|YY|yy|MMMM|mmmm|MMM|mmm|MM|M|dddd|ddd|DD|dd|D|d"
    r"|HH|H|hh|h|mm|m|ss|s"
)
HOUR_TOKENS = ("HH", "H", "hh", "h")
SECOND_TOKENS = ("ss", "s")

# Excel locale currency such as [$€-407]
LOCALE_CURRENCY = re.compile(r"\[\$([^\[\]-]*)(?:-[0-9A-Fa-f]+)?\]")
# Excel column padding (_x) and repeat fill (*x)
PADDING_CODE = re.compile(r"_.")
FILL_CODE = re.compile(r"\*.")
STRONG_DATE_TOKEN = re.compile(r"YYYY|yyyy|YY|yy|MM|DD|dd|HH|hh|mm|ss")

# Excel serial dates count days from this epoch
EXCEL_EPOCH = datetime(1899, 12, 30)

# Large enough for toFixed's range (|x| < 1e21) plus any decimal count
_FIXED_CONTEXT = Context(prec=160)


def apply_emoji_macros(text: str) -> str:
    """
    Replace ``$NAME$`` macros with emoji; unknown names are left alone.

    Examples:
        >>> apply_emoji_macros("$CHECK$ done")
        '✅ done'
    """
    return EMOJI_MACRO.sub(lambda m: EMOJI_MAP.get(m.group(1), m.group(0)), text)


def to_fixed(number: float, decimals: int) -> str:
    """
    Fixed-point rendering of ``number`` with ``decimals`` places.

    Rounds the exact binary value half away from zero, matching the
    behaviour of ``Number.prototype.toFixed`` rather than Python's
    round-half-even formatting.

    Examples:
        >>> to_fixed(123.456, 2)
        '123.46'
        >>> to_fixed(0.125, 2)
        '0.13'
        >>> to_fixed(2.5, 0)
        '3'
    """
    quantum = Decimal(1).scaleb(-decimals)
    rounded = Decimal(number).quantize(quantum, rounding=ROUND_HALF_UP, context=_FIXED_CONTEXT)
    return format(rounded, "f")


def _group_thousands(digits: str) -> str:
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return ",".join(groups)


def _format_scientific(magnitude: float, mantissa_decimals: int, sign: str, width: int) -> str:
    if magnitude == 0:
        exponent = 0
        mantissa = Decimal(0)
    else:
        exact = Decimal(magnitude)
        exponent = exact.adjusted()
        mantissa = exact.scaleb(-exponent)
    quantum = Decimal(1).scaleb(-mantissa_decimals)
    mantissa = mantissa.quantize(quantum, rounding=ROUND_HALF_UP, context=_FIXED_CONTEXT)
    if mantissa >= 10:
        exponent += 1
        mantissa = (mantissa / 10).quantize(quantum, rounding=ROUND_HALF_UP, context=_FIXED_CONTEXT)
    exponent_sign = "-" if exponent < 0 else ("+" if sign == "+" else "")
    return f"{format(mantissa, 'f')}E{exponent_sign}{abs(exponent):0{width}d}"


def format_number(number: float, pattern: str, absolute: bool = False) -> str:
    """
    Render a number through one numeric pattern run.

    Args:
        number: Value to render
        pattern: A run such as ``#,##0.00``, ``0.0%`` or ``0.00E+00``
        absolute: Drop the sign (the surrounding format supplies its own)

    Returns:
        Formatted number

    Examples:
        >>> format_number(1234.5, "#,##0.00")
        '1,234.50'
        >>> format_number(0.1234, "0.0%")
        '12.3%'
        >>> format_number(-7, "000")
        '-007'
    """
    percent = pattern.endswith("%")
    body = pattern[:-1] if percent else pattern
    if percent:
        number = number * 100

    if math.isnan(number) or math.isinf(number):
        return number_to_text(number)

    negative = number < 0 and not absolute
    magnitude = abs(number)
    sign = "-" if negative else ""
    suffix = "%" if percent else ""

    exponent_match = re.search(r"[eE]([+-])([0#?]+)$", body)
    if exponent_match:
        mantissa = body[:exponent_match.start()]
        _, _, fraction = mantissa.partition(".")
        rendered = _format_scientific(
            magnitude, len(fraction), exponent_match.group(1), len(exponent_match.group(2))
        )
        return f"{sign}{rendered}{suffix}"

    if magnitude >= 1e21:
        return f"{sign}{number_to_text(magnitude)}{suffix}"

    integer_pattern, _, fraction_pattern = body.partition(".")
    decimals = sum(1 for c in fraction_pattern if c in "0#?")
    min_integer_digits = max(1, integer_pattern.count("0"))

    fixed = to_fixed(magnitude, decimals)
    integer_digits, _, fraction_digits = fixed.partition(".")
    integer_digits = integer_digits.zfill(min_integer_digits)
    if "," in integer_pattern:
        integer_digits = _group_thousands(integer_digits)

    if negative and not any(c in "123456789" for c in fixed):
        sign = ""

    result = integer_digits
    if decimals:
        result = f"{integer_digits}.{fraction_digits}"
    return f"{sign}{result}{suffix}"


def is_date_pattern(code: str) -> bool:
    """
    True when ``code`` consists of date/time tokens and separators only.

    Examples:
        >>> is_date_pattern("MM/DD/YYYY")
        True
        >>> is_date_pattern("Add 0")
        False
    """
    if not STRONG_DATE_TOKEN.search(code):
        return False
    leftover = DATE_TOKEN.sub("", code)
    return not any(c.isalpha() and c != "T" for c in leftover)


def _minute_positions(tokens: List[str]) -> List[bool]:
    """
    Decide for each token whether a lower-case ``m``/``mm`` means minutes.

    With an upper-case month token present, lower-case ``m`` is always the
    minute. Otherwise Excel's rule applies: minutes right after an hour or
    right before a second, month elsewhere.
    """
    has_upper_month = any(t in ("M", "MM", "MMM", "MMMM") for t in tokens)
    minutes = []
    for index, token in enumerate(tokens):
        if token not in ("m", "mm"):
            minutes.append(False)
            continue
        if has_upper_month:
            minutes.append(True)
            continue
        previous = tokens[index - 1] if index > 0 else ""
        following = tokens[index + 1] if index + 1 < len(tokens) else ""
        minutes.append(previous in HOUR_TOKENS or following in SECOND_TOKENS)
    return minutes


def format_date(value: Any, pattern: str) -> str:
    """
    Substitute date tokens in ``pattern`` from a date or datetime.

    Upper-case ``M`` is the month. Lower-case ``m`` is the minute next to an
    hour or second token and the month elsewhere, as in Excel. ``h``/``hh``
    use a 12-hour clock only when ``AM/PM`` is present.

    Examples:
        >>> from datetime import date
        >>> format_date(date(2024, 3, 15), "MM/DD/YYYY")
        '03/15/2024'
        >>> format_date(date(2024, 3, 15), "dd/mm/yyyy")
        '15/03/2024'
    """
    hour = getattr(value, "hour", 0)
    minute = getattr(value, "minute", 0)
    second = getattr(value, "second", 0)

    matches = list(DATE_TOKEN.finditer(pattern))
    names = [m.group(0) for m in matches]
    twelve_hour_clock = any(n in ("AM/PM", "am/pm") for n in names)
    clock_hour = (hour % 12 or 12) if twelve_hour_clock else hour
    minute_flags = _minute_positions(names)

    month_tokens = {
        "MMMM": calendar.month_name[value.month],
        "mmmm": calendar.month_name[value.month],
        "MMM": calendar.month_abbr[value.month],
        "mmm": calendar.month_abbr[value.month],
        "MM": f"{value.month:02d}",
        "M": str(value.month),
    }
    tokens = {
        "YYYY": f"{value.year:04d}",
        "yyyy": f"{value.year:04d}",
        "YY": f"{value.year % 100:02d}",
        "yy": f"{value.year % 100:02d}",
        "dddd": calendar.day_name[value.weekday()],
        "ddd": calendar.day_abbr[value.weekday()],
        "DD": f"{value.day:02d}",
        "dd": f"{value.day:02d}",
        "D": str(value.day),
        "d": str(value.day),
        "HH": f"{hour:02d}",
        "H": str(hour),
        "hh": f"{clock_hour:02d}",
        "h": str(clock_hour),
        "ss": f"{second:02d}",
        "s": str(second),
        "AM/PM": "AM" if hour < 12 else "PM",
        "am/pm": "am" if hour < 12 else "pm",
    }

    out = []
    last = 0
    for match, name, is_minute in zip(matches, names, minute_flags):
        out.append(pattern[last:match.start()])
        if name in ("m", "mm"):
            if is_minute:
                out.append(f"{minute:02d}" if name == "mm" else str(minute))
            else:
                out.append(f"{value.month:02d}" if name == "mm" else str(value.month))
        elif name in month_tokens:
            out.append(month_tokens[name])
        else:
            out.append(tokens[name])
        last = match.end()
    out.append(pattern[last:])
    return "".join(out)


def serial_to_datetime(serial: float) -> datetime:
    """Convert an Excel serial day number to a datetime."""
    return (pd.Timestamp(EXCEL_EPOCH) + pd.Timedelta(days=serial)).to_pydatetime()


def render_text(
    template: str,
    value: Any,
    number: float,
    numeric: bool = True,
    absolute: bool = False,
) -> str:
    """
    Produce display text for a directive-free sub-format.

    Args:
        template: Sub-format with style directives already stripped
        value: Original cell value
        number: ``value`` coerced to float (NaN when not numeric)
        numeric: Whether numeric placeholders may be substituted
        absolute: Render numbers without their sign

    Returns:
        Display text
    """
    text = apply_emoji_macros(template or "")
    if not text.strip():
        return display_text(value)
    text = LOCALE_CURRENCY.sub(lambda m: f'"{m.group(1)}"', text)

    pieces = [
        (is_literal, chunk if is_literal else FILL_CODE.sub("", PADDING_CODE.sub(" ", chunk)))
        for is_literal, chunk in iter_quoted(text)
    ]
    code = "".join(chunk for is_literal, chunk in pieces if not is_literal)
    literals = [chunk for is_literal, chunk in pieces if is_literal]

    has_number = NUMBER_RUN.search(code) is not None
    has_text_placeholder = "@" in code
    date_code = is_date_pattern(code)

    if code.strip().lower() == "general":
        return display_text(value)

    if date_code and not has_text_placeholder:
        when = value
        if not is_date_value(value):
            if not numeric or not math.isfinite(number):
                return display_text(value)
            when = serial_to_datetime(number)
        return "".join(
            chunk if is_literal else format_date(when, chunk) for is_literal, chunk in pieces
        )

    if literals and not has_number and not has_text_placeholder:
        return literals[0]

    if has_number and (not numeric or number != number):
        return display_text(value)

    # An explicit minus outside the numeric runs supplies the sign
    absolute = absolute or "-" in NUMBER_RUN.sub("", code)

    def substitute(match):
        token = match.group(0)
        if token == "@":
            return display_text(value)
        return format_number(number, token, absolute)

    return "".join(
        chunk if is_literal else PLACEHOLDER.sub(substitute, chunk) for is_literal, chunk in pieces
    )
