"""
Branch selection: picks the sub-format that governs a given cell value.
"""

from typing import Any, NamedTuple, Optional

from .models import ParsedFormat, TextCondition
from .sections import code_outside_quotes
from .values import display_text, is_date_value, to_number


class Branch(NamedTuple):
    """The sub-format chosen for a value and how to render it."""

    sub_format: Optional[str]
    number: float
    numeric: bool
    absolute: bool = False


def select_branch(value: Any, parsed: ParsedFormat) -> Branch:
    """
    Choose the sub-format for ``value``.

    Conditions are evaluated first-match-wins in source order. In legacy mode
    numbers go to the positive, negative or zero section and text goes to the
    text section; a value whose section is missing renders as plain text.

    Args:
        value: Cell value
        parsed: Parsed format string

    Returns:
        Branch with ``sub_format`` None when the value should render as plain text
    """
    number = to_number(value)
    is_number = number == number

    if parsed.has_conditions:
        text = display_text(value)
        for condition in parsed.conditions:
            if isinstance(condition, TextCondition):
                if condition.matches(text):
                    return Branch(condition.sub_format, number, is_number)
            elif is_number and condition.matches(number):
                return Branch(condition.sub_format, number, True)
        return Branch(parsed.default_format, number, is_number)

    if not is_number:
        if is_date_value(value) and parsed.positive_format is not None:
            return Branch(parsed.positive_format, number, False)
        return Branch(_text_section(parsed), number, False)

    # A missing section renders the plain value
    if number > 0:
        return Branch(parsed.positive_format, number, True)
    if number < 0:
        return Branch(parsed.negative_format, number, True, absolute=True)
    return Branch(parsed.zero_format, number, True)


def _text_section(parsed: ParsedFormat) -> Optional[str]:
    if parsed.text_format is not None:
        return parsed.text_format
    # A lone section with a text placeholder applies to text as well
    if parsed.section_count == 1 and "@" in code_outside_quotes(parsed.positive_format or ""):
        return parsed.positive_format
    return None
