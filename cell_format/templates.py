"""
Preset format strings and builders for common conditional formats.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict


class FormatTemplate(BaseModel):
    """A named, ready-to-use format string."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    format: str
    category: Literal["standard", "conditional", "visual", "rating", "indicator", "date"]
    example: str = ""


STANDARD_FORMATS: List[FormatTemplate] = [
    FormatTemplate(key="number", label="Number", format="#,##0.00", category="standard", example="1,234.50"),
    FormatTemplate(key="currency", label="Currency", format='"$"#,##0.00', category="standard", example="$1,234.50"),
    FormatTemplate(key="percentage", label="Percentage", format="0.00%", category="standard", example="12.34%"),
    FormatTemplate(key="date", label="Date", format="MM/DD/YYYY", category="standard", example="12/31/2023"),
    FormatTemplate(key="text", label="Text", format="@", category="standard", example="abc"),
]

CUSTOM_FORMATS: List[FormatTemplate] = [
    FormatTemplate(
        key="traffic_lights",
        label="Traffic Lights",
        format='[<50]"🔴 "0;[<80]"🟡 "0;"🟢 "0',
        category="conditional",
        example="🔴 45 → 🟡 75 → 🟢 95",
    ),
    FormatTemplate(
        key="pass_fail",
        label="Pass/Fail",
        format='[>=60]"✓ PASS";"✗ FAIL"',
        category="conditional",
        example="✓ PASS (75) or ✗ FAIL (45)",
    ),
    FormatTemplate(
        key="temperature",
        label="Temperature",
        format="[Blue][<32]0°F ❄️;[Red][>80]0°F 🔥;0°F",
        category="conditional",
        example="30°F ❄️, 85°F 🔥",
    ),
    FormatTemplate(
        key="progress_bar",
        label="Progress Bar",
        format='[<25]"▰▱▱▱";[<50]"▰▰▱▱";[<75]"▰▰▰▱";"▰▰▰▰"',
        category="visual",
        example="▰▰▱▱ (50%)",
    ),
    FormatTemplate(
        key="data_bars",
        label="Data Bars",
        format='[<20]"█░░░░";[<40]"██░░░";[<60]"███░░";[<80]"████░";"█████"',
        category="visual",
        example="███░░ (60%)",
    ),
    FormatTemplate(
        key="trend_arrows",
        label="Trend Arrows",
        format="[Red][<0]↓ 0.0%;[Green][>0]↑ 0.0%;→ 0.0%",
        category="visual",
        example="↓ -5.2%, ↑ 3.1%",
    ),
    FormatTemplate(
        key="star_rating",
        label="Star Rating",
        format='[<1]"☆☆☆☆☆";[<2]"★☆☆☆☆";[<3]"★★☆☆☆";[<4]"★★★☆☆";[<5]"★★★★☆";"★★★★★"',
        category="rating",
        example="★★★☆☆ (3.5)",
    ),
    FormatTemplate(
        key="score_grade",
        label="Score Grade",
        format='[Red][<60]0 "F";[Orange][<70]0 "D";[Yellow][<80]0 "C";[Blue][<90]0 "B";[Green]0 "A"',
        category="rating",
        example="95 A, 75 C, 55 F",
    ),
    FormatTemplate(
        key="emoji_status",
        label="Emoji Status",
        format="[<0]😟 0;[=0]😐 0;😊 0",
        category="indicator",
        example="😟 -5, 😐 0, 😊 10",
    ),
    FormatTemplate(
        key="check_cross",
        label="Check/Cross",
        format='[=1]"✓";[=0]"✗";0',
        category="indicator",
        example="✓ Yes, ✗ No",
    ),
    FormatTemplate(
        key="currency_signed",
        label="Currency +/-",
        format='[Green]"$"0.00;[Red]("$"0.00);"Break Even"',
        category="indicator",
        example="$100.00, ($100.00), Break Even",
    ),
]

DATE_FORMATS: List[FormatTemplate] = [
    FormatTemplate(key="us_date", label="MM/DD/YYYY", format="MM/DD/YYYY", category="date", example="12/31/2023"),
    FormatTemplate(key="eu_date", label="DD/MM/YYYY", format="DD/MM/YYYY", category="date", example="31/12/2023"),
    FormatTemplate(key="iso_date", label="YYYY-MM-DD", format="YYYY-MM-DD", category="date", example="2023-12-31"),
    FormatTemplate(key="short_month", label="MMM D, YYYY", format="MMM D, YYYY", category="date", example="Dec 31, 2023"),
    FormatTemplate(key="long_month", label="MMMM D, YYYY", format="MMMM D, YYYY", category="date", example="December 31, 2023"),
    FormatTemplate(key="time_12h", label="h:mm AM/PM", format="h:mm AM/PM", category="date", example="3:45 PM"),
    FormatTemplate(key="time_24h", label="HH:mm:ss", format="HH:mm:ss", category="date", example="15:45:30"),
]


def all_templates(category: Optional[str] = None) -> List[FormatTemplate]:
    """
    Return every preset, optionally filtered by category.

    Args:
        category: One of standard, conditional, visual, rating, indicator, date

    Returns:
        Matching templates in declaration order
    """
    templates = STANDARD_FORMATS + CUSTOM_FORMATS + DATE_FORMATS
    if category is None:
        return list(templates)
    return [t for t in templates if t.category == category]


def get_template(key: str) -> FormatTemplate:
    """
    Look up a preset by key.

    Raises:
        KeyError: If no preset has that key
    """
    for template in all_templates():
        if template.key == key:
            return template
    raise KeyError(f"Unknown format template: {key}")


def traffic_light_format(green_threshold: float, yellow_threshold: float) -> str:
    """Green at or above ``green_threshold``, yellow at or above ``yellow_threshold``, red below."""
    return (
        f'[>={green_threshold:g}]"$TRAFFIC_GREEN$"[GREEN];'
        f'[>={yellow_threshold:g}]"$TRAFFIC_YELLOW$"[YELLOW];'
        f'"$TRAFFIC_RED$"[RED]'
    )


def performance_format() -> str:
    return (
        '[>=90]"**Excellent**"[GREEN]$STAR$;'
        '[>=75]"**Good**"[BLUE]$THUMBS_UP$;'
        '[>=60]"Average"[YELLOW]$NEUTRAL$;'
        '"**Poor**"[RED]$THUMBS_DOWN$'
    )


def currency_format(currency: str = "$") -> str:
    """
    Bold green positives, bold red negatives with an explicit sign, gray zero.

    Examples:
        >>> currency_format("€")
        '[>0]**€#,##0.00**[GREEN];[<0]**€-#,##0.00**[RED];**€0.00**[GRAY]'
    """
    return (
        f"[>0]**{currency}#,##0.00**[GREEN];"
        f"[<0]**{currency}-#,##0.00**[RED];"
        f"**{currency}0.00**[GRAY]"
    )


def percentage_format() -> str:
    return "[>0]**+0.0%**[GREEN];[<0]**0.0%**[RED];**0.0%**[GRAY]"


def status_format() -> str:
    return (
        '[=1]"**Active**"[GREEN]$CHECK$;'
        '[=0]"**Inactive**"[RED]$CROSS$;'
        '"__Unknown__"[YELLOW]$WARNING$'
    )
