"""
Cell Format - Excel-style conditional number formats for grid cells.

This library renders cell values through format strings that mix Excel
number formats with presentation directives:
- Ordered conditions such as [>=90] and [="Done"] with a default section
- Legacy positive;negative;zero;text sections
- Colors, keywords and inline markers such as [Green], [Bold] and **bold**

Example:
    from cell_format import format_value

    result = format_value(95, '[>=90]"Excellent"[Green];[>=60]"Good";"Poor"[Red]')
    result.value   # 'Excellent'
    result.css()   # {'color': '#008000'}
"""

from .cache import FormatCache
from .converter import SheetFormatter, SheetFormatterConfig
from .exceptions import CellFormatError, InvalidFormatError, SheetFormatError
from .formatter import (
    FormatEngine,
    FormatterHandle,
    create_cell_style,
    create_value_formatter,
    export_number_format,
    format,
    format_value,
    get_default_engine,
    parse_format,
)
from .models import (
    CellStyle,
    FormatCondition,
    FormatEngineConfig,
    FormatterResult,
    ParsedFormat,
    StyleDirective,
    StyledFormat,
    TextCondition,
)
from .templates import FormatTemplate, all_templates, get_template

__version__ = "0.1.0"
__all__ = [
    "FormatEngine",
    "FormatEngineConfig",
    "FormatCache",
    "FormatterHandle",
    "FormatterResult",
    "ParsedFormat",
    "FormatCondition",
    "TextCondition",
    "StyleDirective",
    "StyledFormat",
    "CellStyle",
    "format_value",
    "format",
    "parse_format",
    "create_value_formatter",
    "create_cell_style",
    "export_number_format",
    "get_default_engine",
    "SheetFormatter",
    "SheetFormatterConfig",
    "FormatTemplate",
    "all_templates",
    "get_template",
    "CellFormatError",
    "InvalidFormatError",
    "SheetFormatError",
]
