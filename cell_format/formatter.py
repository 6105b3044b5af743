"""
Excel-style conditional format engine.

Public entry points:

    format_value(value, format_string)      -> FormatterResult
    create_value_formatter(format_string)   -> FormatterHandle (value -> str)
    create_cell_style(format_string)        -> FormatterHandle (value -> CSS dict)
"""

import logging
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, PrivateAttr

from .cache import FormatCache
from .exceptions import InvalidFormatError
from .models import FormatEngineConfig, FormatterResult, ParsedFormat, StyleDirective
from .parser import FormatParser
from .renderer import DATE_TOKEN, is_date_pattern, render_text
from .sections import code_outside_quotes, iter_quoted, split_sections
from .selector import select_branch
from .styles import extract_styles
from .values import display_text

logger = logging.getLogger(__name__)


class FormatEngine:
    """Parse, select and render format strings, memoizing the parse step."""

    def __init__(self, config: Optional[FormatEngineConfig] = None):
        """
        Initialize the engine.

        Args:
            config: Optional configuration for caching
        """
        self.config = config or FormatEngineConfig()
        self._cache = FormatCache(self.config.cache_size)

    def parse(self, format_string: Optional[str]) -> ParsedFormat:
        """
        Parse a format string, using the cache when enabled.

        Raises:
            InvalidFormatError: If ``format_string`` is neither str nor None
        """
        format_string = _check_format(format_string)
        if format_string is None:
            return ParsedFormat()
        if not self.config.enable_caching:
            return FormatParser.parse(format_string)
        return self._cache.get_or_parse(format_string, FormatParser.parse)

    def format(self, value: Any, format_string: Optional[str]) -> FormatterResult:
        """
        Format a value according to a format string.

        Never raises for a str or None format string; the worst case is the
        stringified value without style.

        Args:
            value: Cell value
            format_string: Format string, e.g. ``[>0][Green]#,##0.00;[Red]-#,##0.00``

        Returns:
            FormatterResult with display text and optional style

        Raises:
            InvalidFormatError: If ``format_string`` is neither str nor None
        """
        format_string = _check_format(format_string)
        if not format_string:
            return FormatterResult(value=display_text(value))
        return self.format_parsed(value, self.parse(format_string))

    def format_parsed(self, value: Any, parsed: ParsedFormat) -> FormatterResult:
        """Render ``value`` with an already parsed format."""
        if value is None:
            return FormatterResult(value="")

        if isinstance(value, str) and parsed.source and value == parsed.source:
            logger.warning("Cell value equals its format string %r", parsed.source)

        try:
            branch = select_branch(value, parsed)
            if branch.sub_format is None:
                return FormatterResult(value=display_text(value))

            styled = parsed.styled.get(branch.sub_format)
            if styled is None:
                template, style = extract_styles(branch.sub_format)
            else:
                template, style = styled.template, styled.style
            text = render_text(
                template,
                value,
                branch.number,
                numeric=branch.numeric,
                absolute=branch.absolute,
            )
        except (ValueError, TypeError, ArithmeticError) as e:
            logger.warning("Failed to format %r with %r: %s", value, parsed.source, e)
            return FormatterResult(value=display_text(value))

        return FormatterResult(value=text, style=None if style.is_empty() else style)

    def style(self, value: Any, format_string: Optional[str]) -> Optional[StyleDirective]:
        """Return only the style part of :meth:`format`."""
        return self.format(value, format_string).style

    def create_value_formatter(self, format_string: Optional[str]) -> "FormatterHandle":
        """
        Build a per-cell value formatter; the format is parsed once here.

        Raises:
            InvalidFormatError: If ``format_string`` is neither str nor None
        """
        _check_format(format_string)
        return FormatterHandle(format_string=format_string, formatter_type="value").bind(self)

    def create_cell_style(
        self,
        format_string: Optional[str],
        base_style: Optional[Dict[str, str]] = None,
    ) -> "FormatterHandle":
        """
        Build a per-cell style function; the format is parsed once here.

        Args:
            format_string: Format string carrying style directives
            base_style: CSS properties applied underneath the matched section's style

        Raises:
            InvalidFormatError: If ``format_string`` is neither str nor None
        """
        _check_format(format_string)
        return FormatterHandle(
            format_string=format_string,
            formatter_type="style",
            base_style=base_style,
        ).bind(self)

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_size(self) -> int:
        return len(self._cache)

    def is_cached(self, format_string: str) -> bool:
        return format_string in self._cache


class FormatterHandle(BaseModel):
    """
    Serializable per-cell formatter.

    Holds the format string (what gets persisted) and the parsed form (what
    gets used). Calling the handle renders one value: the display text for a
    ``value`` handle, the CSS style dict for a ``style`` handle.
    """

    model_config = ConfigDict(frozen=True)

    format_string: Optional[str] = None
    formatter_type: Literal["value", "style"] = "value"
    base_style: Optional[Dict[str, str]] = None

    _engine: Optional[FormatEngine] = PrivateAttr(default=None)
    _compiled: Optional[ParsedFormat] = PrivateAttr(default=None)

    def bind(self, engine: FormatEngine) -> "FormatterHandle":
        """Compile the format with ``engine`` and return self."""
        self._engine = engine
        self._compiled = engine.parse(self.format_string)
        return self

    @property
    def compiled(self) -> ParsedFormat:
        if self._compiled is None:
            self.bind(get_default_engine())
        return self._compiled

    def result(self, value: Any) -> FormatterResult:
        if not self.format_string:
            return FormatterResult(value=display_text(value))
        engine = self._engine or get_default_engine()
        return engine.format_parsed(value, self.compiled)

    def __call__(self, value: Any) -> Union[str, Dict[str, str]]:
        result = self.result(value)
        if self.formatter_type == "value":
            return result.value
        base = StyleDirective.from_css(self.base_style)
        if value is None:
            return base.to_css()
        return base.merge(result.style).to_css()


def _check_format(format_string: Any) -> Optional[str]:
    if format_string is not None and not isinstance(format_string, str):
        raise InvalidFormatError(format_string)
    return format_string


def export_number_format(format_string: Optional[str]) -> str:
    """
    Reduce a format string to an Excel ``number_format`` for xlsx export.

    Style directives and conditions are dropped; the first section that
    carries a numeric or date pattern is kept, with date tokens lowered to
    Excel's spelling.

    Examples:
        >>> export_number_format('[>0][Green]"$"#,##0.00;[Red]-#,##0.00')
        '"$"#,##0.00'
        >>> export_number_format("MM/DD/YYYY")
        'mm/dd/yyyy'
        >>> export_number_format('"Active"')
        'General'
    """
    format_string = _check_format(format_string)
    if not format_string:
        return "General"

    parsed = FormatParser.parse(format_string)
    if parsed.has_conditions:
        candidates = [c.sub_format for c in parsed.conditions] + [parsed.default_format or ""]
    else:
        candidates = split_sections(format_string)

    for candidate in candidates:
        template, _ = extract_styles(candidate)
        code = code_outside_quotes(template)
        if is_date_pattern(code):
            return _lower_date_tokens(template).strip()
        if any(c in code for c in "0#?"):
            return template.strip()
    return "General"


def _lower_date_tokens(template: str) -> str:
    pieces = []
    for is_literal, chunk in iter_quoted(template):
        if is_literal:
            pieces.append(f'"{chunk}"')
        else:
            pieces.append(DATE_TOKEN.sub(_excel_date_token, chunk))
    return "".join(pieces)


def _excel_date_token(match) -> str:
    token = match.group(0)
    if token in ("AM/PM", "am/pm"):
        return "AM/PM"
    return token.lower()


_default_engine: Optional[FormatEngine] = None


def get_default_engine() -> FormatEngine:
    """Return the process-wide engine used by the module-level functions."""
    global _default_engine
    if _default_engine is None:
        _default_engine = FormatEngine()
    return _default_engine


def format_value(value: Any, format_string: Optional[str]) -> FormatterResult:
    """
    Format a value according to a format string.

    Args:
        value: The value to format
        format_string: Excel-style format string or None

    Returns:
        FormatterResult with display text and optional style
    """
    return get_default_engine().format(value, format_string)


def parse_format(format_string: Optional[str]) -> ParsedFormat:
    """Parse (and cache) a format string with the default engine."""
    return get_default_engine().parse(format_string)


def create_value_formatter(format_string: Optional[str]) -> FormatterHandle:
    """Per-cell value formatter bound to the default engine."""
    return get_default_engine().create_value_formatter(format_string)


def create_cell_style(
    format_string: Optional[str],
    base_style: Optional[Dict[str, str]] = None,
) -> FormatterHandle:
    """Per-cell style function bound to the default engine."""
    return get_default_engine().create_cell_style(format_string, base_style)


format = format_value
