"""
Data models for parsed format strings, cell styles and formatter results.
"""

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


ComparisonOperator = Literal[">", "<", ">=", "<=", "=", "<>"]

# snake_case field -> CSS property name expected by grid styling hooks
CSS_PROPERTIES = {
    "color": "color",
    "background_color": "backgroundColor",
    "font_weight": "fontWeight",
    "font_style": "fontStyle",
    "text_decoration": "textDecoration",
    "border": "border",
    "font_size": "fontSize",
    "text_align": "textAlign",
    "padding": "padding",
}


class FormatCondition(BaseModel):
    """A numeric comparison such as ``[>100]`` guarding a sub-format."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["numeric"] = "numeric"
    operator: ComparisonOperator
    threshold: float
    sub_format: str = ""

    def matches(self, number: float) -> bool:
        """
        Evaluate ``number OP threshold``.

        Strict operators are exclusive at the boundary, NaN never matches.
        """
        if number != number:
            return False
        if self.operator == ">":
            return number > self.threshold
        if self.operator == "<":
            return number < self.threshold
        if self.operator == ">=":
            return number >= self.threshold
        if self.operator == "<=":
            return number <= self.threshold
        if self.operator == "=":
            return number == self.threshold
        return number != self.threshold


class TextCondition(BaseModel):
    """A text comparison such as ``[="A"]`` or ``[<>""]``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    operator: Literal["=", "<>"]
    text: str
    sub_format: str = ""

    def matches(self, text: str) -> bool:
        if self.operator == "=":
            return text == self.text
        return text != self.text


Condition = Annotated[Union[FormatCondition, TextCondition], Field(discriminator="kind")]


class StyleDirective(BaseModel):
    """Presentation extracted from a sub-format."""

    model_config = ConfigDict(frozen=True)

    color: Optional[str] = None
    background_color: Optional[str] = None
    font_weight: Optional[str] = None
    font_style: Optional[str] = None
    text_decoration: Optional[str] = None
    border: Optional[str] = None
    font_size: Optional[str] = None
    text_align: Optional[str] = None
    padding: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)

    def merge(self, other: Optional["StyleDirective"]) -> "StyleDirective":
        """Return a copy with every property set on ``other`` overlaid."""
        if other is None:
            return self
        return self.model_copy(update=other.model_dump(exclude_none=True))

    def to_css(self) -> Dict[str, str]:
        """
        Convert to the camelCase mapping a grid cell-style hook expects.

        Returns:
            Dict of CSS property name to value, unset properties omitted
        """
        return {
            CSS_PROPERTIES[name]: value
            for name, value in self.model_dump(exclude_none=True).items()
        }

    @classmethod
    def from_css(cls, css: Optional[Dict[str, str]]) -> "StyleDirective":
        """Build a style from a camelCase mapping, ignoring unknown properties."""
        if not css:
            return cls()
        by_css_name = {css_name: name for name, css_name in CSS_PROPERTIES.items()}
        values = {
            by_css_name[key]: str(value)
            for key, value in css.items()
            if key in by_css_name and value is not None
        }
        return cls(**values)


class StyledFormat(BaseModel):
    """A sub-format with its style directives extracted."""

    model_config = ConfigDict(frozen=True)

    template: str = ""
    style: StyleDirective = Field(default_factory=StyleDirective)


class ParsedFormat(BaseModel):
    """
    Structured form of a format string.

    Either ``conditions`` plus ``default_format`` are populated (conditions mode)
    or the four legacy Excel sections are (positive;negative;zero;text).
    ``styled`` maps each sub-format to its directive-free template and style.
    """

    model_config = ConfigDict(frozen=True)

    source: str = ""
    conditions: List[Condition] = Field(default_factory=list)
    default_format: Optional[str] = None
    positive_format: Optional[str] = None
    negative_format: Optional[str] = None
    zero_format: Optional[str] = None
    text_format: Optional[str] = None
    section_count: int = 0
    styled: Dict[str, StyledFormat] = Field(default_factory=dict)

    @property
    def has_conditions(self) -> bool:
        return len(self.conditions) > 0


# Alias used by the tabular layer and the CLI
CellStyle = StyleDirective


class FormatterResult(BaseModel):
    """Display text and optional style for one cell."""

    model_config = ConfigDict(frozen=True)

    value: str
    style: Optional[StyleDirective] = None

    def css(self) -> Dict[str, str]:
        return self.style.to_css() if self.style is not None else {}


class FormatEngineConfig(BaseModel):
    """Configuration for the format engine."""

    enable_caching: bool = Field(
        default=True,
        description="Whether to memoize parsed formats per format string"
    )
    cache_size: int = Field(
        default=100,
        ge=1,
        description="Maximum number of parsed formats kept in the cache"
    )
