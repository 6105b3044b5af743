"""
Format string parser.

Turns a raw format string into a :class:`ParsedFormat`: either an ordered list
of bracketed conditions with a default sub-format, or the legacy Excel
``positive;negative;zero;text`` sections.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional

from .models import Condition, FormatCondition, ParsedFormat, StyledFormat, TextCondition
from .sections import split_sections
from .styles import extract_styles

logger = logging.getLogger(__name__)

NUMERIC_CONDITION = re.compile(
    r"^\s*(>=|<=|<>|!=|>|<|=)\s*([-+]?[\d.]+(?:[eE][-+]?\d+)?)\s*$"
)
TEXT_CONDITION = re.compile(r'^@?(=|<>|!=)"(.*)"$', re.DOTALL)


class _Run:
    """One condition (or none) and the sub-format text collected for it."""

    __slots__ = ("condition", "text")

    def __init__(self):
        self.condition = None
        self.text = []

    def sub_format(self) -> str:
        return "".join(self.text).strip()


class FormatParser:
    """Parse format strings into structured sections."""

    @staticmethod
    def parse(format_string: str) -> ParsedFormat:
        """
        Parse a format string.

        Args:
            format_string: Raw format string, e.g. ``[>80]"High"[Green];"Low"``

        Returns:
            ParsedFormat in conditions mode when any bracketed condition is
            present, otherwise in legacy four-section mode
        """
        source = format_string or ""
        cleaned = source.strip()

        runs = FormatParser._scan_runs(cleaned)
        conditions = [
            FormatParser._with_sub_format(run.condition, run.sub_format())
            for run in runs
            if run.condition is not None
        ]

        if conditions:
            leftovers = [run.sub_format() for run in runs if run.condition is None]
            default_format = ";".join(piece for piece in leftovers if piece).strip(";").strip()
            return ParsedFormat(
                source=source,
                conditions=conditions,
                default_format=default_format,
                section_count=len(runs),
                styled=FormatParser._styled([c.sub_format for c in conditions] + [default_format]),
            )

        parts = split_sections(cleaned)
        sections = parts + [None] * (4 - len(parts))
        return ParsedFormat(
            source=source,
            positive_format=sections[0],
            negative_format=sections[1],
            zero_format=sections[2],
            text_format=sections[3],
            section_count=len(parts),
            styled=FormatParser._styled(parts),
        )

    @staticmethod
    def parse_condition(body: str) -> Optional[Condition]:
        """
        Classify the contents of a square bracket as a condition.

        Args:
            body: Text between ``[`` and ``]``

        Returns:
            A condition without sub-format, or None when ``body`` is not a
            condition (colors, style directives, malformed thresholds)

        Examples:
            >>> FormatParser.parse_condition(">=90").threshold
            90.0
            >>> FormatParser.parse_condition('="A"').text
            'A'
            >>> FormatParser.parse_condition("Red") is None
            True
        """
        text_match = TEXT_CONDITION.match(body)
        if text_match:
            operator = "=" if text_match.group(1) == "=" else "<>"
            return TextCondition(operator=operator, text=text_match.group(2))

        numeric_match = NUMERIC_CONDITION.match(body)
        if numeric_match:
            operator = numeric_match.group(1)
            try:
                threshold = float(numeric_match.group(2))
            except ValueError:
                logger.debug("Dropping condition with non-numeric threshold: [%s]", body)
                return None
            if operator == "!=":
                operator = "<>"
            return FormatCondition(operator=operator, threshold=threshold)

        return None

    @staticmethod
    def _styled(sub_formats: Iterable[str]) -> Dict[str, StyledFormat]:
        """Extract the style directives of each distinct sub-format once."""
        styled = {}
        for sub_format in sub_formats:
            if sub_format not in styled:
                template, style = extract_styles(sub_format)
                styled[sub_format] = StyledFormat(template=template, style=style)
        return styled

    @staticmethod
    def _with_sub_format(condition: Condition, sub_format: str) -> Condition:
        return condition.model_copy(update={"sub_format": sub_format})

    @staticmethod
    def _scan_runs(format_string: str) -> List[_Run]:
        """
        Single left-to-right pass collecting condition runs.

        A condition bracket claims the text of its ``;``-section seen so far; a
        second condition in the same run starts a new one. Top-level ``;``
        closes the current run.
        """
        runs = []
        current = _Run()
        in_quotes = False
        i = 0
        length = len(format_string)

        while i < length:
            char = format_string[i]

            if char == "\\" and i + 1 < length:
                current.text.append(format_string[i:i + 2])
                i += 2
                continue

            if char == '"':
                in_quotes = not in_quotes
                current.text.append(char)
            elif char == "[" and not in_quotes:
                end = format_string.find("]", i + 1)
                if end == -1:
                    current.text.append(format_string[i:])
                    break
                body = format_string[i + 1:end]
                condition = FormatParser.parse_condition(body)
                if condition is None:
                    current.text.append(format_string[i:end + 1])
                elif current.condition is None:
                    current.condition = condition
                else:
                    runs.append(current)
                    current = _Run()
                    current.condition = condition
                i = end + 1
                continue
            elif char == ";" and not in_quotes:
                runs.append(current)
                current = _Run()
            else:
                current.text.append(char)
            i += 1

        runs.append(current)
        return runs
