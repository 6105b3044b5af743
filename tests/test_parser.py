"""
Tests for the format string parser.
"""

import pytest

from cell_format.models import FormatCondition, TextCondition
from cell_format.parser import FormatParser
from cell_format.selector import select_branch


class TestParseCondition:
    """Test classification of bracket contents."""

    @pytest.mark.parametrize("body,operator,threshold", [
        (">=90", ">=", 90.0),
        ("<50", "<", 50.0),
        ("<-5", "<", -5.0),
        ("=0", "=", 0.0),
        ("!=5", "<>", 5.0),
        ("<>1.5", "<>", 1.5),
        ("> 1e3", ">", 1000.0),
    ])
    def test_numeric_conditions(self, body, operator, threshold):
        """Test numeric comparisons."""
        condition = FormatParser.parse_condition(body)
        assert isinstance(condition, FormatCondition)
        assert condition.operator == operator
        assert condition.threshold == threshold

    def test_text_conditions(self):
        """Test text equality and inequality."""
        equal = FormatParser.parse_condition('="Done"')
        assert isinstance(equal, TextCondition)
        assert equal.operator == "="
        assert equal.text == "Done"

        not_empty = FormatParser.parse_condition('<>""')
        assert not_empty.operator == "<>"
        assert not_empty.text == ""

    @pytest.mark.parametrize("body", ["Red", "Bold", "BG:yellow", ">abc", ">1.2.3", "#FF0000", ""])
    def test_not_conditions(self, body):
        """Test that colors, directives and malformed thresholds are not conditions."""
        assert FormatParser.parse_condition(body) is None


class TestFormatParser:
    """Test parsing of whole format strings."""

    def test_conditions_mode(self):
        """Test a condition plus a default section."""
        parsed = FormatParser.parse('[>80]"High"[Green];"Low"[Red]')
        assert parsed.has_conditions
        assert len(parsed.conditions) == 1
        condition = parsed.conditions[0]
        assert condition.operator == ">"
        assert condition.threshold == 80
        assert condition.sub_format == '"High"[Green]'
        assert parsed.default_format == '"Low"[Red]'

    def test_conditions_keep_source_order(self):
        """Test that conditions are listed in the order written."""
        parsed = FormatParser.parse('[<50]"red";[<80]"yellow";"green"')
        assert [c.threshold for c in parsed.conditions] == [50, 80]
        assert parsed.default_format == '"green"'

    def test_text_before_condition_belongs_to_it(self):
        """Test that leading text in a section joins the condition's sub-format."""
        parsed = FormatParser.parse('[Blue][<32]0°F')
        assert parsed.conditions[0].sub_format == '[Blue]0°F'

    def test_second_condition_starts_new_run(self):
        """Test two conditions inside one section."""
        parsed = FormatParser.parse('[>5]"big"[<2]"small"')
        assert len(parsed.conditions) == 2
        assert parsed.conditions[0].sub_format == '"big"'
        assert parsed.conditions[1].sub_format == '"small"'
        assert parsed.default_format == ""

    def test_multiple_default_sections_joined(self):
        """Test that unconditioned sections are joined into the default."""
        parsed = FormatParser.parse('[>5]"a";"b";"c"')
        assert parsed.default_format == '"b";"c"'

    def test_bracket_in_quotes_is_literal(self):
        """Test that quoted brackets are never conditions."""
        parsed = FormatParser.parse('"[>5]"0')
        assert not parsed.has_conditions
        assert parsed.positive_format == '"[>5]"0'

    def test_legacy_sections(self):
        """Test positive;negative;zero;text mode."""
        parsed = FormatParser.parse('0.00;[Red]-0.00;"zero";@')
        assert not parsed.has_conditions
        assert parsed.positive_format == '0.00'
        assert parsed.negative_format == '[Red]-0.00'
        assert parsed.zero_format == '"zero"'
        assert parsed.text_format == '@'
        assert parsed.section_count == 4

    def test_legacy_missing_sections(self):
        """Test that absent sections are None."""
        parsed = FormatParser.parse('0.00;(0.00)')
        assert parsed.zero_format is None
        assert parsed.text_format is None
        assert parsed.section_count == 2

    def test_empty_format(self):
        """Test parsing an empty string."""
        parsed = FormatParser.parse('')
        assert parsed.section_count == 0
        assert parsed.positive_format is None

    @pytest.mark.parametrize("format_string", ['[>5', '[', ']', '"', '[>abc]0', ';;;', '[=""'])
    def test_malformed_never_raises(self, format_string):
        """Test that malformed input degrades instead of raising."""
        parsed = FormatParser.parse(format_string)
        assert parsed.source == format_string

    def test_source_preserved(self):
        """Test that the raw source is kept verbatim."""
        parsed = FormatParser.parse(' 0.00 ')
        assert parsed.source == ' 0.00 '
        assert parsed.positive_format == '0.00'


class TestParseProperties:
    """Test structural properties of parsing and selection."""

    FORMATS = [
        '[>80]"High"[Green];"Low"[Red]',
        '[<50]"🔴 "0;[<80]"🟡 "0;"🟢 "0',
        '[="A"]"Alpha";[="B"]"Beta";"Other"',
        '0.00;[Red](0.00);"zero";@',
        '[>5]"a"[<2]"b";"c"',
    ]

    @pytest.mark.parametrize("format_string", FORMATS)
    def test_parse_is_idempotent(self, format_string):
        """Test that parsing twice gives equal results."""
        assert FormatParser.parse(format_string) == FormatParser.parse(format_string)

    @pytest.mark.parametrize("format_string", [f for f in FORMATS if "[" in f and '"A"' not in f])
    def test_total_coverage(self, format_string):
        """Test that every real number selects some sub-format."""
        parsed = FormatParser.parse(format_string)
        for value in (-1e9, -80.5, -1, 0, 2, 5, 49.999, 50, 80, 80.001, 1e9):
            assert select_branch(value, parsed).sub_format is not None
