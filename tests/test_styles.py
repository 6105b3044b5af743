"""
Tests for style directive extraction.
"""

import time

import pytest

from cell_format.styles import extract_styles, resolve_color


class TestResolveColor:
    """Test palette lookup."""

    def test_palette_names(self):
        """Test case-insensitive palette names."""
        assert resolve_color("green") == "#008000"
        assert resolve_color("RED") == "#FF0000"
        assert resolve_color("Purple") == "#800080"

    def test_hex_passthrough(self):
        """Test that valid hex colors are returned as written."""
        assert resolve_color("#abc") == "#abc"
        assert resolve_color("#00FF00") == "#00FF00"

    def test_unknown(self):
        """Test unknown names and malformed hex."""
        assert resolve_color("teal") is None
        assert resolve_color("#12") is None


class TestExtractStyles:
    """Test directive stripping."""

    def test_color_name(self):
        """Test a palette color after a label."""
        text, style = extract_styles('"High"[Green]')
        assert text == '"High"'
        assert style.color == "#008000"

    def test_hex_color(self):
        """Test a bracketed hex color."""
        text, style = extract_styles('[#00ff00]0')
        assert text == '0'
        assert style.color == "#00ff00"

    def test_keyword_and_background(self):
        """Test keywords and BG: directives together."""
        text, style = extract_styles('[Bold][BG:lightgreen]"High"')
        assert text == '"High"'
        assert style.font_weight == "bold"
        assert style.background_color == "lightgreen"

    def test_brace_background(self):
        """Test {#hex} background colors."""
        text, style = extract_styles('{#FF0000}0')
        assert text == '0'
        assert style.background_color == "#FF0000"

    @pytest.mark.parametrize("sub_format,prop,value", [
        ('**0.00**', "font_weight", "bold"),
        ('//x//', "font_style", "italic"),
        ('__x__', "text_decoration", "underline"),
        ('~~x~~', "text_decoration", "line-through"),
        ('[Italic]0', "font_style", "italic"),
        ('[Strikethrough]0', "text_decoration", "line-through"),
        ('[Center]0', "text_align", "center"),
        ('[Align:right]0', "text_align", "right"),
        ('[Size:14]0', "font_size", "14px"),
        ('[Size:1.5em]0', "font_size", "1.5em"),
        ('[Border:1px-solid-red]0', "border", "1px solid red"),
        ('[Padding:2px-4px]0', "padding", "2px 4px"),
        ('[Weight:600]0', "font_weight", "600"),
    ])
    def test_directives(self, sub_format, prop, value):
        """Test each directive family."""
        _, style = extract_styles(sub_format)
        assert getattr(style, prop) == value

    def test_inline_marker_inside_quotes(self):
        """Test that inline markers are stripped inside quoted labels too."""
        text, style = extract_styles('"**Active**"')
        assert text == '"Active"'
        assert style.font_weight == "bold"

    def test_later_marker_wins(self):
        """Test that ~~ overrides __ when both are present."""
        _, style = extract_styles('__~~x~~__')
        assert style.text_decoration == "line-through"

    def test_quoted_brackets_untouched(self):
        """Test that directives inside quotes are literal text."""
        text, style = extract_styles('"[Red]"')
        assert text == '"[Red]"'
        assert style.is_empty()

    def test_unknown_bracket_passthrough(self):
        """Test that unknown bracket contents stay in the text."""
        text, style = extract_styles('[Teal]0')
        assert text == '[Teal]0'
        assert style.is_empty()

    def test_nested_brackets_reach_fixed_point(self):
        """Test that a directive revealed by stripping another is also consumed."""
        text, style = extract_styles('[[Red]Bold]')
        assert text == ''
        assert style.color == "#FF0000"
        assert style.font_weight == "bold"

    @pytest.mark.parametrize("sub_format", [
        '[[Red]Bold]"x"',
        '**[Green]0.00**[BG:yellow]',
        '"High"[Green]{#FFF}',
        '*[*Bold]*0',
    ])
    def test_idempotent(self, sub_format):
        """Test that extracting from extracted text changes nothing."""
        text, _ = extract_styles(sub_format)
        again, style = extract_styles(text)
        assert again == text
        assert style.is_empty()

    def test_css_output(self):
        """Test camelCase CSS conversion."""
        _, style = extract_styles('[Red][BG:#eee][Bold]0')
        assert style.to_css() == {
            "color": "#FF0000",
            "backgroundColor": "#eee",
            "fontWeight": "bold",
        }

    def test_inline_marker_after_bracket_weight(self):
        """Test that ** applies after a bracketed weight and overrides it."""
        _, style = extract_styles('[Weight:600]**0**')
        assert style.font_weight == "bold"

    def test_bold_keyword_and_marker_compose(self):
        """Test that [Bold] and ** together give plain bold."""
        text, style = extract_styles('[Bold]**0**')
        assert text == '0'
        assert style.font_weight == "bold"


class TestLargeInputs:
    """Test that extraction time grows linearly with the format length."""

    def _timed(self, sub_format):
        start = time.perf_counter()
        result = extract_styles(sub_format)
        return result, time.perf_counter() - start

    def test_unmatched_openers(self):
        """Test many openers sharing one closer."""
        sub_format = "[" * 200000 + "]0"
        (text, style), elapsed = self._timed(sub_format)
        assert text == sub_format
        assert style.is_empty()
        assert elapsed < 5

    def test_deep_nesting(self):
        """Test deeply nested brackets that are not directives."""
        sub_format = "[" * 100000 + "]" * 100000 + "{" * 100000 + "0"
        (text, style), elapsed = self._timed(sub_format)
        assert text == sub_format
        assert style.is_empty()
        assert elapsed < 5

    def test_many_directives(self):
        """Test a long run of directives."""
        (text, style), elapsed = self._timed("[Red]{#FFF}" * 50000 + "0")
        assert text == "0"
        assert style.color == "#FF0000"
        assert style.background_color == "#FFF"
        assert elapsed < 5

    def test_long_bracket_body(self):
        """Test that an oversized bracket is left as text."""
        sub_format = "[Border:" + "1px-" * 100 + "solid]0"
        text, style = extract_styles(sub_format)
        assert text == sub_format
        assert style.is_empty()
