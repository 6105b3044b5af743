"""
Quote- and bracket-aware scanning of format strings.
"""

from typing import Iterator, List, Tuple


def split_sections(format_string: str) -> List[str]:
    """
    Split a format string into top-level sections on ``;``.

    Semicolons inside quoted literals or square brackets do not split. A
    backslash escapes the following character. Unterminated quotes or brackets
    are tolerated: the rest of the string stays in the current section.

    Args:
        format_string: Raw format string

    Returns:
        Trimmed sections, empty ones preserved for their position

    Examples:
        >>> split_sections('0.00;[Red]-0.00;"zero"')
        ['0.00', '[Red]-0.00', '"zero"']
        >>> split_sections('"a;b";0')
        ['"a;b"', '0']
        >>> split_sections('0;;0')
        ['0', '', '0']
    """
    if not format_string:
        return []

    parts = []
    current = []
    in_quotes = False
    in_brackets = False
    escaped = False

    for char in format_string:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\" and not in_brackets:
            current.append(char)
            escaped = True
        elif char == '"' and not in_brackets:
            in_quotes = not in_quotes
            current.append(char)
        elif char == "[" and not in_quotes:
            in_brackets = True
            current.append(char)
        elif char == "]" and not in_quotes:
            in_brackets = False
            current.append(char)
        elif char == ";" and not in_quotes and not in_brackets:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    parts.append("".join(current).strip())
    return parts


def iter_quoted(text: str) -> Iterator[Tuple[bool, str]]:
    """
    Break a sub-format into literal and code pieces.

    Quoted text and backslash-escaped characters are literals; everything
    else is format code. An unclosed quote makes the remainder literal.

    Yields:
        (is_literal, chunk) tuples in source order
    """
    i = 0
    length = len(text)
    code_start = 0

    while i < length:
        char = text[i]
        if char == '"':
            if i > code_start:
                yield False, text[code_start:i]
            literal = []
            i += 1
            while i < length and text[i] != '"':
                if text[i] == "\\" and i + 1 < length:
                    i += 1
                literal.append(text[i])
                i += 1
            yield True, "".join(literal)
            if i >= length:
                return
            i += 1
            code_start = i
        elif char == "\\" and i + 1 < length:
            if i > code_start:
                yield False, text[code_start:i]
            yield True, text[i + 1]
            i += 2
            code_start = i
        else:
            i += 1

    if code_start < length:
        yield False, text[code_start:]


def code_outside_quotes(text: str) -> str:
    """Return only the format-code portion of ``text``."""
    return "".join(chunk for is_literal, chunk in iter_quoted(text) if not is_literal)
