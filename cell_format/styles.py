"""
Style directive extraction.

Pulls presentation tokens (palette colors, hex codes, keywords, ``Key:value``
directives and inline markers) out of a sub-format and returns the remaining
template text together with the collected :class:`StyleDirective`.
"""

import logging
import re
from typing import Dict, Optional, Tuple

from .models import StyleDirective

logger = logging.getLogger(__name__)

COLOR_MAP: Dict[str, str] = {
    "RED": "#FF0000",
    "BLUE": "#0000FF",
    "GREEN": "#008000",
    "YELLOW": "#FFFF00",
    "MAGENTA": "#FF00FF",
    "CYAN": "#00FFFF",
    "WHITE": "#FFFFFF",
    "BLACK": "#000000",
    "BROWN": "#A52A2A",
    "ORANGE": "#FFA500",
    "PINK": "#FFC0CB",
    "PURPLE": "#800080",
    "GRAY": "#808080",
    "GREY": "#808080",
}

KEYWORD_STYLES: Dict[str, Dict[str, str]] = {
    "bold": {"font_weight": "bold"},
    "italic": {"font_style": "italic"},
    "underline": {"text_decoration": "underline"},
    "strikethrough": {"text_decoration": "line-through"},
    "center": {"text_align": "center"},
    "left": {"text_align": "left"},
    "right": {"text_align": "right"},
}

# Directive key (lowercase) -> (style property, hyphens become spaces)
KEY_DIRECTIVES: Dict[str, Tuple[str, bool]] = {
    "bg": ("background_color", False),
    "background": ("background_color", False),
    "border": ("border", True),
    "b": ("border", True),
    "weight": ("font_weight", False),
    "fontweight": ("font_weight", False),
    "size": ("font_size", False),
    "fontsize": ("font_size", False),
    "align": ("text_align", False),
    "textalign": ("text_align", False),
    "padding": ("padding", True),
    "p": ("padding", True),
}

# Applied after bracket directives, in this order
INLINE_MARKERS = (
    ("**", "font_weight", "bold"),
    ("//", "font_style", "italic"),
    ("__", "text_decoration", "underline"),
    ("~~", "text_decoration", "line-through"),
)

HEX_COLOR = re.compile(r"^#(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")
KEY_VALUE = re.compile(r"^([A-Za-z]+)\s*:\s*(.+)$", re.DOTALL)
BARE_NUMBER = re.compile(r"^\d+(?:\.\d+)?$")

CLOSERS = {"[": "]", "{": "}"}
# Longer bracket bodies are never directives
MAX_DIRECTIVE_LENGTH = 100


def resolve_color(name: str) -> Optional[str]:
    """
    Look up a palette name or validate a hex color.

    Examples:
        >>> resolve_color("green")
        '#008000'
        >>> resolve_color("#abc")
        '#abc'
        >>> resolve_color("teal") is None
        True
    """
    name = name.strip()
    if HEX_COLOR.match(name):
        return name
    return COLOR_MAP.get(name.upper())


def bracket_directive(body: str) -> Optional[Dict[str, str]]:
    """
    Classify the contents of ``[...]`` as a style directive.

    Returns:
        Style properties to set, or None if ``body`` is not a directive
    """
    content = body.strip()

    color = resolve_color(content)
    if color is not None:
        return {"color": color}

    keyword = KEYWORD_STYLES.get(content.lower())
    if keyword is not None:
        return dict(keyword)

    match = KEY_VALUE.match(content)
    if match:
        directive = KEY_DIRECTIVES.get(match.group(1).lower())
        if directive is not None:
            prop, hyphens_to_spaces = directive
            value = match.group(2).strip()
            if hyphens_to_spaces:
                value = value.replace("-", " ")
            if prop == "font_size" and BARE_NUMBER.match(value):
                value = f"{value}px"
            return {prop: value}

    return None


def brace_directive(body: str) -> Optional[Dict[str, str]]:
    """Classify the contents of ``{...}`` as a background color."""
    color = resolve_color(body)
    if color is not None:
        return {"background_color": color}
    return None


def _extract_once(text: str, props: Dict[str, str]) -> Tuple[str, bool]:
    """One pass over ``text``; returns the stripped text and whether anything matched."""
    out = []
    # (opener, position in out) of brackets still waiting for their closer
    open_brackets = []
    changed = False
    in_quotes = False
    i = 0
    length = len(text)

    while i < length:
        char = text[i]
        if char == "\\" and i + 1 < length:
            out.append(text[i:i + 2])
            i += 2
            continue
        i += 1
        if char == '"':
            in_quotes = not in_quotes
        elif not in_quotes and char in "[{":
            open_brackets.append((char, len(out)))
        elif not in_quotes and char in "]}" and open_brackets:
            opener, start = open_brackets[-1]
            if CLOSERS[opener] == char:
                open_brackets.pop()
                found = None
                if len(out) - start - 1 <= MAX_DIRECTIVE_LENGTH:
                    body = "".join(out[start + 1:])
                    if opener == "[":
                        found = bracket_directive(body)
                    else:
                        found = brace_directive(body)
                if found is not None:
                    props.update(found)
                    changed = True
                    del out[start:]
                    continue
                logger.debug("Leaving unknown %s...%s in format text", opener, char)
        out.append(char)

    result = "".join(out)
    for marker, prop, value in INLINE_MARKERS:
        if marker in result:
            props[prop] = value
            result = result.replace(marker, "")
            changed = True

    return result, changed


def extract_styles(sub_format: str) -> Tuple[str, StyleDirective]:
    """
    Strip style directives from a sub-format.

    Repeats until nothing more is recognized, so applying it to its own
    output is a no-op.

    Args:
        sub_format: Selected sub-format, e.g. ``[Bold][BG:lightgreen]"High"``

    Returns:
        (remaining template text, collected style)

    Examples:
        >>> text, style = extract_styles('"High"[Green]')
        >>> text, style.color
        ('"High"', '#008000')
    """
    props: Dict[str, str] = {}
    text = sub_format or ""
    changed = True
    while changed:
        text, changed = _extract_once(text, props)
    return text, StyleDirective(**props)
