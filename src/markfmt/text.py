"""
Text node rendering.

Free text is padded ({{x}} -> {{ x }}), reflowed to the line width at the
node's indentation and percent-decoded. A word wider than the line is never
split; it gets a line of its own and overflows.
"""

from __future__ import annotations

import re
import textwrap
from urllib.parse import unquote

from .config import FormatConfig

EXPR_OPEN = re.compile(r"\{\{[ \t]*")
EXPR_CLOSE = re.compile(r"[ \t]*\}\}")


def pad_expressions(text: str) -> str:
    """Exactly one space inside every {{ and }}."""
    text = EXPR_OPEN.sub("{{ ", text)
    return EXPR_CLOSE.sub(" }}", text)


def wrap_words(indent: str, text: str, width: int) -> str:
    """Greedy word wrap, every line prefixed with indent."""
    return textwrap.fill(
        " ".join(text.split()),
        width=width,
        initial_indent=indent,
        subsequent_indent=indent,
        break_long_words=False,
        break_on_hyphens=False,
    )


def render_text(indent: str, raw: str, config: FormatConfig) -> str:
    """Render a text node; the result ends with exactly one newline."""
    text = raw
    if config.expr_padding:
        text = pad_expressions(text)

    if not config.text_wrap:
        return indent + text.strip() + "\n"

    wrapped = wrap_words(indent, text, config.max_line_width)
    return indent + unquote(wrapped).strip() + "\n"
