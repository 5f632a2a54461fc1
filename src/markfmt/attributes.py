"""
Attribute value rendering.

Expression-like values ({...}, as in ng-class="{'a': x, 'b': y}") get one
entry per line, aligned at a given column. Their grammar is never parsed; only
comma-quote boundaries are touched. Everything else passes through as written.
"""

from __future__ import annotations

import re
from enum import Enum

# comma, optional whitespace, then the quote opening the next key
ENTRY_BOUNDARY = re.compile(r",\s*'")


class ValueKind(Enum):
    EXPRESSION = "expression"
    PLAIN = "plain"


def classify_value(value: str) -> ValueKind:
    """Brace-delimited values are expressions."""
    if value.startswith("{") and value.endswith("}"):
        return ValueKind.EXPRESSION
    return ValueKind.PLAIN


def render_attribute_value(value: str, column: int) -> str:
    """Re-indent an expression value so each entry starts at column."""
    if classify_value(value) is ValueKind.PLAIN:
        return value
    return ENTRY_BOUNDARY.sub(",\n" + " " * column + "'", value)


def render_attribute(name: str, value: str) -> str:
    """Single-line key="value" form."""
    return f'{name}="{value}"'
