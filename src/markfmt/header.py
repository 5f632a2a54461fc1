"""
Opening tag rendering.

A header is a single line when it fits the line width (or attribute wrapping
is off). Otherwise each attribute gets its own line, aligned under the first:

    <input class="form-control"
           name="email"
           type="email">

An empty element whose header and closing tag fit on one line leaves the line
open so the tree renderer can append the closing tag directly.
"""

from __future__ import annotations

from dataclasses import dataclass

from .attributes import render_attribute, render_attribute_value
from .config import FormatConfig
from .dom import Element
from .tags import TagClassifier


@dataclass(frozen=True)
class Rendered:
    """Rendered markup plus whether it finished its last line."""
    text: str
    ends_line: bool = True


def raw_header(element: Element) -> str:
    """Tag name and attributes in source order, no angle brackets."""
    parts = [element.name]
    parts.extend(render_attribute(key, value) for key, value in element.attributes.items())
    return " ".join(parts)


def render_header(
    element: Element,
    indent: str,
    config: FormatConfig,
    classifier: TagClassifier,
) -> Rendered:
    raw = raw_header(element)
    void = classifier.is_void(element.name)
    width = config.max_line_width

    close = " />" if void and config.closing_slash else ">"

    fits = len(indent) + len(raw) + 3 <= width
    if fits or not config.attr_newline or not element.attributes:
        text = f"{indent}<{raw}{close}\n"
    else:
        text = _multiline_header(element, indent, config, close)

    if (
        config.empty_tag_same_line
        and not void
        and not element.children
        and len(indent) + len(raw) <= width
        and len(text.rstrip("\n").rsplit("\n", 1)[-1]) + len(element.name) + 3 <= width
    ):
        return Rendered(text[:-1], ends_line=False)

    return Rendered(text)


def _multiline_header(element: Element, indent: str, config: FormatConfig, close: str) -> str:
    attrs = list(element.attributes.items())
    if config.reorder_attrs:
        attrs.sort(key=lambda item: item[0])

    lead = f"{indent}<{element.name} "
    align = indent + " " * (len(element.name) + 2)
    lines = []
    for index, (key, value) in enumerate(attrs):
        line = (lead if index == 0 else align) + f'{key}="'
        # one past the opening brace, so entries line up with the first key
        line += render_attribute_value(value, len(line) + 1) + '"'
        lines.append(line)

    return "\n".join(lines) + close + "\n"
