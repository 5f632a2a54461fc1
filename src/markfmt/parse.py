"""
Markup parsing for markfmt.

BeautifulSoup (html.parser backend) builds the tree; this module converts it to
markfmt's DOM. The parser decodes character references, so the conversion puts
back the escapes needed for the output to mean what the source meant.
"""

from __future__ import annotations

import re
import warnings

from bs4 import BeautifulSoup, Doctype, MarkupResemblesLocatorWarning, ParserRejectedMarkup
from bs4.builder import HTMLParserTreeBuilder
from bs4.element import Comment as SoupComment
from bs4.element import NavigableString, PreformattedString, Tag

from .config import FormatConfig
from .dom import Comment, Directive, Element, Node, Text
from .errors import ParseError
from .tags import TagClassifier

# html.parser hands these through undecoded
RAW_TEXT_ELEMENTS = frozenset({"script", "style"})

BETWEEN_TAGS_WS = re.compile(r">\s+<")
NEWLINE_INDENT = re.compile(r"\n\s+")

AMBIGUOUS_AMP = re.compile(r"&(?=#?[A-Za-z0-9]+;)")
AMBIGUOUS_LT = re.compile(r"<(?=[A-Za-z/!?])")


def normalize_source(text: str) -> str:
    """
    Drop the source's own layout before parsing.

    Whitespace between tags disappears and a newline plus indentation becomes
    one space, so the renderer decides every line break in the output.
    """
    text = BETWEEN_TAGS_WS.sub("><", text)
    return NEWLINE_INDENT.sub(" ", text)


def escape_text(text: str) -> str:
    """Re-escape decoded text where it would otherwise read as markup."""
    text = AMBIGUOUS_AMP.sub("&amp;", text)
    text = AMBIGUOUS_LT.sub("&lt;", text)
    return text.replace("\xa0", "&nbsp;")


def escape_attribute(value: str) -> str:
    return escape_text(value).replace('"', "&quot;")


def parse_markup(text: str, config: FormatConfig | None = None) -> list[Node]:
    """Parse markup into a forest of markfmt nodes."""
    config = config or FormatConfig()
    classifier = TagClassifier(extra_void=config.void_tags)

    builder = HTMLParserTreeBuilder(multi_valued_attributes=None)
    # Custom void names must not swallow their following siblings
    builder.empty_element_tags = set(builder.empty_element_tags or ()) | classifier.void_names

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
            soup = BeautifulSoup(text, builder=builder)
    except ParserRejectedMarkup as e:
        raise ParseError(f"Markup rejected by parser: {e}") from e

    return _convert_children(soup, raw_text=False)


def _convert_children(parent: Tag, raw_text: bool) -> list[Node]:
    nodes = []
    for child in parent.children:
        node = _convert(child, raw_text)
        if node is not None:
            nodes.append(node)
    return nodes


def _convert(item: object, raw_text: bool) -> Node | None:
    if isinstance(item, Tag):
        element = Element(
            name=item.name,
            attributes={key: escape_attribute(str(value)) for key, value in item.attrs.items()},
        )
        inner_raw = item.name in RAW_TEXT_ELEMENTS
        for child in _convert_children(item, raw_text=inner_raw):
            element.add_child(child)
        return element

    if isinstance(item, SoupComment):
        return Comment(content=str(item))

    if isinstance(item, Doctype):
        body = str(item)
        if body.lower().startswith("doctype"):
            return Directive(content=f"<!{body}>")
        return Directive(content=f"<!DOCTYPE {body}>")

    if isinstance(item, PreformattedString):
        return Directive(content=f"{item.PREFIX}{item}{item.SUFFIX}".strip())

    if isinstance(item, NavigableString):
        content = str(item)
        if not content.strip():
            return None
        return Text(content=content if raw_text else escape_text(content))

    raise ParseError(f"Unexpected parser output: {type(item).__name__}")
