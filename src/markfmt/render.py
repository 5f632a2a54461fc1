"""
Tree renderer for markfmt.

Walks a parsed forest and lays it out:
- element headers via header.render_header, children one level deeper,
  closing tags on their own line or appended to an open header line
- single-text-child elements collapsed to one line, taking precedence over
  same-line closing and the line width
- text reflowed unless its parent is a verbatim element
- comments normalized or dropped

Rendering is a pure function of the tree and the config.
"""

from __future__ import annotations

from .config import FormatConfig
from .dom import Comment, Directive, Element, Node, Text
from .errors import MalformedNodeError
from .header import Rendered, raw_header, render_header
from .tags import TagClassifier
from .text import pad_expressions, render_text


class TreeRenderer:
    """Renders nodes with one read-only config."""

    def __init__(self, config: FormatConfig | None = None):
        self.config = config or FormatConfig()
        self.classifier = TagClassifier(
            extra_void=self.config.void_tags,
            extra_verbatim=self.config.verbatim_tags,
        )

    def render_forest(self, nodes: list[Node]) -> str:
        """Render top-level nodes at depth 0 and join them."""
        return "".join(self.render(node).text for node in nodes)

    def render(self, node: Node, depth: int = 0) -> Rendered:
        indent = self.config.indent(depth)

        if isinstance(node, Element):
            return self._render_element(node, depth, indent)
        if isinstance(node, Text):
            return Rendered(self._render_text(node, indent))
        if isinstance(node, Comment):
            return Rendered(self._render_comment(node, indent))
        if isinstance(node, Directive):
            return Rendered(indent + _content(node).strip() + "\n")

        raise MalformedNodeError(f"Cannot render node of type {type(node).__name__}")

    def _render_element(self, element: Element, depth: int, indent: str) -> Rendered:
        if not element.name:
            raise MalformedNodeError(f"Element without a name: {element!r}")

        name = element.name
        void = self.classifier.is_void(name)

        if self._collapses(element, void):
            verbatim = self.classifier.is_verbatim(name)
            text = _content(element.children[0]).strip()
            if self.config.expr_padding and not verbatim:
                text = pad_expressions(text)
            return Rendered(f"{indent}<{raw_header(element)}>{text}</{name}>\n")

        header = render_header(element, indent, self.config, self.classifier)
        if void:
            # Children of void elements are never rendered
            return header

        parts = [header.text]
        for child in element.children:
            parts.append(self.render(child, depth + 1).text)

        if header.ends_line:
            parts.append(f"{indent}</{name}>\n")
        else:
            parts.append(f"</{name}>\n")

        return Rendered("".join(parts))

    def _collapses(self, element: Element, void: bool) -> bool:
        return (
            self.config.short_text_nodes
            and not void
            and len(element.children) == 1
            and isinstance(element.children[0], Text)
        )

    def _render_text(self, node: Text, indent: str) -> str:
        parent = node.parent
        if parent is not None and self.classifier.is_verbatim(parent.name):
            return indent + _content(node).strip() + "\n"
        return render_text(indent, _content(node), self.config)

    def _render_comment(self, node: Comment, indent: str) -> str:
        if self.config.remove_comments:
            return ""
        return f"{indent}<!-- {_content(node).strip()} -->\n"


def _content(node: Text | Comment | Directive | Node) -> str:
    content = getattr(node, "content", None)
    if not isinstance(content, str):
        raise MalformedNodeError(f"{type(node).__name__} without string content")
    return content
