"""
DOM - Document Object Model for markfmt

Parsed markup is a forest of Nodes. Elements own their children; every node
points back at its containing element through a weak reference so the renderer
can ask about ancestor context without creating reference cycles.

Key invariant: rendering reads this tree, it never mutates it.
"""

from __future__ import annotations

import weakref
from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(eq=False)
class Node:
    """Base for every node in the markup tree."""
    _parent: weakref.ReferenceType[Element] | None = field(
        default=None, init=False, repr=False
    )

    @property
    def parent(self) -> Element | None:
        """Containing element, or None for top-level nodes."""
        if self._parent is None:
            return None
        return self._parent()


@dataclass(eq=False)
class Element(Node):
    """A tag with ordered attributes and children."""
    name: str = ""
    attributes: dict[str, str] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)

    def __post_init__(self):
        for child in self.children:
            child._parent = weakref.ref(self)

    def add_child(self, child: Node) -> Node:
        """Add a child node and return it for chaining."""
        child._parent = weakref.ref(self)
        self.children.append(child)
        return child

    def depth_first(self) -> Iterator[Node]:
        """Traverse subtree depth-first, yielding self then descendants."""
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.depth_first()
            else:
                yield child


@dataclass(eq=False)
class Text(Node):
    """Character data between tags."""
    content: str = ""


@dataclass(eq=False)
class Comment(Node):
    """An HTML comment, content without the <!-- --> delimiters."""
    content: str = ""


@dataclass(eq=False)
class Directive(Node):
    """Doctype, CDATA or processing instruction, kept verbatim with delimiters."""
    content: str = ""
