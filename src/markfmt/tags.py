"""Element name classification: void and verbatim elements."""

from __future__ import annotations

from collections.abc import Iterable

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "command", "embed", "hr", "img", "input",
    "keygen", "link", "meta", "param", "source", "track", "wbr",
})

# Text inside these is never reflowed or padded
VERBATIM_ELEMENTS = frozenset({"script", "style"})


class TagClassifier:
    """Answers void/verbatim questions for element names."""

    def __init__(self, extra_void: Iterable[str] = (), extra_verbatim: Iterable[str] = ()):
        self._void = VOID_ELEMENTS | {name.lower() for name in extra_void}
        self._verbatim = VERBATIM_ELEMENTS | {name.lower() for name in extra_verbatim}

    def is_void(self, name: str) -> bool:
        """Void elements never get a closing tag."""
        return name.lower() in self._void

    def is_verbatim(self, name: str) -> bool:
        return name.lower() in self._verbatim

    @property
    def void_names(self) -> frozenset[str]:
        return frozenset(self._void)
