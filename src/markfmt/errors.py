"""
Shared error types for markfmt.

MarkfmtError is the base of every known failure; the CLI reports these per
document and keeps going.
"""

from __future__ import annotations


class MarkfmtError(Exception):
    """Base exception for known formatting errors."""


class ParseError(MarkfmtError):
    """Raised when the markup parser rejects a document."""


class MalformedNodeError(MarkfmtError):
    """Raised when a node lacks what its kind requires."""


class ConfigError(MarkfmtError):
    """Raised when configuration cannot be read or holds an invalid value."""
