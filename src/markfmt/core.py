"""
Document pipeline for markfmt.

normalize -> parse -> render for one document, plus the per-file wrapper the
CLI fans out over. Documents are independent: a failure in one file is
recorded in its FormatResult and never stops the others.
"""

from __future__ import annotations

import difflib
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from .config import FormatConfig
from .errors import MarkfmtError
from .parse import normalize_source, parse_markup
from .render import TreeRenderer


def format_markup(content: str, config: FormatConfig | None = None) -> str:
    """Format one markup document. Parse and node errors propagate."""
    config = config or FormatConfig()
    nodes = parse_markup(normalize_source(content), config)
    return TreeRenderer(config).render_forest(nodes)


@dataclass
class FormatResult:
    """Outcome of formatting one document."""
    path: Path | None
    original: str
    formatted: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def changed(self) -> bool:
        return self.formatted is not None and self.formatted != self.original


def format_text(content: str, config: FormatConfig, path: Path | None = None) -> FormatResult:
    """Format content, capturing known errors in the result."""
    try:
        formatted = format_markup(content, config)
    except MarkfmtError as e:
        return FormatResult(path=path, original=content, error=str(e))
    return FormatResult(path=path, original=content, formatted=formatted)


def format_path(path: str | Path, config: FormatConfig, save: bool = False) -> FormatResult:
    """Read, format and optionally write back one file."""
    path = Path(path)
    try:
        original = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return FormatResult(path=path, original="", error=f"Cannot read {path}: {e}")

    result = format_text(original, config, path)
    if save and result.changed:
        try:
            path.write_text(result.formatted, encoding="utf-8")
        except OSError as e:
            result.error = f"Cannot write {path}: {e}"
    return result


def format_paths(
    paths: Sequence[str | Path],
    config: FormatConfig,
    save: bool = False,
    workers: int | None = None,
) -> list[FormatResult]:
    """Format many files concurrently; results keep the input order."""
    if not paths:
        return []
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(format_path, p, config, save) for p in paths]
        return [future.result() for future in futures]


def unified_diff(result: FormatResult) -> str:
    """Unified diff between original and formatted text ("" if unchanged)."""
    if not result.changed:
        return ""
    name = str(result.path) if result.path else "<stdin>"
    lines = difflib.unified_diff(
        result.original.splitlines(keepends=True),
        result.formatted.splitlines(keepends=True),
        fromfile=name,
        tofile=f"{name} (formatted)",
    )
    return "".join(lines)
