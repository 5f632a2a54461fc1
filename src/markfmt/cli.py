"""
CLI interface for markfmt.

Formats files, glob matches or stdin. Dry run by default: formatted text goes
to stdout (or a diff with --diff); --save writes files back.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import structlog

from .config import FormatConfig, load_config, split_names
from .core import FormatResult, format_paths, format_text, unified_diff
from .errors import ConfigError

logger = structlog.get_logger("markfmt")

DEFAULT_GLOB = "**/*.html"

# CLI flag -> FormatConfig field for the on/off options
TOGGLES = {
    "closing-slash": "closing_slash",
    "expr-padding": "expr_padding",
    "attr-newline": "attr_newline",
    "text-wrap": "text_wrap",
    "empty-tag-same-line": "empty_tag_same_line",
    "remove-comments": "remove_comments",
    "short-text-nodes": "short_text_nodes",
    "reorder-attrs": "reorder_attrs",
}


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="markfmt",
        description="Opinionated formatter for HTML and Angular templates",
    )

    parser.add_argument(
        "files",
        nargs="*",
        help="Files to format",
    )

    parser.add_argument(
        "--glob",
        "-g",
        nargs="?",
        const=DEFAULT_GLOB,
        help=f"Format every file matching a glob under the current directory (default: {DEFAULT_GLOB})",
    )

    parser.add_argument(
        "--stdin",
        "-i",
        action="store_true",
        help="Read one document from stdin",
    )

    parser.add_argument(
        "--save",
        "-S",
        action="store_true",
        help="Write formatted output back to the files (stdin: to stdout)",
    )

    parser.add_argument(
        "--diff",
        "-d",
        action="store_true",
        help="Print a unified diff for every changed document",
    )

    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only report errors",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every processed file",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Config file (TOML); default ./.markfmt.toml then ~/.config/markfmt/config.toml",
    )

    # Formatting overrides; None means "not given", so the config file wins
    parser.add_argument("--tab-length", type=int, dest="indent_width", help="Indent width in spaces")
    parser.add_argument("--line-length", type=int, dest="max_line_width", help="Maximum line width")
    parser.add_argument(
        "--spaces",
        action=argparse.BooleanOptionalAction,
        dest="use_spaces",
        help="Indent with spaces (--no-spaces: tabs)",
    )
    parser.add_argument(
        "--tabs",
        action="store_false",
        dest="use_spaces",
        help=argparse.SUPPRESS,
    )
    for flag, dest in TOGGLES.items():
        parser.add_argument(
            f"--{flag}",
            action=argparse.BooleanOptionalAction,
            dest=dest,
            help=f"Toggle {flag.replace('-', ' ')}",
        )
    parser.add_argument(
        "--wrap-ignored-tags",
        type=split_names,
        dest="verbatim_tags",
        help="Comma separated elements whose text is never reflowed",
    )
    parser.add_argument(
        "--short-tags",
        type=split_names,
        dest="void_tags",
        help="Comma separated extra void (self-closing) elements",
    )

    parser.set_defaults(use_spaces=None)
    return parser.parse_args(args)


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Console logging on stderr through structlog."""
    level = logging.WARNING if quiet else logging.DEBUG if verbose else logging.INFO

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
    ]

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=False),
        foreign_pre_chain=shared_processors,
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def overrides_from_args(parsed: argparse.Namespace) -> dict:
    """FormatConfig values given on the command line."""
    names = ["indent_width", "max_line_width", "use_spaces", "verbatim_tags", "void_tags"]
    names.extend(TOGGLES.values())
    return {name: getattr(parsed, name) for name in names if getattr(parsed, name) is not None}


def expand_glob(pattern: str, base: Path | None = None) -> list[Path]:
    """Files matching pattern relative to base (or absolute), sorted."""
    base = base or Path.cwd()
    anchored = Path(pattern)
    if anchored.is_absolute():
        base = Path(anchored.anchor)
        pattern = str(anchored.relative_to(base))
    return sorted(p for p in base.glob(pattern) if p.is_file())


def report(result: FormatResult, parsed: argparse.Namespace) -> None:
    """Emit output for one document according to the flags."""
    name = str(result.path) if result.path else "<stdin>"
    if not result.ok:
        print(f"Error: {result.error}", file=sys.stderr)
        logger.debug("file_failed", path=name)
        return

    if result.path is None and parsed.save:
        sys.stdout.write(result.formatted)
    elif parsed.diff:
        if not parsed.quiet:
            sys.stdout.write(unified_diff(result))
    elif not parsed.save:
        sys.stdout.write(result.formatted)

    logger.debug("file_formatted", path=name, changed=result.changed, saved=parsed.save)


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parsed = parse_args(args)
    configure_logging(verbose=parsed.verbose, quiet=parsed.quiet)

    try:
        config: FormatConfig = load_config(parsed.config, overrides_from_args(parsed))
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if parsed.stdin:
        logger.debug("reading_stdin")
        result = format_text(sys.stdin.read(), config)
        report(result, parsed)
        return 0 if result.ok else 1

    paths: list[Path] = [Path(f) for f in parsed.files]
    if parsed.glob:
        logger.debug("expanding_glob", pattern=parsed.glob)
        try:
            paths.extend(expand_glob(parsed.glob))
        except (ValueError, NotImplementedError) as e:
            print(f"Error: Invalid glob pattern {parsed.glob!r}: {e}", file=sys.stderr)
            return 1

    if not paths:
        print("Error: No file path specified (use FILE, --glob or --stdin)", file=sys.stderr)
        return 1

    results = format_paths(paths, config, save=parsed.save)
    for result in results:
        report(result, parsed)

    failed = sum(1 for r in results if not r.ok)
    logger.info(
        "run_finished",
        files=len(results),
        changed=sum(1 for r in results if r.changed),
        failed=failed,
    )
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
