"""
Configuration for markfmt.

All formatting options in one place. Loaded from:
1. Defaults (this file)
2. Config file (--config, ./.markfmt.toml or ~/.config/markfmt/config.toml)
3. Environment variables (MARKFMT_*) override file
4. CLI flags override everything

The resulting FormatConfig is frozen: one formatting run reads it, nothing
writes it.
"""

from __future__ import annotations

import contextlib
import os
import tomllib  # stdlib in 3.11+
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import structlog

from .errors import ConfigError

logger = structlog.get_logger(__name__)

PROJECT_CONFIG_NAME = ".markfmt.toml"


@dataclass(frozen=True)
class FormatConfig:
    """Options for one formatting run."""
    indent_width: int = 4
    use_spaces: bool = True  # False = one tab per level
    max_line_width: int = 100
    closing_slash: bool = False  # <img /> rather than <img>
    expr_padding: bool = True  # {{x}} -> {{ x }}
    attr_newline: bool = True  # one attribute per line when the tag is too wide
    text_wrap: bool = True
    verbatim_tags: frozenset[str] = field(default_factory=frozenset)  # on top of script, style
    void_tags: frozenset[str] = field(default_factory=frozenset)  # on top of the HTML void set
    empty_tag_same_line: bool = True
    remove_comments: bool = False
    short_text_nodes: bool = True
    reorder_attrs: bool = True

    @property
    def indent_unit(self) -> str:
        return " " * self.indent_width if self.use_spaces else "\t"

    def indent(self, depth: int) -> str:
        """Indentation string for a nesting depth."""
        return self.indent_unit * depth


_FIELD_TYPES: dict[str, str] = {f.name: f.type for f in fields(FormatConfig)}


def get_config_path() -> Path:
    """Get user config file path, respecting XDG."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "markfmt" / "config.toml"
    return Path.home() / ".config" / "markfmt" / "config.toml"


def find_config_file(cwd: Path | None = None) -> Path | None:
    """First existing config file: project file in cwd, then the user file."""
    project = (cwd or Path.cwd()) / PROJECT_CONFIG_NAME
    if project.is_file():
        return project
    user = get_config_path()
    if user.is_file():
        return user
    return None


def load_config(
    path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> FormatConfig:
    """
    Build the config for a run.

    An explicit path must exist and parse; a discovered file that fails to
    parse is skipped with a warning.
    """
    config = FormatConfig()

    if path is not None:
        config = _apply_mapping(config, _read_toml(Path(path)))
    else:
        found = find_config_file()
        if found is not None:
            try:
                data = _read_toml(found)
            except ConfigError as e:
                logger.warning("config_skipped", path=str(found), error=str(e))
            else:
                config = _apply_mapping(config, data)

    config = _apply_env(config)

    if overrides:
        config = _apply_mapping(config, {k: v for k, v in overrides.items() if v is not None})

    return config


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    # Options may live at the top level or under a [format] table
    section = data.get("format")
    if isinstance(section, dict):
        merged = {k: v for k, v in data.items() if k != "format"}
        merged.update(section)
        return merged
    return data


def _apply_mapping(config: FormatConfig, data: Mapping[str, Any]) -> FormatConfig:
    """Apply validated values onto config, ignoring unknown keys."""
    changes: dict[str, Any] = {}
    for key, value in data.items():
        kind = _FIELD_TYPES.get(key)
        if kind is None:
            logger.debug("config_key_ignored", key=key)
            continue
        changes[key] = _coerce(key, kind, value)
    return replace(config, **changes)


def _coerce(key: str, kind: str, value: Any) -> Any:
    if kind == "bool":
        if not isinstance(value, bool):
            raise ConfigError(f"{key} must be true or false, got {value!r}")
        return value

    if kind == "int":
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{key} must be an integer, got {value!r}")
        minimum = 0 if key == "indent_width" else 1
        if value < minimum:
            raise ConfigError(f"{key} must be >= {minimum}, got {value}")
        return value

    # frozenset[str]
    if isinstance(value, str):
        return frozenset(split_names(value))
    if isinstance(value, Iterable) and all(isinstance(v, str) for v in value):
        return frozenset(v.strip().lower() for v in value if v.strip())
    raise ConfigError(f"{key} must be a list of element names, got {value!r}")


def split_names(value: str) -> list[str]:
    """Split a comma separated list of element names."""
    return [part.strip().lower() for part in value.split(",") if part.strip()]


def _apply_env(config: FormatConfig) -> FormatConfig:
    """Apply MARKFMT_<FIELD> environment variable overrides."""
    changes: dict[str, Any] = {}
    for name, kind in _FIELD_TYPES.items():
        val = os.environ.get(f"MARKFMT_{name.upper()}")
        if val is None:
            continue
        with contextlib.suppress(ValueError):
            if kind == "bool":
                # "true", "1", "yes" -> True
                changes[name] = val.lower() in ("true", "1", "yes")
            elif kind == "int":
                number = int(val)
                if number >= (0 if name == "indent_width" else 1):
                    changes[name] = number
            else:
                changes[name] = frozenset(split_names(val))
    return replace(config, **changes)
