"""
Checker configuration.

Settings come from, in increasing priority:
    defaults  <  config file  <  command-line flags

A config file is TOML or JSON. A `pyproject.toml` is read from its
`[tool.frontdoc]` table.
"""
from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Tuple


class ConfigError(Exception):
    """Raised when a configuration file is missing or invalid."""
    pass


@dataclass(frozen=True)
class CheckConfig:
    """
    Options controlling which findings the checker produces.

    Properties:
        required_fields: Front-matter keys that must be present
        optional_fields: Extra keys tolerated without a finding
        allow_extra_fields: Tolerate any other key as well
        allowed_schemes: URL schemes accepted for absolute links
        allow_relative_links: Accept paths such as `../other-post/`
        require_code_language: Warn on fenced blocks without a language tag
        allowed_languages: If non-empty, warn on any other language tag
        strict: Treat warnings as failures
    """

    required_fields: Tuple[str, ...] = ("title", "date")
    optional_fields: Tuple[str, ...] = ()
    allow_extra_fields: bool = False
    allowed_schemes: Tuple[str, ...] = ("http", "https", "mailto")
    allow_relative_links: bool = True
    require_code_language: bool = False
    allowed_languages: Tuple[str, ...] = ()
    strict: bool = False

    def with_overrides(self, **overrides: Any) -> CheckConfig:
        """Copy with the given options replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


_FIELD_TYPES = {f.name: f.type for f in fields(CheckConfig)}


def config_from_dict(data: Dict[str, Any]) -> CheckConfig:
    """Build a CheckConfig from a flat mapping, validating keys and types."""
    unknown = sorted(set(data) - set(_FIELD_TYPES))
    if unknown:
        raise ConfigError(f"Unknown config keys: {unknown}")

    values: Dict[str, Any] = {}
    for key, value in data.items():
        if _FIELD_TYPES[key] == "bool":
            if not isinstance(value, bool):
                raise ConfigError(f"Config key '{key}' must be true or false, got {value!r}")
            values[key] = value
        else:
            if isinstance(value, str) or not isinstance(value, (list, tuple)):
                raise ConfigError(f"Config key '{key}' must be a list of strings, got {value!r}")
            values[key] = tuple(str(v) for v in value)
    if "allowed_schemes" in values:
        values["allowed_schemes"] = tuple(s.lower() for s in values["allowed_schemes"])
    return CheckConfig(**values)


def load_config(path: str | Path | None) -> CheckConfig:
    """
    Load a CheckConfig from a TOML or JSON file.

    Args:
        path: Config file path; None returns the defaults

    Raises:
        ConfigError: If the file is missing, unreadable or has unknown keys
    """
    if not path:
        return CheckConfig()
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {p}")

    suffix = p.suffix.lower()
    try:
        if suffix == ".toml":
            data = tomllib.loads(p.read_text(encoding="utf-8"))
        elif suffix == ".json":
            data = json.loads(p.read_text(encoding="utf-8"))
        else:
            raise ConfigError("Unsupported config format (use TOML or JSON)")
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Invalid config file {p}: {e}")

    if p.name == "pyproject.toml":
        data = data.get("tool", {}).get("frontdoc", {})
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {p} must contain a table of options")
    return config_from_dict(data)
