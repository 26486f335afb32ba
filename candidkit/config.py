"""User settings — persisted at ~/.candidkit/config.toml."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

import tomli_w

from .constants import (
    DEFAULT_EXAMPLE_PRINCIPAL,
    DEFAULT_EXAMPLE_TEXT,
    DEFAULT_JSON_INDENT,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_LENGTH,
)
from .validate import ValidationError, raise_on_errors

CONFIG_ENV = "CANDIDKIT_CONFIG"
CONFIG_DIR = Path.home() / ".candidkit"
CONFIG_PATH = CONFIG_DIR / "config.toml"

_DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "resolver": {
        "max_depth": DEFAULT_MAX_DEPTH,
        "max_length": DEFAULT_MAX_LENGTH,
    },
    "example": {
        "text": DEFAULT_EXAMPLE_TEXT,
        "principal": DEFAULT_EXAMPLE_PRINCIPAL,
        "indent": DEFAULT_JSON_INDENT,
    },
}


def _fresh_default_config() -> Dict[str, Dict[str, Any]]:
    return {section: dict(values) for section, values in _DEFAULT_CONFIG.items()}


def config_path(path: str | Path | None = None) -> Path:
    if path is not None:
        return Path(path).expanduser()
    env = os.environ.get(CONFIG_ENV)
    if env:
        return Path(env).expanduser()
    return CONFIG_PATH


def validate_config(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []

    def err(msg: str) -> None:
        errors.append(msg)

    for section in data.keys():
        if section not in _DEFAULT_CONFIG:
            err(f"Unknown config section: [{section}]")

    resolver = data.get("resolver", {})
    if not isinstance(resolver, dict):
        err("resolver must be a table")
    else:
        for key in resolver.keys():
            if key not in _DEFAULT_CONFIG["resolver"]:
                err(f"Unknown resolver key: {key}")
        for key in ("max_depth", "max_length"):
            value = resolver.get(key, _DEFAULT_CONFIG["resolver"][key])
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                err(f"resolver.{key} must be a positive integer")

    example = data.get("example", {})
    if not isinstance(example, dict):
        err("example must be a table")
    else:
        for key in example.keys():
            if key not in _DEFAULT_CONFIG["example"]:
                err(f"Unknown example key: {key}")
        for key in ("text", "principal"):
            if key in example and not isinstance(example[key], str):
                err(f"example.{key} must be a string")
        indent = example.get("indent", DEFAULT_JSON_INDENT)
        if not isinstance(indent, int) or isinstance(indent, bool) or indent < 0:
            err("example.indent must be a non-negative integer")

    return errors


def load_config(path: str | Path | None = None) -> Dict[str, Dict[str, Any]]:
    """Load settings merged over the defaults.

    A missing file yields the defaults. Invalid settings raise ValidationError.
    """
    merged = _fresh_default_config()
    target = config_path(path)
    if not target.exists():
        return merged
    data = tomllib.loads(target.read_text())
    raise_on_errors(validate_config(data))
    for section, values in data.items():
        merged[section].update(values)
    return merged


def save_config(data: Dict[str, Any], path: str | Path | None = None) -> Path:
    raise_on_errors(validate_config(data))
    target = config_path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(tomli_w.dumps(data).encode())
    return target


def set_config_value(key: str, raw: str, path: str | Path | None = None) -> Dict[str, Dict[str, Any]]:
    """Set ``section.key`` from a command-line string and save."""
    section, _, name = key.partition(".")
    if section not in _DEFAULT_CONFIG or name not in _DEFAULT_CONFIG[section]:
        raise ValidationError(f"Unknown config key: {key}")
    data = load_config(path)
    default = _DEFAULT_CONFIG[section][name]
    if isinstance(default, int):
        try:
            value: Any = int(raw)
        except ValueError as exc:
            raise ValidationError(f"{key} must be an integer") from exc
    else:
        value = raw
    data[section][name] = value
    save_config(data, path)
    return data
