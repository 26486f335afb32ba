"""Commands API — argparse-free interface to candidkit for the TUI.

Every function accepts explicit arguments and returns a CommandResult.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..args import json_to_candid_args
from ..config import load_config
from ..example import build_json_example
from ..interface import ParsedInterface, load_candid, parse_candid_interface
from ..resolver import CandidTypeResolver
from ..validate import ValidationError, validate_json_args


@dataclass
class CommandResult:
    """Universal return type for all TUI commands."""

    success: bool
    message: str
    data: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)


def cmd_load(candid_path: Path, config: str | None = None) -> CommandResult:
    try:
        settings = load_config(config)
        source = load_candid(candid_path)
        iface = parse_candid_interface(source)
    except (FileNotFoundError, ValidationError, ValueError) as exc:
        return CommandResult(False, str(exc), errors=[str(exc)])
    return CommandResult(
        True,
        f"Loaded {len(iface.methods)} methods from {candid_path.name}",
        data={"source": source, "interface": iface, "settings": settings},
    )


def cmd_select_method(
    source: str,
    iface: ParsedInterface,
    name: str,
    settings: dict[str, dict[str, Any]],
) -> CommandResult:
    try:
        method = iface.method(name)
    except KeyError as exc:
        return CommandResult(False, str(exc.args[0]), errors=[str(exc.args[0])])
    resolver = CandidTypeResolver(
        source,
        max_depth=settings["resolver"]["max_depth"],
        max_length=settings["resolver"]["max_length"],
    )
    resolved = resolver.resolve_arg_types(method.args)
    example_cfg = settings["example"]
    example = build_json_example(
        resolved,
        text=example_cfg["text"],
        principal=example_cfg["principal"],
        indent=example_cfg["indent"],
    )
    return CommandResult(
        True,
        f"{method.name} : {method.signature}",
        data={"method": method, "resolved": resolved, "example": example},
    )


def cmd_validate(resolved: list[str], json_text: str) -> CommandResult:
    result = validate_json_args(resolved, json_text)
    if result.ok:
        return CommandResult(True, "Arguments valid")
    return CommandResult(False, f"{len(result.errors)} problem(s)", errors=list(result.errors))


def cmd_encode(resolved: list[str], json_text: str) -> CommandResult:
    try:
        encoded = json_to_candid_args(resolved, json_text)
    except (ValidationError, ValueError) as exc:
        return CommandResult(False, "Encoding failed", errors=str(exc).splitlines())
    return CommandResult(True, encoded, data={"candid": encoded})
