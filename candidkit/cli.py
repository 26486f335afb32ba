"""CLI entrypoint for candidkit."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import List, Tuple

from .args import json_to_candid_args
from .config import config_path, load_config, set_config_value
from .example import build_json_example
from .interface import MethodInfo, load_candid, parse_candid_interface
from .resolver import CandidTypeResolver
from .validate import ValidationError, validate_json_args


def _load_method(args: argparse.Namespace) -> Tuple[MethodInfo, List[str]]:
    settings = load_config(args.config)
    source = load_candid(args.candid)
    iface = parse_candid_interface(source)
    try:
        method = iface.method(args.method)
    except KeyError:
        known = ", ".join(iface.method_names()) or "none"
        raise ValueError(f"Unknown method: {args.method} (available: {known})") from None
    resolver = CandidTypeResolver(
        source,
        max_depth=settings["resolver"]["max_depth"],
        max_length=settings["resolver"]["max_length"],
    )
    return method, resolver.resolve_arg_types(method.args)


def _read_args_text(args: argparse.Namespace) -> str:
    if args.args_file:
        if args.args_file == "-":
            return sys.stdin.read()
        path = Path(args.args_file)
        if not path.exists():
            raise FileNotFoundError(f"Arguments file not found: {path}")
        return path.read_text()
    return args.args or ""


def _cmd_methods(args: argparse.Namespace) -> int:
    iface = parse_candid_interface(load_candid(args.candid))
    if args.json:
        print(json.dumps([m.to_dict() for m in iface.methods], indent=2))
        return 0
    if not iface.methods:
        print("No methods found")
        return 0
    width = max(len(m.name) for m in iface.methods)
    for m in iface.methods:
        print(f"{m.name.ljust(width)}  {m.kind.value:<15} {m.signature}")
    return 0


def _cmd_resolve(args: argparse.Namespace) -> int:
    _, resolved = _load_method(args)
    if args.json:
        print(json.dumps(resolved, indent=2))
        return 0
    if not resolved:
        print("(no arguments)")
    for i, ty in enumerate(resolved):
        print(f"arg{i}: {ty}")
    return 0


def _cmd_example(args: argparse.Namespace) -> int:
    settings = load_config(args.config)["example"]
    _, resolved = _load_method(args)
    print(
        build_json_example(
            resolved,
            text=settings["text"],
            principal=settings["principal"],
            indent=settings["indent"],
        )
    )
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    _, resolved = _load_method(args)
    result = validate_json_args(resolved, _read_args_text(args))
    if result.errors:
        if args.json:
            for msg in result.errors:
                print(f"ERROR: {msg}")
        else:
            print("Argument validation failed:\n")
            for msg in result.errors:
                print(f"- {msg}")
        return 1
    print("Arguments valid")
    return 0


def _cmd_encode(args: argparse.Namespace) -> int:
    _, resolved = _load_method(args)
    print(json_to_candid_args(resolved, _read_args_text(args)))
    return 0


def _cmd_config_show(args: argparse.Namespace) -> int:
    settings = load_config(args.config)
    print(f"# {config_path(args.config)}")
    for section, values in settings.items():
        print(f"[{section}]")
        for key, value in values.items():
            print(f"{key} = {json.dumps(value)}")
    return 0


def _cmd_config_set(args: argparse.Namespace) -> int:
    set_config_value(args.key, args.value, args.config)
    print(f"Set {args.key} = {args.value}")
    return 0


def _cmd_tui(args: argparse.Namespace) -> int:
    from .tui import launch_tui

    return launch_tui(Path(args.candid), config=args.config)


def _add_method_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("candid", help="Path to a .did file (- for stdin)")
    p.add_argument("method", help="Service method name")


def _add_json_input(p: argparse.ArgumentParser) -> None:
    group = p.add_mutually_exclusive_group()
    group.add_argument("--args", help="JSON arguments text")
    group.add_argument("--args-file", help="Read JSON arguments from a file (- for stdin)")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog=os.path.basename(sys.argv[0]))
    parser.add_argument("--config", help="Settings file (default: ~/.candidkit/config.toml)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_methods = sub.add_parser("methods", help="List service methods")
    p_methods.add_argument("candid", help="Path to a .did file (- for stdin)")
    p_methods.add_argument("--json", action="store_true", help="Emit methods as JSON")
    p_methods.set_defaults(func=_cmd_methods)

    p_resolve = sub.add_parser("resolve", help="Show resolved argument types of a method")
    _add_method_args(p_resolve)
    p_resolve.add_argument("--json", action="store_true", help="Emit types as a JSON list")
    p_resolve.set_defaults(func=_cmd_resolve)

    p_example = sub.add_parser("example", help="Print example JSON arguments for a method")
    _add_method_args(p_example)
    p_example.set_defaults(func=_cmd_example)

    p_validate = sub.add_parser("validate", help="Validate JSON arguments for a method")
    _add_method_args(p_validate)
    _add_json_input(p_validate)
    p_validate.add_argument("--json", action="store_true", help="Emit errors as lines")
    p_validate.set_defaults(func=_cmd_validate)

    p_encode = sub.add_parser("encode", help="Convert JSON arguments to Candid text")
    _add_method_args(p_encode)
    _add_json_input(p_encode)
    p_encode.set_defaults(func=_cmd_encode)

    p_config = sub.add_parser("config", help="Show or change settings")
    p_config_sub = p_config.add_subparsers(dest="config_cmd", required=True)
    p_config_show = p_config_sub.add_parser("show", help="Print effective settings")
    p_config_show.set_defaults(func=_cmd_config_show)
    p_config_set = p_config_sub.add_parser("set", help="Set a value, e.g. example.indent 4")
    p_config_set.add_argument("key", help="section.key")
    p_config_set.add_argument("value", help="New value")
    p_config_set.set_defaults(func=_cmd_config_set)

    p_tui = sub.add_parser("tui", help="Interactive argument editor")
    p_tui.add_argument("candid", help="Path to a .did file")
    p_tui.set_defaults(func=_cmd_tui)

    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except FileNotFoundError as exc:
        print(str(exc))
        return 1
    except (ValidationError, ValueError) as exc:
        print(str(exc))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
