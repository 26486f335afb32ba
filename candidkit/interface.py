"""Service method extraction from Candid interface source."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .constants import FUNC_MODES
from .resolver import extract_aliases
from .util import find_top_level, matching_close, split_top_level, strip_comments, unquote


_SERVICE_RE = re.compile(r"^service(?![A-Za-z0-9_'])")


class CandidParseError(ValueError):
    """Raised when Candid source has no usable service definition."""


class MethodKind(str, Enum):
    QUERY = "query"
    UPDATE = "update"
    COMPOSITE_QUERY = "composite_query"


@dataclass(frozen=True)
class MethodInfo:
    name: str
    kind: MethodKind
    args: List[str] = field(default_factory=list)
    rets: List[str] = field(default_factory=list)
    oneway: bool = False

    @property
    def signature(self) -> str:
        modes = f" {self.kind.value}" if self.kind != MethodKind.UPDATE else ""
        if self.oneway:
            modes += " oneway"
        return f"({', '.join(self.args)}) -> ({', '.join(self.rets)}){modes}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "args": list(self.args),
            "rets": list(self.rets),
            "oneway": self.oneway,
        }


@dataclass
class ParsedInterface:
    methods: List[MethodInfo] = field(default_factory=list)
    aliases: Dict[str, str] = field(default_factory=dict)

    def method(self, name: str) -> MethodInfo:
        for m in self.methods:
            if m.name == name:
                return m
        raise KeyError(f"Unknown method: {name}")

    def method_names(self) -> List[str]:
        return [m.name for m in self.methods]


def _parse_arg_list(text: str) -> List[str]:
    """Types of a parenthesised argument list, argument names dropped."""
    s = text.strip()
    if s.startswith("("):
        close = matching_close(s, 0)
        s = s[1:close] if close > 0 else s[1:]
    out: List[str] = []
    for part in split_top_level(s, ","):
        idx = find_top_level(part, ":")
        out.append(part[idx + 1:].strip() if idx > 0 else part)
    return out


def _parse_func(sig: str) -> Optional[Tuple[List[str], List[str], List[str]]]:
    """Split ``(args) -> (rets) modes`` into its three parts."""
    s = sig.strip()
    if s.startswith("func"):
        s = s[4:].strip()
    if not s.startswith("("):
        return None
    args_close = matching_close(s, 0)
    if args_close < 0:
        return None
    args = _parse_arg_list(s[: args_close + 1])
    rest = s[args_close + 1:].strip()
    if not rest.startswith("->"):
        return None
    rest = rest[2:].strip()
    if rest.startswith("("):
        rets_close = matching_close(rest, 0)
        if rets_close < 0:
            return None
        rets = _parse_arg_list(rest[: rets_close + 1])
        tail = rest[rets_close + 1:]
    else:
        # A bare return type is not valid Candid but some tools print it.
        bits = rest.split(None, 1)
        rets = [bits[0]] if bits else []
        tail = bits[1] if len(bits) > 1 else ""
    modes = [m for m in tail.split() if m in FUNC_MODES]
    return args, rets, modes


def _service_decl(text: str) -> str:
    for stmt in split_top_level(text, ";"):
        if _SERVICE_RE.match(stmt):
            return stmt
    raise CandidParseError("No service definition found in Candid source")


def _block_body(text: str) -> str:
    close = matching_close(text, 0)
    if close < 0:
        raise CandidParseError("Unterminated service block")
    return text[1:close]


def _service_body(text: str, aliases: Dict[str, str]) -> str:
    decl = _service_decl(text)
    colon = find_top_level(decl, ":")
    if colon < 0:
        raise CandidParseError("Malformed service definition")
    rest = decl[colon + 1:].strip()
    if rest.startswith("("):
        # Service with init args: `service : (init) -> { ... }`.
        close = matching_close(rest, 0)
        rest = rest[close + 1:].strip() if close > 0 else rest
        if rest.startswith("->"):
            rest = rest[2:].strip()
    if rest.startswith("{"):
        return _block_body(rest)
    # `service : Alias`, possibly through several aliases.
    name = rest
    seen = set()
    while name in aliases and name not in seen:
        seen.add(name)
        target = aliases[name].strip()
        if _SERVICE_RE.match(target):
            target = target[len("service"):].strip().lstrip(":").strip()
        if target.startswith("{"):
            return _block_body(target)
        name = target
    raise CandidParseError(f"Cannot resolve service type: {name}")


def _method_kind(modes: List[str]) -> MethodKind:
    if "composite_query" in modes:
        return MethodKind.COMPOSITE_QUERY
    if "query" in modes:
        return MethodKind.QUERY
    return MethodKind.UPDATE


def parse_candid_interface(source: str) -> ParsedInterface:
    text = strip_comments(source)
    aliases = extract_aliases(text)
    body = _service_body(text, aliases)
    methods: List[MethodInfo] = []
    for entry in split_top_level(body, ";"):
        idx = find_top_level(entry, ":")
        if idx <= 0:
            continue
        name = unquote(entry[:idx])
        sig = entry[idx + 1:].strip()
        seen = set()
        while sig in aliases and sig not in seen:
            seen.add(sig)
            sig = aliases[sig].strip()
        parsed = _parse_func(sig)
        if parsed is None:
            continue
        args, rets, modes = parsed
        methods.append(
            MethodInfo(
                name=name,
                kind=_method_kind(modes),
                args=args,
                rets=rets,
                oneway="oneway" in modes,
            )
        )
    return ParsedInterface(methods=methods, aliases=aliases)


def load_candid(path: str | Path) -> str:
    if str(path) == "-":
        return sys.stdin.read()
    candid_path = Path(path)
    if not candid_path.exists():
        raise FileNotFoundError(f"Candid file not found: {candid_path}")
    return candid_path.read_text()
