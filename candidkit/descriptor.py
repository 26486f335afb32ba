"""Parsing helpers for textual Candid type descriptors."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .constants import CONSTRUCTORS
from .util import find_top_level, is_digits, is_ident, matching_close, split_top_level, unquote


_HEAD_RE = re.compile(r"^\s*([A-Za-z_][A-Za-z0-9_]*)")


@dataclass(frozen=True)
class RecordField:
    name: str
    type: str
    positional: bool = False


@dataclass(frozen=True)
class VariantCase:
    name: str
    type: Optional[str] = None

    @property
    def is_unit(self) -> bool:
        return self.type is None or not self.type.strip()


def type_head(type_str: str) -> str:
    """Return the constructor keyword of a descriptor, or the bare name.

    Keywords are matched case-insensitively; other names are returned as-is.
    """
    m = _HEAD_RE.match(type_str)
    if not m:
        return type_str.strip()
    word = m.group(1)
    if word.lower() in CONSTRUCTORS:
        return word.lower()
    return type_str.strip()


def base_name(type_str: str) -> str:
    return type_str.strip().lower()


def inner_type(type_str: str) -> str:
    """Inner type of ``opt T`` / ``vec T`` (also ``opt<T>``)."""
    s = type_str.strip()
    m = _HEAD_RE.match(s)
    rest = s[m.end():].strip() if m else s
    if rest.startswith("<"):
        close = matching_close(rest, 0)
        if close > 0:
            return rest[1:close].strip()
    return rest


def type_body(type_str: str) -> Optional[str]:
    """Text between the outer braces of a record/variant, or None."""
    s = type_str.strip()
    lbrace = find_top_level(s, "{")
    if lbrace < 0:
        return None
    rbrace = matching_close(s, lbrace)
    if rbrace < 0:
        return None
    return s[lbrace + 1:rbrace]


def _split_entry(entry: str) -> Tuple[Optional[str], str]:
    idx = find_top_level(entry, ":")
    if idx <= 0:
        return None, entry.strip()
    return unquote(entry[:idx]), entry[idx + 1:].strip()


def parse_record_fields(type_str: str) -> List[RecordField]:
    body = type_body(type_str)
    if body is None:
        return []
    fields: List[RecordField] = []
    for index, entry in enumerate(split_top_level(body, ";")):
        name, ty = _split_entry(entry)
        if name is None:
            fields.append(RecordField(name=str(index), type=ty, positional=True))
        else:
            fields.append(RecordField(name=name, type=ty))
    return fields


def parse_variant_cases(type_str: str) -> List[VariantCase]:
    body = type_body(type_str)
    if body is None:
        return []
    cases: List[VariantCase] = []
    for entry in split_top_level(body, ";"):
        name, ty = _split_entry(entry)
        if name is None:
            cases.append(VariantCase(name=unquote(ty)))
        else:
            cases.append(VariantCase(name=name, type=ty or None))
    return cases


def render_label(name: str) -> str:
    if is_ident(name) or is_digits(name):
        return name
    return '"' + name.replace('"', '\\"') + '"'


def render_record(fields: List[RecordField]) -> str:
    if not fields:
        return "record {}"
    parts = []
    for f in fields:
        if f.positional:
            parts.append(f.type)
        else:
            parts.append(f"{render_label(f.name)} : {f.type}")
    return "record { " + "; ".join(parts) + " }"


def render_variant(cases: List[VariantCase]) -> str:
    if not cases:
        return "variant {}"
    parts = []
    for c in cases:
        if c.is_unit:
            parts.append(render_label(c.name))
        else:
            parts.append(f"{render_label(c.name)} : {c.type}")
    return "variant { " + "; ".join(parts) + " }"
