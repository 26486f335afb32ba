"""Candid type alias resolution for method argument lists."""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Tuple

from .constants import DEFAULT_MAX_DEPTH, DEFAULT_MAX_LENGTH, PRIMITIVE_TYPES
from .descriptor import (
    RecordField,
    VariantCase,
    inner_type,
    parse_record_fields,
    parse_variant_cases,
    render_record,
    render_variant,
    type_head,
)
from .util import is_ident_char, strip_comments


def extract_aliases(src: str) -> Dict[str, str]:
    """Collect ``type Name = Definition;`` bindings from Candid source.

    The definition runs to the first ``;`` outside of brackets. Anything that
    does not look like a simple binding is skipped.
    """
    text = strip_comments(src)
    out: Dict[str, str] = {}
    n = len(text)
    i = 0
    while True:
        pos = text.find("type", i)
        if pos < 0:
            break
        j = pos + 4
        if (pos > 0 and is_ident_char(text[pos - 1])) or (j < n and is_ident_char(text[j])):
            i = j
            continue
        while j < n and text[j].isspace():
            j += 1
        start_name = j
        while j < n and is_ident_char(text[j]):
            j += 1
        if j == start_name:
            i = j
            continue
        name = text[start_name:j]
        while j < n and text[j].isspace():
            j += 1
        if j >= n or text[j] != "=":
            i = j
            continue
        j += 1
        start_expr = j
        depth = 0
        while j < n:
            ch = text[j]
            if ch in "{(<":
                depth += 1
            elif ch in "})" or (ch == ">" and text[j - 1] != "-"):
                depth -= 1
            elif ch == ";" and depth == 0:
                break
            j += 1
        if j >= n:
            break
        expr = text[start_expr:j].strip()
        if expr:
            out[name] = expr
        i = j + 1
    return out


class CandidTypeResolver:
    """Expands alias references in argument types of a Candid interface."""

    def __init__(
        self,
        candid_source: str,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_length: int = DEFAULT_MAX_LENGTH,
    ) -> None:
        self._aliases = extract_aliases(candid_source or "")
        self._max_depth = max_depth
        self._max_length = max_length
        # (alias, aliases being expanded, depth) -> expansion
        self._memo: Dict[Tuple[str, FrozenSet[str], int], str] = {}

    @property
    def aliases(self) -> Dict[str, str]:
        return dict(self._aliases)

    def resolve_arg_types(self, args: List[str]) -> List[str]:
        return [self.resolve_type(a) for a in args]

    def resolve_type(self, type_str: str) -> str:
        """Resolve one descriptor.

        The input is returned unchanged when it references no alias.
        """
        expanded: List[str] = []
        resolved = self._resolve(type_str, frozenset(), 0, expanded)
        if not expanded:
            return type_str
        return resolved

    def _resolve(self, type_str: str, expanding: FrozenSet[str], depth: int, expanded: List[str]) -> str:
        t = type_str.strip()
        if depth > self._max_depth:
            return t
        head = type_head(t)
        if head in ("opt", "vec"):
            return f"{head} {self._resolve(inner_type(t), expanding, depth + 1, expanded)}"
        if head == "record":
            fields = [
                RecordField(f.name, self._resolve(f.type, expanding, depth + 1, expanded), f.positional)
                for f in parse_record_fields(t)
            ]
            return render_record(fields)
        if head == "variant":
            cases = [
                VariantCase(
                    c.name,
                    None if c.is_unit else self._resolve(c.type, expanding, depth + 1, expanded),
                )
                for c in parse_variant_cases(t)
            ]
            return render_variant(cases)
        if head in ("func", "service") or t in PRIMITIVE_TYPES:
            return t
        alias = self._aliases.get(t)
        if alias is None or t in expanding:
            # Unknown name, or a cycle back to an alias being expanded.
            return t
        expanded.append(t)
        key = (t, expanding, depth)
        cached = self._memo.get(key)
        if cached is not None:
            return cached
        result = self._resolve(alias, expanding | {t}, depth + 1, expanded)
        if len(result) > self._max_length:
            # Too large to show; keep the alias name.
            result = t
        self._memo[key] = result
        return result
