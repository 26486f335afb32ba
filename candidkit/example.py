"""Example JSON arguments for resolved Candid types."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from .constants import (
    BIG_INT_TYPES,
    BLOB_TYPE,
    BOOL_TYPES,
    DEFAULT_EXAMPLE_PRINCIPAL,
    DEFAULT_EXAMPLE_TEXT,
    DEFAULT_JSON_INDENT,
    FLOAT_TYPES,
    INT_RANGES,
    PRINCIPAL_TYPES,
    TEXT_TYPES,
)
from .descriptor import base_name, inner_type, parse_record_fields, parse_variant_cases, type_head


def example_value(
    type_str: str,
    text: str = DEFAULT_EXAMPLE_TEXT,
    principal: str = DEFAULT_EXAMPLE_PRINCIPAL,
) -> Any:
    t = base_name(type_str)
    if t in TEXT_TYPES:
        return text
    if t in PRINCIPAL_TYPES:
        return principal
    if t in BOOL_TYPES:
        return False
    if t in BIG_INT_TYPES or t in INT_RANGES or t in FLOAT_TYPES:
        return 0
    if t == BLOB_TYPE:
        return [0]

    head = type_head(type_str)
    if head == "vec":
        return [example_value(inner_type(type_str), text, principal)]
    if head == "record":
        out: Dict[str, Any] = {}
        for f in parse_record_fields(type_str):
            out[f.name] = example_value(f.type, text, principal)
        return out
    if head == "variant":
        cases = parse_variant_cases(type_str)
        if not cases:
            return {}
        first = cases[0]
        payload = None if first.is_unit else example_value(first.type, text, principal)
        return {first.name: payload}
    # opt, null, reserved, empty and anything unmodelled.
    return None


def build_json_example(
    arg_types: List[str],
    text: str = DEFAULT_EXAMPLE_TEXT,
    principal: str = DEFAULT_EXAMPLE_PRINCIPAL,
    indent: int = DEFAULT_JSON_INDENT,
) -> str:
    """Render example arguments: bare value for one arg, array for several."""
    if not arg_types:
        return ""
    values = [example_value(t, text, principal) for t in arg_types]
    payload = values[0] if len(values) == 1 else values
    return json.dumps(payload, indent=indent or None)
