"""Turning JSON and form inputs into Candid call arguments."""

from __future__ import annotations

import json
import math
from typing import Any, Dict, List

from .constants import (
    BIG_INT_TYPES,
    BLOB_TYPE,
    BOOL_TYPES,
    FLOAT_TYPES,
    INT_RANGES,
    NULL_TYPES,
    PRINCIPAL_TYPES,
    TEXT_TYPES,
)
from .descriptor import (
    base_name,
    inner_type,
    parse_record_fields,
    parse_variant_cases,
    render_label,
    type_head,
)
from .util import is_digits
from .validate import parse_json_text, raise_on_errors, validate_json_args, validate_value


def compose_candid_args(raw_values: List[str]) -> str:
    cleaned = [v.strip() for v in raw_values if v.strip()]
    return "(" + ", ".join(cleaned) + ")"


def _escape_bytes(data: bytes) -> str:
    out = []
    for b in data:
        ch = chr(b)
        if ch == '"':
            out.append('\\"')
        elif ch == "\\":
            out.append("\\\\")
        elif 0x20 <= b < 0x7F:
            out.append(ch)
        else:
            out.append(f"\\{b:02x}")
    return '"' + "".join(out) + '"'


def _quote_text(value: str) -> str:
    out = []
    for ch in value:
        if ch == '"':
            out.append('\\"')
        elif ch == "\\":
            out.append("\\\\")
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\t":
            out.append("\\t")
        elif ch == "\r":
            out.append("\\r")
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\{ord(ch):02x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def candid_literal(type_str: str, value: Any) -> str:
    """Render a decoded JSON value as Candid text for ``type_str``."""
    t = base_name(type_str)
    if t in TEXT_TYPES:
        return _quote_text(str(value))
    if t in PRINCIPAL_TYPES:
        return f"principal {_quote_text(str(value))}"
    if t in BOOL_TYPES:
        return "true" if value else "false"
    if t in NULL_TYPES or t == "reserved":
        return "null"
    if t in BIG_INT_TYPES or t in INT_RANGES:
        text = str(value).strip()
        if isinstance(value, float) and value.is_integer():
            text = str(int(value))
        if not is_digits(text):
            raise ValueError(f"Invalid integer for {t}: {value!r}")
        return f"{text} : {t}"
    if t in FLOAT_TYPES:
        try:
            number = float(value)
        except OverflowError as exc:
            raise ValueError(f"Value out of range for {t}: {value!r}") from exc
        if not math.isfinite(number):
            raise ValueError(f"Cannot encode non-finite {t}: {value!r}")
        return f"{number!r} : {t}"
    if t == BLOB_TYPE:
        data = value.encode("utf-8") if isinstance(value, str) else bytes(int(b) & 0xFF for b in value)
        return f"blob {_escape_bytes(data)}"

    head = type_head(type_str)
    if head == "opt":
        if value is None:
            return "null"
        return f"opt {candid_literal(inner_type(type_str), value)}"
    if head == "vec":
        items = [candid_literal(inner_type(type_str), v) for v in value]
        return "vec { " + "; ".join(items) + " }" if items else "vec {}"
    if head == "record":
        fields = parse_record_fields(type_str)
        if isinstance(value, list):
            value = {f.name: v for f, v in zip(fields, value)}
        parts = []
        for f in fields:
            rendered = candid_literal(f.type, value.get(f.name))
            parts.append(rendered if f.positional else f"{render_label(f.name)} = {rendered}")
        return "record { " + "; ".join(parts) + " }" if parts else "record {}"
    if head == "variant":
        cases = {c.name: c for c in parse_variant_cases(type_str)}
        if not isinstance(value, dict) or len(value) != 1:
            raise ValueError("variant value must be an object with a single case")
        tag, payload = next(iter(value.items()))
        case = cases.get(tag)
        if case is None:
            raise ValueError(f"Unknown variant case: {tag}")
        if case.is_unit:
            return f"variant {{ {render_label(tag)} }}"
        return f"variant {{ {render_label(tag)} = {candid_literal(case.type, payload)} }}"
    raise ValueError(f"Cannot encode a value of type {type_str.strip()}")


def json_to_candid_args(resolved_arg_types: List[str], json_text: str) -> str:
    """Validate JSON arguments and render them as a Candid argument tuple."""
    if not resolved_arg_types:
        return "()"
    result = validate_json_args(resolved_arg_types, json_text)
    raise_on_errors(result.errors)
    parsed = parse_json_text(json_text)
    if len(resolved_arg_types) == 1:
        only = resolved_arg_types[0]
        if validate_value(parsed, only) and isinstance(parsed, list) and len(parsed) == 1:
            parsed = parsed[0]
        values = [parsed]
    else:
        values = parsed
    return compose_candid_args([candid_literal(t, v) for t, v in zip(resolved_arg_types, values)])


class CandidFormModel:
    """Converts per-argument form inputs into the JSON the call layer expects."""

    def __init__(self, arg_types: List[str]) -> None:
        self.arg_types = list(arg_types)

    @property
    def is_supported_by_form(self) -> bool:
        for raw in self.arg_types:
            t = raw.strip().lower()
            if "variant" in t or "func" in t or "service" in t:
                return False
        return True

    def build_json(self, inputs: List[Any]) -> str:
        """Zero args give ``""``, one arg a bare value, several an array."""
        if not self.arg_types:
            return ""
        if len(inputs) != len(self.arg_types):
            raise ValueError(f"Expected {len(self.arg_types)} inputs, got {len(inputs)}")
        values = [self._convert(t, self._pre_parse(v)) for t, v in zip(self.arg_types, inputs)]
        payload = values[0] if len(values) == 1 else values
        return json.dumps(payload, separators=(",", ":"))

    @staticmethod
    def _pre_parse(value: Any) -> Any:
        if not isinstance(value, str):
            return value
        s = value.strip()
        looks_json = (
            (s.startswith("{") and s.endswith("}"))
            or (s.startswith("[") and s.endswith("]"))
            or s in ("null", "true", "false")
        )
        if looks_json:
            try:
                return parse_json_text(s)
            except (ValueError, RecursionError):
                return value
        return value

    def _convert(self, type_str: str, value: Any) -> Any:
        t = base_name(type_str)
        if t in TEXT_TYPES or t in PRINCIPAL_TYPES:
            return "" if value is None else str(value)
        if t in BOOL_TYPES:
            return _as_bool(value)
        if t in FLOAT_TYPES:
            return _as_float(value)
        if t in BIG_INT_TYPES:
            return _as_big_int(value)
        if t in INT_RANGES:
            return _as_int(value)

        head = type_head(type_str)
        if head == "opt":
            if value is None:
                return None
            return self._convert(inner_type(type_str), value)
        if head == "vec":
            if not isinstance(value, list):
                raise ValueError("Expected list for vec type")
            inner = inner_type(type_str)
            return [self._convert(inner, v) for v in value]
        if head == "record":
            fields = parse_record_fields(type_str)
            if not fields:
                return {}
            out: Dict[str, Any] = {}
            if isinstance(value, dict):
                for f in fields:
                    if f.name not in value:
                        raise ValueError(f"Missing field {f.name}")
                    out[f.name] = self._convert(f.type, value[f.name])
                return out
            if isinstance(value, list):
                if len(value) != len(fields):
                    raise ValueError(f"Expected {len(fields)} items for record, got {len(value)}")
                for f, v in zip(fields, value):
                    out[f.name] = self._convert(f.type, v)
                return out
            raise ValueError(f"Unsupported record input: {type(value).__name__}")
        return value


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s == "true":
        return True
    if s == "false":
        return False
    raise ValueError(f"Invalid bool: {value}")


def _as_float(value: Any) -> float:
    numeric = isinstance(value, (int, float)) and not isinstance(value, bool)
    try:
        number = float(value) if numeric else float(str(value).strip())
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Invalid float: {value}") from exc
    if not math.isfinite(number):
        raise ValueError(f"Invalid float: {value}")
    return value if numeric else number


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Invalid integer: {value}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Invalid integer: {value}")
        return int(value)
    s = str(value).strip()
    if not is_digits(s):
        raise ValueError(f"Invalid integer: {value}")
    return int(s)


def _as_big_int(value: Any) -> Any:
    """Integers that fit in 64 bits become numbers, larger ones stay strings."""
    if value is None:
        return "0"
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    s = str(value).strip()
    if not is_digits(s):
        return s
    if s.startswith("-"):
        return s if len(s) > 19 else int(s)
    return s if len(s) > 20 else int(s)
