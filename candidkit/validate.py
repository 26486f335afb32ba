"""JSON argument validation against resolved Candid types."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .constants import (
    BIG_INT_TYPES,
    BLOB_TYPE,
    BOOL_TYPES,
    FLOAT_TYPES,
    INT_RANGES,
    NULL_TYPES,
    PERMISSIVE_TYPES,
    PRINCIPAL_TYPES,
    ROOT_PATH,
    TEXT_TYPES,
)
from .descriptor import base_name, inner_type, parse_record_fields, parse_variant_cases, type_head
from .util import is_digits


class ValidationError(Exception):
    """Raised when arguments or configuration fail validation."""


@dataclass(frozen=True)
class ValidationResult:
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _is_number(value: Any) -> bool:
    if isinstance(value, float):
        return math.isfinite(value)
    return isinstance(value, int) and not isinstance(value, bool)


def _as_integer(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _check_value(value: Any, type_str: str, path: str, errors: List[str]) -> None:
    def err(msg: str) -> None:
        errors.append(f"{path} {msg}")

    t = base_name(type_str)
    head = type_head(type_str)

    if t in TEXT_TYPES:
        if not isinstance(value, str):
            err("expected string")
        return
    if t in PRINCIPAL_TYPES:
        if not isinstance(value, str):
            err("expected principal text")
        return
    if t in BOOL_TYPES:
        if not isinstance(value, bool):
            err("expected boolean")
        return
    if t in NULL_TYPES:
        if value is not None:
            err("expected null")
        return
    if t in FLOAT_TYPES:
        if not _is_number(value):
            err("expected number")
            return
        try:
            float(value)
        except OverflowError:
            err(f"value out of range for {t}")
        return
    if t in BIG_INT_TYPES:
        if isinstance(value, str):
            digits = value.strip()
            if not is_digits(digits):
                err("expected number or numeric string")
                return
            # Sign from the text: very long strings are not converted to int.
            if t == "nat" and digits.startswith("-") and digits.lstrip("-").strip("0"):
                err("expected non-negative number for nat")
            return
        if not _is_number(value):
            err("expected number or numeric string")
            return
        number = _as_integer(value)
        if number is None:
            err(f"expected integer for {t}")
            return
        if t == "nat" and number < 0:
            err("expected non-negative number for nat")
        return
    if t in INT_RANGES:
        if not _is_number(value):
            err("expected number")
            return
        number = _as_integer(value)
        if number is None:
            err(f"expected integer for {t}")
            return
        lo, hi = INT_RANGES[t]
        if not lo <= number <= hi:
            err(f"value {number} out of range for {t}")
        return
    if t in PERMISSIVE_TYPES:
        return
    if t == BLOB_TYPE:
        if isinstance(value, str):
            return
        if not isinstance(value, list):
            err("expected array of bytes or string for blob")
            return
        for i, item in enumerate(value):
            _check_value(item, "nat8", f"{path}[{i}]", errors)
        return

    if head == "opt":
        if value is None:
            return
        _check_value(value, inner_type(type_str), path, errors)
        return
    if head == "vec":
        if not isinstance(value, list):
            err("expected array")
            return
        inner = inner_type(type_str)
        for i, item in enumerate(value):
            _check_value(item, inner, f"{path}[{i}]", errors)
        return
    if head == "record":
        fields = parse_record_fields(type_str)
        if isinstance(value, list):
            if len(value) != len(fields):
                err(f"expected {len(fields)} items for record, got {len(value)}")
                return
            for f, item in zip(fields, value):
                _check_value(item, f.type, f"{path}.{f.name}", errors)
            return
        if not isinstance(value, dict):
            err("expected object with named fields")
            return
        for f in fields:
            if f.name not in value:
                if type_head(f.type) == "opt":
                    continue
                err(f"missing field {f.name}")
                continue
            _check_value(value[f.name], f.type, f"{path}.{f.name}", errors)
        return
    if head == "variant":
        cases = parse_variant_cases(type_str)
        if not cases:
            return
        names = [c.name for c in cases]
        if not isinstance(value, dict) or len(value) != 1:
            err(f"expected variant as object with one of: {', '.join(names)}")
            return
        tag, payload = next(iter(value.items()))
        case = next((c for c in cases if c.name == tag), None)
        if case is None:
            err(f"unknown variant case {tag}, expected one of: {', '.join(names)}")
            return
        if case.is_unit:
            if payload is not None:
                errors.append(f"{path}.{tag} expected null for unit case")
            return
        _check_value(payload, case.type, f"{path}.{tag}", errors)
        return

    # func, service and unresolved names are not modelled.


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a JSON number")


def parse_json_text(text: str) -> Any:
    """Decode argument JSON; empty text is null.

    Raises ValueError, or RecursionError for very deep nesting. NaN and
    Infinity are rejected.
    """
    text = (text or "").strip()
    if not text:
        return None
    return json.loads(text, parse_constant=_reject_constant)


def validate_value(value: Any, type_str: str, path: str = ROOT_PATH) -> List[str]:
    """Check an already decoded JSON value against one type."""
    errors: List[str] = []
    _check_value(value, type_str, path, errors)
    return errors


def validate_json_args(resolved_arg_types: List[str], json_text: str) -> ValidationResult:
    if not resolved_arg_types:
        return ValidationResult()
    text = (json_text or "").strip()
    try:
        parsed = parse_json_text(text)
    except (ValueError, RecursionError) as exc:
        return ValidationResult(errors=[f"Invalid JSON: {exc}"])

    if len(resolved_arg_types) == 1:
        errors = validate_value(parsed, resolved_arg_types[0])
        if errors and isinstance(parsed, list) and len(parsed) == 1:
            wrapped = validate_value(parsed[0], resolved_arg_types[0])
            if not wrapped:
                return ValidationResult()
        return ValidationResult(errors=errors)

    count = len(resolved_arg_types)
    if not isinstance(parsed, list):
        return ValidationResult(errors=[f"Expected JSON array with {count} items"])
    if len(parsed) != count:
        return ValidationResult(errors=[f"Expected JSON array with {count} items, got {len(parsed)}"])
    errors = []
    for i, (type_str, item) in enumerate(zip(resolved_arg_types, parsed)):
        _check_value(item, type_str, f"arg{i}", errors)
    return ValidationResult(errors=errors)


def raise_on_errors(errors: List[str]) -> None:
    if errors:
        raise ValidationError("\n".join(errors))
