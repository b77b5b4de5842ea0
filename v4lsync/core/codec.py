"""Conversions between v4lctl text encodings and typed revision values."""

from __future__ import annotations

import re
from collections.abc import Callable

from v4lsync.core.errors import ProfileValidationError, ValueValidationError
from v4lsync.core.model import AttributeSpec, Kind, Value

_ATOI_RE = re.compile(r"^\s*([+-]?\d+)")
_TRUE_WORDS = {"on", "true", "yes", "1"}
_FALSE_WORDS = {"off", "false", "no", "0"}


def atoi(text: str) -> int:
    match = _ATOI_RE.match(text)
    return int(match.group(1)) if match else 0


def percent_from_hardware(raw: str, default: int, hardware_max: int, use_defaults: bool = False) -> int:
    if use_defaults or not raw:
        return default
    # int() truncates toward zero
    percent = int(atoi(raw) * 100 / hardware_max)
    return max(0, min(100, percent))


def bool_from_hardware(raw: str, default: bool, use_defaults: bool = False) -> bool:
    if use_defaults or not raw:
        return default
    return raw == "on"


def int_from_hardware(raw: str, default: int, use_defaults: bool = False) -> int:
    if use_defaults or not raw:
        return default
    return atoi(raw)


def string_from_hardware(raw: str, default: str, use_defaults: bool = False) -> str:
    if use_defaults or not raw:
        return default
    return raw


def _decode_choice(spec: AttributeSpec, raw: str, use_defaults: bool) -> Value:
    return string_from_hardware(raw, str(spec.default), use_defaults)


def _decode_bool(spec: AttributeSpec, raw: str, use_defaults: bool) -> Value:
    return bool_from_hardware(raw, bool(spec.default), use_defaults)


def _decode_int(spec: AttributeSpec, raw: str, use_defaults: bool) -> Value:
    return int_from_hardware(raw, int(spec.default), use_defaults)


def _decode_percent(spec: AttributeSpec, raw: str, use_defaults: bool) -> Value:
    if spec.hardware_max is None:
        raise ProfileValidationError(f"{spec.field} is a percent attribute without hardware_max")
    return percent_from_hardware(raw, int(spec.default), spec.hardware_max, use_defaults)


DECODERS: dict[Kind, Callable[[AttributeSpec, str, bool], Value]] = {
    Kind.CHOICE: _decode_choice,
    Kind.BOOL: _decode_bool,
    Kind.INT: _decode_int,
    Kind.PERCENT: _decode_percent,
}

ENCODERS: dict[Kind, Callable[[Value], str]] = {
    Kind.CHOICE: str,
    Kind.BOOL: lambda value: "on" if value else "off",
    Kind.INT: lambda value: str(int(value)),
    Kind.PERCENT: lambda value: f"{int(value)}%",
}


def decode(spec: AttributeSpec, raw: str, use_defaults: bool = False) -> Value:
    return DECODERS[spec.kind](spec, raw, use_defaults)


def encode(spec: AttributeSpec, value: Value) -> str:
    return ENCODERS[spec.kind](value)


def mangle(name: str) -> str:
    """Turn a write command into a persistence-safe key.

    Lossy for names that already contain ``-`` or ``_``.
    """
    return name.replace('"', "-").replace(" ", "_")


def demangle(key: str) -> str:
    return key.replace("-", '"').replace("_", " ")


def parse_user_value(spec: AttributeSpec, text: str) -> Value:
    """Convert an edit typed on the interactive surface into a revision value."""
    text = text.strip()
    if spec.kind is Kind.BOOL:
        lowered = text.lower()
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
        raise ValueValidationError(f"{spec.field} expects on/off, got '{text}'")

    if spec.kind is Kind.CHOICE:
        check_value(spec, text)
        return text

    try:
        number = int(text.rstrip("%"))
    except ValueError as exc:
        raise ValueValidationError(f"{spec.field} expects an integer, got '{text}'") from exc
    check_value(spec, number)
    return number


def check_value(spec: AttributeSpec, value: object) -> None:
    """Reject a revision value whose type or range does not fit ``spec``."""
    if spec.kind is Kind.BOOL:
        if not isinstance(value, bool):
            raise ValueValidationError(f"{spec.field} expects a bool, got {value!r}")
        return

    if spec.kind is Kind.CHOICE:
        if not isinstance(value, str):
            raise ValueValidationError(f"{spec.field} expects a string, got {value!r}")
        if spec.choices and value not in spec.choices:
            allowed = ", ".join(spec.choices)
            raise ValueValidationError(f"{spec.field} does not support '{value}'. Allowed: {allowed}")
        return

    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueValidationError(f"{spec.field} expects an integer, got {value!r}")
    if spec.kind is Kind.PERCENT:
        lower, upper = 0, 100
    else:
        lower, upper = spec.minimum, spec.maximum
    if lower is not None and value < lower:
        raise ValueValidationError(f"{spec.field} must be >= {lower}, got {value}")
    if upper is not None and value > upper:
        raise ValueValidationError(f"{spec.field} must be <= {upper}, got {value}")
