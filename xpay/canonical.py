"""Order-preserving text form of a payload, used as the HMAC input.

The output mirrors ``key=value`` pairs joined by ``", "``; nested mappings are
wrapped in braces and sequences in brackets. Separators are never escaped, so
the text is a one-way digest input and cannot be parsed back.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Mapping

from .errors import InvalidPayloadError

MAX_NESTING_DEPTH = 64
# Fixed-point rendering writes one digit per unit of exponent.
MAX_DECIMAL_EXPONENT = 64


def serialize_payload(payload: Mapping[str, object]) -> str:
    return _serialize_mapping(payload, 0)


def format_scalar(value: object) -> str:
    # bool is an int subclass; check it first.
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Decimal):
        return _format_decimal(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidPayloadError(f"non-finite number {value!r} cannot be signed")
        return _format_decimal(Decimal(repr(value)))
    raise InvalidPayloadError(f"unsupported payload value of type {type(value).__name__}")


def _format_decimal(value: Decimal) -> str:
    if not value.is_finite():
        raise InvalidPayloadError(f"non-finite decimal {value!r} cannot be signed")
    exponent = value.as_tuple().exponent
    if abs(exponent) > MAX_DECIMAL_EXPONENT:
        raise InvalidPayloadError(f"decimal exponent {exponent} is out of range")
    return format(value, "f")


def _serialize_mapping(payload: Mapping[str, object], depth: int) -> str:
    if not isinstance(payload, Mapping):
        raise InvalidPayloadError(f"payload must be a mapping, got {type(payload).__name__}")
    tokens = []
    for key, value in payload.items():
        if not isinstance(key, str):
            raise InvalidPayloadError(f"payload keys must be strings, got {key!r}")
        tokens.append(f"{key}={_format_value(value, depth + 1)}")
    return ", ".join(tokens)


def _format_value(value: object, depth: int) -> str:
    if depth > MAX_NESTING_DEPTH:
        raise InvalidPayloadError(f"payload is nested deeper than {MAX_NESTING_DEPTH} levels")
    if isinstance(value, Mapping):
        return "{" + _serialize_mapping(value, depth) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_format_value(item, depth + 1) for item in value) + "]"
    return format_scalar(value)
