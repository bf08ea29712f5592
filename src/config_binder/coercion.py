"""
Value coercion for raw configuration strings.

Rules are tried in order and the first one that accepts the trimmed value
wins: boolean, integer, float, then the string itself.
"""

from __future__ import annotations

import re
from typing import Callable, Optional, Sequence, Tuple

from config_binder.models import TypedValue

# Control characters and space, nothing wider.
_TRIM_CHARS = "".join(chr(code) for code in range(0x21))

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:NaN|Infinity|(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?[fFdD]?)"
)
_HEX_FLOAT_PATTERN = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+[fFdD]?"
)

# A rule returns (matched, value).
CoercionRule = Callable[[str], Tuple[bool, TypedValue]]


def trim(value: str) -> str:
    return value.strip(_TRIM_CHARS)


def coerce_bool(value: str) -> Tuple[bool, TypedValue]:
    lowered = value.lower()
    if lowered == "true":
        return True, True
    if lowered == "false":
        return True, False
    return False, None


def coerce_int(value: str) -> Tuple[bool, TypedValue]:
    if _INT_PATTERN.fullmatch(value) is None:
        return False, None
    try:
        return True, int(value)
    except ValueError:
        # Past the interpreter's digit limit; the float rule takes it.
        return False, None


def coerce_float(value: str) -> Tuple[bool, TypedValue]:
    if _HEX_FLOAT_PATTERN.fullmatch(value) is not None:
        return True, float.fromhex(value.rstrip("fFdD"))
    if _FLOAT_PATTERN.fullmatch(value) is None:
        return False, None
    return True, float(value.rstrip("fFdD").replace("Infinity", "inf"))


DEFAULT_RULES: Sequence[CoercionRule] = (coerce_bool, coerce_int, coerce_float)


def coerce_value(raw_value: Optional[str], rules: Sequence[CoercionRule] = DEFAULT_RULES) -> TypedValue:
    if raw_value is None:
        return None
    value = trim(raw_value)
    for rule in rules:
        matched, typed = rule(value)
        if matched:
            return typed
    return value
