"""Choice availability and state-vector updates.

Conditions compare with strict, typed equality: ``"1"`` never matches ``1``
and ``True`` never matches ``1``. Integers and floats are one numeric kind,
so ``1`` matches ``1.0``.
"""
from __future__ import annotations

import math
import re
from typing import Mapping

from cyoa.core.types import Scalar, StateVector
from cyoa.domain.defs import ChoiceDef

_MISSING = object()
_NUMERIC_TEXT = re.compile(
    r"^(?:[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+|[+-]?Infinity)$"
)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def values_equal(actual: object, expected: object) -> bool:
    """Typed equality between a state value and a required value."""
    if isinstance(actual, bool) or isinstance(expected, bool):
        return isinstance(actual, bool) and isinstance(expected, bool) and actual is expected
    if _is_number(actual) and _is_number(expected):
        return actual == expected
    if isinstance(actual, str) and isinstance(expected, str):
        return actual == expected
    return False


def check_condition(condition: Mapping[str, Scalar] | None, state: Mapping[str, Scalar]) -> bool:
    """Return True when every required entry is present in ``state`` with the same value."""
    if not condition:
        return True
    for key, required in condition.items():
        actual = state.get(key, _MISSING)
        if actual is _MISSING or not values_equal(actual, required):
            return False
    return True


def is_available(choice: ChoiceDef, state: Mapping[str, Scalar]) -> bool:
    return check_condition(choice.condition, state)


def apply_state_change(state: Mapping[str, Scalar], set_state: Mapping[str, Scalar] | None) -> StateVector:
    """Return a new state vector with ``set_state`` merged over ``state``.

    Shallow merge only: keys are added or overwritten, never removed. The
    input mapping is left untouched.
    """
    merged: StateVector = dict(state)
    if set_state:
        merged.update(set_state)
    return merged


def parse_state_value(raw: str) -> Scalar:
    """Infer a typed value from builder text input.

    The order is fixed: ``"true"``/``"false"`` become booleans, then numeric
    text becomes a number (blank but non-empty text counts as 0), and
    anything else stays a string. Changing the order changes which type a
    condition compares against.
    """
    if raw == "true":
        return True
    if raw == "false":
        return False
    number = _parse_number(raw)
    if number is not None:
        return number
    return raw


def _parse_number(raw: str) -> int | float | None:
    text = raw.strip()
    if not text:
        return 0 if raw else None
    if not _NUMERIC_TEXT.match(text):
        return None
    if text[:2].lower() in ("0x", "0o", "0b"):
        return int(text, 0)
    if text.lstrip("+-") == "Infinity":
        return -math.inf if text.startswith("-") else math.inf
    value = float(text)
    if value.is_integer():
        return int(value)
    return value


def format_state_value(value: Scalar) -> str:
    """Render a state value the way the builder displays it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)
