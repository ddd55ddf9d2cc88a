"""
Utility functions mirroring JavaScript value semantics on JSON-compatible values.

Values are Python ``None``/``bool``/``int``/``float``/``str``/``list``/``dict``.
``None`` stands for both ``null`` and ``undefined``. Helpers that can hit a
JavaScript NaN return ``None`` instead so callers can degrade to an unresolved
marker.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any

_DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_RADIX_PATTERN = re.compile(r"^0([xXoObB])([0-9a-fA-F]+)$")
_RADIXES = {"x": 16, "o": 8, "b": 2}

# Integers beyond this are not exactly representable as JavaScript numbers
_MAX_SAFE_INTEGER = 2**53


def normalize_number(value: int | float) -> int | float:
    """Collapse integral floats to ``int`` so ``3.0`` prints as ``3``."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer() and abs(value) < _MAX_SAFE_INTEGER:
        return int(value)
    return value


def is_number(value: Any) -> bool:
    """Check for a JavaScript number (``bool`` is not one)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def js_typeof(value: Any) -> str:
    """Return the JavaScript ``typeof`` of a JSON-compatible value."""
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def format_number(value: int | float) -> str:
    """Format a number the way ``String(n)`` does."""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        value = normalize_number(value)
    return str(value) if isinstance(value, int) else repr(value)


def js_to_string(value: Any) -> str:
    """Convert a value the way ``String(value)`` does."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ",".join("" if item is None else js_to_string(item) for item in value)
    return "[object Object]"


def js_to_number(value: Any) -> int | float | None:
    """Convert a value the way ``Number(value)`` does; ``None`` means NaN."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return 1 if value else 0
    if is_number(value):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        radix = _RADIX_PATTERN.match(text)
        if radix:
            try:
                return int(radix.group(2), _RADIXES[radix.group(1).lower()])
            except ValueError:
                return None
        if _DECIMAL_PATTERN.match(text):
            return normalize_number(float(text))
        return None
    return None


def js_truthy(value: Any) -> bool:
    """Return the JavaScript truthiness of a value (containers are truthy)."""
    if value is None or value is False:
        return False
    if is_number(value):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def js_strict_equals(left: Any, right: Any) -> bool | None:
    """Evaluate ``left === right``; ``None`` when identity would decide."""
    if isinstance(left, (list, dict)) or isinstance(right, (list, dict)):
        return None
    if js_typeof(left) != js_typeof(right):
        return False
    return left == right


def js_loose_equals(left: Any, right: Any) -> bool | None:
    """Evaluate ``left == right`` with primitive coercion; ``None`` when undecidable."""
    if isinstance(left, (list, dict)) or isinstance(right, (list, dict)):
        return None
    if left is None or right is None:
        return left is None and right is None
    if js_typeof(left) == js_typeof(right):
        return left == right
    left_number = js_to_number(left)
    right_number = js_to_number(right)
    if left_number is None or right_number is None:
        return False
    return left_number == right_number


def to_json(value: Any, indent: int | None = 2) -> str:
    """Serialise a value the way ``JSON.stringify(value, null, indent)`` does."""
    if indent is None:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return json.dumps(value, ensure_ascii=False, indent=indent)
