"""Display text for raw categorical values."""

from __future__ import annotations

import math
from typing import Any, Callable

NONE_TEXT = "None"

_NULL_TOKENS = frozenset({"", "none", "null", "nan"})

Prettifier = Callable[[Any], str]


def prettify(value: Any) -> str:
    """Render a raw bucket key for display.

    Null-like values (None, NaN, "null", "None", empty string) collapse to
    "None". Booleans print capitalised, floats with at most 3 decimals and
    thousands separators, lists as ``[a, b]``. Other strings pass through.
    """
    if value is None:
        return NONE_TEXT
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, str):
        return NONE_TEXT if value.strip().lower() in _NULL_TOKENS else value
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        if math.isnan(value):
            return NONE_TEXT
        text = f"{round(value, 3):,.3f}".rstrip("0").rstrip(".")
        return text or "0"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(prettify(v) for v in value) + "]"
    return str(value)
