"""Normalization helpers.

Centralizes defensive parsing of provider values (numbers that arrive as
strings, blank cells, ``NaN``).
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def safe_line_id(value: Any) -> str:
    """Normalize a line id to text.

    The provider sends line ids either as strings or as numbers
    (``474`` or ``474.0``); integral numbers lose the decimal part.
    """
    if isinstance(value, bool):
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return safe_str(value) or ""


def safe_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = safe_str(value)
    if text is None:
        return False
    return text.lower() in {"1", "true", "yes", "y", "volta", "v", "returning"}
