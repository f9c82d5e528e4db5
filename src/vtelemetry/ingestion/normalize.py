"""Normalization helpers.

Centralizes defensive scalar coercion and placeholder handling for
device-supplied values.
"""

from __future__ import annotations

import math
from typing import Any

from vtelemetry._constants import MISSING_MARKER


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--" or isinstance(value, bool):
        return None
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
    text = str(value)
    return text if text else None


def is_meaningful(value: Any) -> bool:
    """Return True if a device value should be presented as-is.

    ``0`` and ``False`` are meaningful readings; only absent or empty
    values are not.
    """

    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return not (isinstance(value, (dict, list)) and not value)


def display_value(value: Any, unit: str = "") -> str:
    """Render a payload value for a log line, or the missing marker."""
    if not is_meaningful(value):
        return MISSING_MARKER
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, float) and value.is_integer():
        text = str(int(value))
    else:
        text = str(value)
    return f"{text}{unit}"
