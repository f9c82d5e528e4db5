"""Helpers for safe payload logging.

Devices occasionally echo WiFi credentials or API keys back in their
payloads, and a misbehaving client can post arbitrarily large bodies. This
module renders payloads for logs with sensitive fields masked and long
strings cut short.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "pass",
        "passwd",
        "wifipassword",
        "pin",
        "simpin",
        "token",
        "apikey",
        "authorization",
        "secret",
    }
)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if key.lower() in _SENSITIVE_VALUE_KEYS:
                redacted[key] = "<redacted>"
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)


def dump_for_log(value: Any, *, max_string: int = 512) -> str:
    """Pretty-print a redacted copy of *value* as indented JSON."""
    return json.dumps(redact_for_log(value, max_string=max_string), indent=2, ensure_ascii=False, default=repr)
