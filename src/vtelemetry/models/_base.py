"""Base model for device telemetry payloads.

Every payload view inherits from :class:`TelemetryBaseModel` which
provides:

* ``alias_generator=to_camel`` so the firmware's camelCase keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that strips placeholder values
  (``""``, ``"--"``, NaN) so the field default is used.
* A ``raw`` dict that captures the original payload.

Fields are typed loosely on purpose: the firmware is free to send a
number as a string, and presenting a payload must never fail validation.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# Placeholder strings devices send for "not available".
_SENTINELS = frozenset({"", "--", "NaN", "nan", "null"})


class TelemetryBaseModel(BaseModel):
    """Base for device payload views."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    device_id: Any = Field(default=None, alias="deviceID")
    data_source: Any = None
    timestamp: Any = None

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original payload dict."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_placeholders(cls, values: Any) -> Any:
        """Strip placeholder values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned = TelemetryBaseModel._clean_dict(original)
        # A device key named "raw" must not shadow the stash.
        cleaned["raw"] = original
        return cleaned
