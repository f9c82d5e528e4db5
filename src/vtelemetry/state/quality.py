"""Connection quality tiers derived from received signal strength."""

from __future__ import annotations

from typing import Any

from vtelemetry._constants import QUALITY_FLOOR, QUALITY_TIERS, QUALITY_UNKNOWN
from vtelemetry.ingestion.normalize import safe_float


def connection_quality(signal: Any) -> str:
    """Bucket an RSSI reading (dBm) into a named tier.

    Boundaries are strict: ``-50`` itself is "Very Good", not "Excellent".
    Missing or non-numeric readings are "Unknown".
    """
    rssi = safe_float(signal)
    if rssi is None:
        return QUALITY_UNKNOWN
    for threshold, tier in QUALITY_TIERS:
        if rssi > threshold:
            return tier
    return QUALITY_FLOOR
