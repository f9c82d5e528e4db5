"""Ingestion layer.

Turns whatever the device posted into a normalized payload mapping and a
human-readable log record.
"""

__all__: list[str] = []
