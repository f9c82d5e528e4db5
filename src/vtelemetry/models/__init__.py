"""Data models for device telemetry payloads."""

from vtelemetry.models._base import TelemetryBaseModel
from vtelemetry.models.telemetry import (
    ConnectionStatus,
    DeviceStatus,
    NetworkDiagnostics,
    ObdReading,
    WifiStatus,
)

__all__ = [
    "ConnectionStatus",
    "DeviceStatus",
    "NetworkDiagnostics",
    "ObdReading",
    "TelemetryBaseModel",
    "WifiStatus",
]
