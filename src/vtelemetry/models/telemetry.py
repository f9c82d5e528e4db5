"""Payload views for each ``dataSource`` the firmware reports."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from vtelemetry.models._base import TelemetryBaseModel


class ObdReading(TelemetryBaseModel):
    """Vehicle data read from the Veepeak OBD adapter.

    Also used for ``dummy_data`` payloads, which the firmware sends with the
    same shape when the adapter could not be reached.
    """

    vin: Any = None
    mileage: Any = None
    rpm: Any = None
    speed: Any = None
    engine_temp: Any = None
    fuel_level: Any = None
    battery_voltage: Any = None
    data_quality: Any = None
    odometer_pid: Any = Field(default=None, alias="odometerPID")


class ConnectionStatus(TelemetryBaseModel):
    """Result of the firmware's attempt to reach the OBD adapter."""

    status: Any = None
    veepeak_connected: Any = None
    battery_voltage: Any = None
    boot_count: Any = None
    error_message: Any = None
    troubleshooting: Any = None


class NetworkDiagnostics(TelemetryBaseModel):
    """Cellular modem diagnostics."""

    operator: Any = None
    signal: Any = None
    sim: Any = None
    apn: Any = None
    ip_address: Any = None
    is_connected: Any = None


class DeviceStatus(TelemetryBaseModel):
    """Periodic device heartbeat."""

    status: Any = None
    message: Any = None
    battery_voltage: Any = None
    boot_count: Any = None


class WifiStatus(TelemetryBaseModel):
    """Plain WiFi status report, discriminated by ``status`` only."""

    status: Any = None
    device: Any = None
    ip: Any = None
    ip_address: Any = None
    ssid: Any = None
    rssi: Any = None

    @property
    def device_name(self) -> Any:
        return self.device if self.device is not None else self.device_id

    @property
    def reported_ip(self) -> Any:
        return self.ip if self.ip is not None else self.ip_address
