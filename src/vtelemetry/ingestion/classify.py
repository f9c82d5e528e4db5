"""Payload classification and human-readable log records.

A payload is routed by its ``dataSource`` field, then by ``status``, and
otherwise dumped as-is. Formatting is observational only: no branch can
reject a request, and a missing field renders as the missing marker.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from vtelemetry._redact import dump_for_log
from vtelemetry.ingestion.normalize import display_value, is_meaningful
from vtelemetry.models import ConnectionStatus, DeviceStatus, NetworkDiagnostics, ObdReading, WifiStatus
from vtelemetry.state.quality import connection_quality

_logger = logging.getLogger(__name__)

DEVICE_NOT_CONNECTED = "device_not_connected"


class DataSource(StrEnum):
    VEEPEAK_OBD = "veepeak_obd"
    CONNECTION_STATUS = "connection_status"
    NETWORK_DIAGNOSTICS = "network_diagnostics"
    DEVICE_STATUS = "device_status"
    DUMMY_DATA = "dummy_data"


class Branch(StrEnum):
    """Presentation branch selected for a payload."""

    VEEPEAK_OBD = "veepeak_obd"
    CONNECTION_STATUS = "connection_status"
    NETWORK_DIAGNOSTICS = "network_diagnostics"
    DEVICE_STATUS = "device_status"
    DUMMY_DATA = "dummy_data"
    STATUS = "status"
    RAW = "raw"


@dataclass(frozen=True)
class Classification:
    branch: Branch
    discriminator: str | None = None
    value: Any = None


@dataclass(frozen=True)
class TelemetryRecord:
    """Formatted view of one payload."""

    classification: Classification
    title: str
    lines: list[str] = field(default_factory=list)
    error: str | None = None
    hint: str | None = None

    def render(self) -> str:
        out = [self.title]
        out.extend(f"  {line}" for line in self.lines)
        if self.error:
            out.append(f"  Error: {self.error}")
        if self.hint:
            out.append(f"  Hint: {self.hint}")
        return "\n".join(out)


def classify(payload: Mapping[str, Any]) -> Classification:
    """Pick the presentation branch for *payload*.

    ``dataSource`` takes precedence over ``status``. An unrecognised
    ``dataSource`` goes to the raw branch without consulting ``status``.
    """
    source = payload.get("dataSource")
    if is_meaningful(source):
        try:
            return Classification(Branch(DataSource(source).value), "dataSource", source)
        except ValueError:
            return Classification(Branch.RAW, "dataSource", source)
    status = payload.get("status")
    if is_meaningful(status):
        return Classification(Branch.STATUS, "status", status)
    return Classification(Branch.RAW)


def _obd_lines(reading: ObdReading) -> list[str]:
    return [
        f"VIN: {display_value(reading.vin)}",
        f"Mileage: {display_value(reading.mileage, ' km')}",
        f"RPM: {display_value(reading.rpm)}",
        f"Speed: {display_value(reading.speed, ' km/h')}",
        f"Engine Temp: {display_value(reading.engine_temp, '°C')}",
        f"Fuel Level: {display_value(reading.fuel_level, '%')}",
        f"Battery: {display_value(reading.battery_voltage, 'V')}",
        f"Data Quality: {display_value(reading.data_quality, '%')}",
    ]


def _format_obd(payload: Mapping[str, Any], classification: Classification) -> TelemetryRecord:
    reading = ObdReading.model_validate(payload)
    lines = _obd_lines(reading)
    lines.append(f"Odometer PID: {display_value(reading.odometer_pid)}")
    return TelemetryRecord(classification, "OBD Vehicle Data:", lines)


def _format_dummy(payload: Mapping[str, Any], classification: Classification) -> TelemetryRecord:
    reading = ObdReading.model_validate(payload)
    lines = _obd_lines(reading)
    lines.append("Note: This is dummy data - Veepeak device not connected")
    return TelemetryRecord(classification, "Dummy Vehicle Data (Veepeak Failed):", lines)


def _format_connection(payload: Mapping[str, Any], classification: Classification) -> TelemetryRecord:
    status = ConnectionStatus.model_validate(payload)
    return TelemetryRecord(
        classification,
        "Connection Status:",
        [
            f"Status: {display_value(status.status)}",
            f"Veepeak Connected: {display_value(status.veepeak_connected)}",
            f"Battery: {display_value(status.battery_voltage, 'V')}",
            f"Boot Count: {display_value(status.boot_count)}",
        ],
        error=str(status.error_message) if status.error_message else None,
        hint=str(status.troubleshooting) if status.troubleshooting else None,
    )


def _format_network(payload: Mapping[str, Any], classification: Classification) -> TelemetryRecord:
    diag = NetworkDiagnostics.model_validate(payload)
    return TelemetryRecord(
        classification,
        "Network Diagnostics:",
        [
            f"Operator: {display_value(diag.operator)}",
            f"Signal: {display_value(diag.signal)}",
            f"SIM: {display_value(diag.sim)}",
            f"APN: {display_value(diag.apn)}",
            f"IP Address: {display_value(diag.ip_address)}",
            f"Connected: {display_value(diag.is_connected)}",
        ],
    )


def _format_device(payload: Mapping[str, Any], classification: Classification) -> TelemetryRecord:
    status = DeviceStatus.model_validate(payload)
    error = hint = None
    if status.status == DEVICE_NOT_CONNECTED:
        error = "OBD device not connected"
        hint = "Check: Veepeak power and WiFi broadcast"
    return TelemetryRecord(
        classification,
        "Device Status Update:",
        [
            f"Status: {display_value(status.status)}",
            f"Message: {display_value(status.message)}",
            f"Battery: {display_value(status.battery_voltage, 'V')}",
            f"Boot Count: {display_value(status.boot_count)}",
        ],
        error=error,
        hint=hint,
    )


def _format_status(payload: Mapping[str, Any], classification: Classification) -> TelemetryRecord:
    status = WifiStatus.model_validate(payload)
    return TelemetryRecord(
        classification,
        "WiFi Status:",
        [
            f"Status: {display_value(status.status)}",
            f"Device: {display_value(status.device_name)}",
            f"IP: {display_value(status.reported_ip)}",
            f"SSID: {display_value(status.ssid)}",
            f"RSSI: {display_value(status.rssi, ' dBm')} ({connection_quality(status.rssi)})",
        ],
    )


def _format_raw(payload: Mapping[str, Any], classification: Classification) -> TelemetryRecord:
    return TelemetryRecord(classification, "Raw Data:", dump_for_log(dict(payload)).splitlines())


_FORMATTERS: dict[Branch, Callable[[Mapping[str, Any], Classification], TelemetryRecord]] = {
    Branch.VEEPEAK_OBD: _format_obd,
    Branch.CONNECTION_STATUS: _format_connection,
    Branch.NETWORK_DIAGNOSTICS: _format_network,
    Branch.DEVICE_STATUS: _format_device,
    Branch.DUMMY_DATA: _format_dummy,
    Branch.STATUS: _format_status,
    Branch.RAW: _format_raw,
}


def format_record(payload: Mapping[str, Any]) -> TelemetryRecord:
    """Classify *payload* and build its log record."""
    classification = classify(payload)
    return _FORMATTERS[classification.branch](payload, classification)


def log_record(record: TelemetryRecord, logger: logging.Logger | None = None) -> None:
    """Emit *record* at INFO, with its error line repeated at WARNING."""
    target = logger or _logger
    target.info("%s", record.render())
    if record.error:
        target.warning("%s: %s", record.classification.branch, record.error)
