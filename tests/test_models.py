from __future__ import annotations

import math

from vtelemetry.models import ConnectionStatus, ObdReading, WifiStatus


def test_camel_case_keys_map_to_fields() -> None:
    reading = ObdReading.model_validate(
        {
            "deviceID": "ESP32_001",
            "dataSource": "veepeak_obd",
            "engineTemp": 90,
            "fuelLevel": 40,
            "odometerPID": "A6",
        }
    )

    assert reading.device_id == "ESP32_001"
    assert reading.data_source == "veepeak_obd"
    assert reading.engine_temp == 90
    assert reading.fuel_level == 40
    assert reading.odometer_pid == "A6"


def test_placeholders_are_dropped_and_raw_is_kept() -> None:
    payload = {"dataSource": "connection_status", "status": "--", "bootCount": math.nan, "errorMessage": ""}

    status = ConnectionStatus.model_validate(payload)

    assert status.status is None
    assert status.boot_count is None
    assert status.error_message is None
    assert status.raw["status"] == "--"


def test_wifi_status_prefers_device_and_ip() -> None:
    status = WifiStatus.model_validate({"device": "ESP32", "deviceID": "X", "ipAddress": "10.0.0.2"})

    assert status.device_name == "ESP32"
    assert status.reported_ip == "10.0.0.2"
