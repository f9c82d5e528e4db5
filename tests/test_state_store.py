from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from vtelemetry.state.quality import connection_quality
from vtelemetry.state.store import StatusStore


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now


def test_query_before_any_update_reports_no_data() -> None:
    store = StatusStore()

    assert store.query() is None
    assert store.seconds_since_last_update() is None
    view = store.status_view()
    assert view["message"] == "No data received yet"
    assert view["connected"] is False


def test_connected_iff_status_matches_sentinel() -> None:
    store = StatusStore()

    assert store.update({"status": "connected", "device": "ESP32"}).connected is True
    assert store.query().connected is True
    assert store.update({"status": "disconnected", "device": "ESP32"}).connected is False
    assert store.update({"device": "ESP32"}).connected is False


def test_custom_connected_sentinel() -> None:
    store = StatusStore(connected_sentinel="online")

    assert store.update({"status": "online"}).connected is True
    assert store.update({"status": "connected"}).connected is False


def test_update_replaces_instead_of_merging() -> None:
    store = StatusStore()

    store.update({"status": "connected", "device": "ESP32", "ssid": "home", "rssi": -40})
    store.update({"status": "connected", "deviceID": "ESP32_002"})

    snapshot = store.query()
    assert snapshot is not None
    assert snapshot.device == "ESP32_002"
    assert snapshot.details == {"status": "connected", "deviceID": "ESP32_002"}


def test_last_write_wins_after_sequential_updates() -> None:
    store = StatusStore()
    payloads = [{"status": "connected", "device": f"ESP32-{i}", "seq": i} for i in range(25)]

    for payload in payloads:
        store.update(payload)

    snapshot = store.query()
    assert snapshot is not None
    assert snapshot.details == payloads[-1]
    assert snapshot.device == "ESP32-24"


def test_snapshot_is_isolated_from_caller_mutation() -> None:
    store = StatusStore()
    payload = {"status": "connected", "nested": {"a": 1}}

    store.update(payload)
    payload["nested"]["a"] = 2

    assert store.query().details["nested"] == {"a": 1}


def test_last_update_uses_server_clock_not_client_timestamp() -> None:
    clock = _Clock()
    store = StatusStore(clock=clock)

    snapshot = store.update({"status": "connected", "timestamp": "1999-01-01T00:00:00Z"})

    assert snapshot.last_update == clock.now
    assert snapshot.details["timestamp"] == "1999-01-01T00:00:00Z"


def test_seconds_since_last_update() -> None:
    clock = _Clock()
    store = StatusStore(clock=clock)
    store.update({"status": "connected"})

    clock.now += timedelta(seconds=42)

    assert store.seconds_since_last_update() == 42.0
    assert store.status_view()["secondsSinceLastUpdate"] == 42.0


def test_status_view_serializes_timestamp() -> None:
    clock = _Clock()
    store = StatusStore(clock=clock)
    store.update({"status": "connected", "device": "ESP32"})

    view = store.status_view()

    assert view["lastUpdate"] == "2026-01-01T00:00:00.000Z"
    assert view["device"] == "ESP32"
    assert view["connected"] is True


@pytest.mark.parametrize(
    ("signal", "tier"),
    [
        (-45, "Excellent"),
        (-55, "Very Good"),
        (-65, "Good"),
        (-75, "Fair"),
        (-90, "Poor"),
        (None, "Unknown"),
        ("-45", "Excellent"),
        ("weak", "Unknown"),
    ],
)
def test_connection_quality_tiers(signal, tier) -> None:
    assert connection_quality(signal) == tier


def test_connection_quality_boundaries_are_strict() -> None:
    assert connection_quality(-50) == "Very Good"
    assert connection_quality(-60) == "Good"
    assert connection_quality(-70) == "Fair"
    assert connection_quality(-80) == "Poor"
