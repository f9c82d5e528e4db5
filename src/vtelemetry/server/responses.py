"""Acknowledgment payloads returned to the device."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from aiohttp import web

from vtelemetry.ingestion.body import DecodeResult
from vtelemetry.ingestion.normalize import is_meaningful
from vtelemetry.models import WifiStatus
from vtelemetry.state.quality import connection_quality
from vtelemetry.state.store import StatusSnapshot, iso_utc


def iso_now(now: datetime | None = None) -> str:
    current = now if now is not None else datetime.now(UTC)
    return iso_utc(current)


def connection_details(payload: Mapping[str, Any], *, transport_ip: str | None) -> dict[str, Any]:
    """Echo the connection metadata the device reported.

    The payload's own IP wins over the address the transport observed,
    which is usually a tunnel or proxy.
    """
    status = WifiStatus.model_validate(payload)
    reported_ip = status.reported_ip
    return {
        "device": status.device_name,
        "ip": reported_ip if is_meaningful(reported_ip) else transport_ip,
        "ssid": status.ssid,
        "rssi": status.rssi,
        "quality": connection_quality(status.rssi),
    }


def success_body(
    payload: Mapping[str, Any],
    *,
    received_at: datetime,
    snapshot: StatusSnapshot | None = None,
    transport_ip: str | None = None,
    uptime: float | None = None,
) -> dict[str, Any]:
    connection = connection_details(payload, transport_ip=transport_ip)
    device = connection["device"] if is_meaningful(connection["device"]) else "ESP32"
    body: dict[str, Any] = {
        "success": True,
        "message": "Data received successfully",
        "timestamp": iso_now(received_at),
        "receivedData": {
            "deviceID": payload.get("deviceID"),
            "dataSource": payload.get("dataSource"),
            "timestamp": payload.get("timestamp"),
        },
        "greeting": f"Hello {device}!",
        "connection": connection,
    }
    if snapshot is not None:
        body["connected"] = snapshot.connected
    if uptime is not None:
        body["serverUptime"] = round(uptime, 3)
    return body


def success_response(payload: Mapping[str, Any], **kwargs: Any) -> web.Response:
    """200 acknowledgment for a decoded payload."""
    return web.json_response(success_body(payload, **kwargs), status=200)


def decode_failure_response(result: DecodeResult, *, received_at: datetime) -> web.Response:
    """400 response for an empty or unparseable body."""
    return web.json_response(
        {
            "success": False,
            "message": "No valid JSON data received",
            "timestamp": iso_now(received_at),
            "error": result.error,
        },
        status=400,
    )


def internal_error_response(exc: BaseException, *, expose_errors: bool = True) -> web.Response:
    """500 response for a fault raised while handling a request."""
    body: dict[str, Any] = {"success": False, "message": "Internal server error"}
    if expose_errors:
        body["error"] = str(exc)
    return web.json_response(body, status=500)
