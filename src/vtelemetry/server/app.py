"""aiohttp application serving the telemetry endpoints."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from aiohttp import web

from vtelemetry._constants import HEALTH_ROUTE, SERVICE_NAME, STATUS_ROUTE, WIFI_STATUS_ROUTE
from vtelemetry._redact import dump_for_log, redact_for_log
from vtelemetry.config import ReceiverConfig
from vtelemetry.ingestion.body import decode_request
from vtelemetry.ingestion.classify import format_record, log_record
from vtelemetry.server.responses import (
    decode_failure_response,
    internal_error_response,
    iso_now,
    success_response,
)
from vtelemetry.state.store import StatusStore

_logger = logging.getLogger(__name__)

CONFIG_KEY = web.AppKey("config", ReceiverConfig)
STORE_KEY = web.AppKey("store", StatusStore)
STARTED_KEY = web.AppKey("started_monotonic", float)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

_INDEX_HTML = """\
<h1>ESP32 Vehicle Telematics Server</h1>
<p>Server is running and ready to receive data from ESP32</p>
<p><strong>Endpoints:</strong></p>
<ul>
  <li><code>POST {status}</code> - Receive ESP32 data</li>
  <li><code>GET {health}</code> - Health check</li>
  <li><code>GET {wifi}</code> - Latest reported status</li>
</ul>
<p><strong>Server Time:</strong> {now}</p>
"""


@web.middleware
async def request_log_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    _logger.info("%s %s", request.method, request.path_qs)
    _logger.debug(
        "Content-Type: %s Content-Length: %s",
        request.headers.get("Content-Type"),
        request.headers.get("Content-Length"),
    )
    return await handler(request)


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Turn any unhandled fault into a 500 JSON response."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except Exception as exc:
        _logger.exception("Server error while handling %s %s", request.method, request.path)
        return internal_error_response(exc, expose_errors=request.app[CONFIG_KEY].expose_errors)


async def handle_status_post(request: web.Request) -> web.Response:
    received_at = datetime.now(UTC)
    result = await decode_request(request)
    _logger.debug("Raw body from device: %s", redact_for_log(result.raw_text))

    if not result.structured:
        _logger.warning(
            "No JSON data received or failed to parse (kind=%s content_type=%s content_length=%s): %s",
            result.kind,
            result.content_type,
            result.content_length,
            result.error,
        )
        return decode_failure_response(result, received_at=received_at)

    payload = result.payload
    _logger.debug("Request body (%s): %s", result.kind, dump_for_log(payload))
    _logger.info(
        "Device %s reported dataSource=%s",
        payload.get("deviceID") or payload.get("device") or "Unknown",
        payload.get("dataSource") or "Unknown",
    )
    log_record(format_record(payload))

    snapshot = request.app[STORE_KEY].update(payload)
    return success_response(
        payload,
        received_at=received_at,
        snapshot=snapshot,
        transport_ip=request.remote,
        uptime=time.monotonic() - request.app[STARTED_KEY],
    )


async def handle_health(request: web.Request) -> web.Response:
    return web.json_response(
        {
            "status": "OK",
            "message": f"{SERVICE_NAME} is running",
            "timestamp": iso_now(),
        }
    )


async def handle_wifi_status(request: web.Request) -> web.Response:
    return web.json_response(request.app[STORE_KEY].status_view())


async def handle_index(request: web.Request) -> web.Response:
    html = _INDEX_HTML.format(status=STATUS_ROUTE, health=HEALTH_ROUTE, wifi=WIFI_STATUS_ROUTE, now=iso_now())
    return web.Response(text=html, content_type="text/html")


def create_app(config: ReceiverConfig | None = None, *, store: StatusStore | None = None) -> web.Application:
    """Build the receiver application.

    Parameters
    ----------
    config : ReceiverConfig or None
        Defaults to ``ReceiverConfig()``.
    store : StatusStore or None
        Injected store, mainly for tests. A fresh one is created otherwise.
    """
    cfg = config or ReceiverConfig()
    app = web.Application(
        middlewares=[request_log_middleware, error_middleware],
        client_max_size=cfg.client_max_size,
    )
    app[CONFIG_KEY] = cfg
    app[STORE_KEY] = store if store is not None else StatusStore(connected_sentinel=cfg.connected_sentinel)
    app[STARTED_KEY] = time.monotonic()

    app.router.add_post(STATUS_ROUTE, handle_status_post)
    app.router.add_get(HEALTH_ROUTE, handle_health)
    app.router.add_get(WIFI_STATUS_ROUTE, handle_wifi_status)
    app.router.add_get("/", handle_index)
    return app
