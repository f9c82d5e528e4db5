"""Command line entry point: ``python -m vtelemetry``."""

from __future__ import annotations

import argparse
import logging

from aiohttp import web

from vtelemetry.config import ReceiverConfig
from vtelemetry.server.app import create_app

_logger = logging.getLogger("vtelemetry")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Receive and log ESP32 vehicle telemetry over HTTP")
    parser.add_argument("--host", help="Interface to bind (default: VTELEMETRY_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to listen on (default: VTELEMETRY_PORT or 3000)")
    parser.add_argument("--public-url", help="Tunnel/proxy URL to announce at startup")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


def _log_banner(config: ReceiverConfig) -> None:
    _logger.info("===== ESP32 DATA RECEIVER SERVER =====")
    _logger.info("Server running on %s:%d", config.host, config.port)
    _logger.info("Local URL: http://localhost:%d", config.port)
    if config.public_url:
        _logger.info("Public URL: %s", config.public_url)
    _logger.info("Waiting for ESP32 data...")


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    overrides = {
        name: value
        for name, value in (("host", args.host), ("port", args.port), ("public_url", args.public_url))
        if value is not None
    }
    config = ReceiverConfig.from_env(**overrides)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    _log_banner(config)
    web.run_app(create_app(config), host=config.host, port=config.port, print=None)
    _logger.info("Server shut down")


if __name__ == "__main__":
    main()
