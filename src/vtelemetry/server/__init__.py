"""HTTP surface of the receiver."""

from vtelemetry.server.app import CONFIG_KEY, STORE_KEY, create_app

__all__ = ["CONFIG_KEY", "STORE_KEY", "create_app"]
