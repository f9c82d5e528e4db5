"""Receiver configuration for vtelemetry."""

from __future__ import annotations

import dataclasses
import logging
import os
from typing import Any

from vtelemetry._constants import CONNECTED_SENTINEL, DEFAULT_CLIENT_MAX_SIZE, DEFAULT_PORT
from vtelemetry.exceptions import TelemetryConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _log_level(value: Any) -> str:
    level = str(value).strip().upper()
    if level not in logging.getLevelNamesMapping():
        raise TelemetryConfigError(f"Unknown log level {value!r}")
    return level


def _env_int(env_key: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise TelemetryConfigError(f"{env_key} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class ReceiverConfig:
    """Receiver configuration.

    Parameters
    ----------
    host : str
        Interface to bind. Defaults to all interfaces.
    port : int
        TCP port to listen on.
    connected_sentinel : str
        Value of the payload ``status`` field that marks the device as
        connected in the status snapshot.
    public_url : str or None
        Externally reachable URL (e.g. an ngrok tunnel) announced in the
        startup banner. Purely informational.
    log_level : str
        Root log level used by the CLI when ``--verbose`` is not given.
    client_max_size : int
        Largest request body aiohttp will buffer, in bytes.
    expose_errors : bool
        Include the exception message in 500 responses. The reference
        receiver does this; disable it for a stricter posture.
    """

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    connected_sentinel: str = CONNECTED_SENTINEL
    public_url: str | None = None
    log_level: str = "INFO"
    client_max_size: int = DEFAULT_CLIENT_MAX_SIZE
    expose_errors: bool = True

    @classmethod
    def from_env(cls, **overrides: Any) -> ReceiverConfig:
        """Create configuration from ``VTELEMETRY_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        TelemetryConfigError
            If a numeric variable cannot be parsed or the log level is unknown.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "VTELEMETRY_HOST": "host",
            "VTELEMETRY_CONNECTED_SENTINEL": "connected_sentinel",
            "VTELEMETRY_PUBLIC_URL": "public_url",
            "VTELEMETRY_LOG_LEVEL": "log_level",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        port_env = env.get("VTELEMETRY_PORT")
        if port_env is not None and "port" not in overrides:
            config_kwargs["port"] = _env_int("VTELEMETRY_PORT", port_env)

        max_size_env = env.get("VTELEMETRY_CLIENT_MAX_SIZE")
        if max_size_env is not None and "client_max_size" not in overrides:
            config_kwargs["client_max_size"] = _env_int("VTELEMETRY_CLIENT_MAX_SIZE", max_size_env)

        if "expose_errors" not in overrides:
            config_kwargs["expose_errors"] = _env_bool(env.get("VTELEMETRY_EXPOSE_ERRORS"), True)

        config_kwargs.update(overrides)

        if "log_level" in config_kwargs:
            config_kwargs["log_level"] = _log_level(config_kwargs["log_level"])

        return cls(**config_kwargs)
