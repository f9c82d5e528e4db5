"""Custom exception hierarchy for vtelemetry."""

from __future__ import annotations


class TelemetryError(Exception):
    """Base exception for all vtelemetry errors."""


class TelemetryConfigError(TelemetryError):
    """Invalid or missing configuration."""


class PayloadDecodeError(TelemetryError):
    """Request body could not be turned into a structured payload.

    The request path never raises this; decode failures travel inside
    :class:`~vtelemetry.ingestion.body.DecodeResult`. It exists for callers
    that prefer exceptions via ``DecodeResult.raise_for_error()``.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: str = "",
        content_type: str | None = None,
    ) -> None:
        self.kind = kind
        self.content_type = content_type
        super().__init__(message)
