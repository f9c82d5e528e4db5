"""vtelemetry - HTTP receiver for ESP32 vehicle telemetry."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("vtelemetry")
except PackageNotFoundError:
    __version__ = "0+local"
from vtelemetry.config import ReceiverConfig
from vtelemetry.exceptions import PayloadDecodeError, TelemetryConfigError, TelemetryError
from vtelemetry.ingestion.body import BytesBody, DecodeResult, StructuredBody, TextBody, decode_body
from vtelemetry.ingestion.classify import Branch, TelemetryRecord, classify, format_record
from vtelemetry.server.app import create_app
from vtelemetry.state import StatusSnapshot, StatusStore, connection_quality

__all__ = [
    "__version__",
    "Branch",
    "BytesBody",
    "DecodeResult",
    "PayloadDecodeError",
    "ReceiverConfig",
    "StatusSnapshot",
    "StatusStore",
    "StructuredBody",
    "TelemetryConfigError",
    "TelemetryError",
    "TelemetryRecord",
    "TextBody",
    "classify",
    "connection_quality",
    "create_app",
    "decode_body",
    "format_record",
]
