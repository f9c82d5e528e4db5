"""State layer.

Single owner of the "latest known status" reported by the device.
"""

from vtelemetry.state.quality import connection_quality
from vtelemetry.state.store import StatusSnapshot, StatusStore

__all__ = ["StatusSnapshot", "StatusStore", "connection_quality"]
