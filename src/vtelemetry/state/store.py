"""In-memory latest-status store.

Holds the single most recent payload reported by the device. Every update
builds a new immutable snapshot and swaps the reference, so a reader always
sees either the previous complete snapshot or the new one.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from vtelemetry._constants import CONNECTED_SENTINEL
from vtelemetry.ingestion.normalize import safe_str

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def iso_utc(value: datetime) -> str:
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class StatusSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    connected: bool = False
    last_update: datetime | None = None
    device: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)

    @field_serializer("last_update")
    def _serialize_last_update(self, value: datetime | None) -> str | None:
        return iso_utc(value) if value is not None else None


class StatusStore:
    """Process-wide holder of the latest :class:`StatusSnapshot`.

    ``update`` replaces the snapshot wholesale; nothing from a previous
    payload survives into the next one.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = _utcnow,
        connected_sentinel: str = CONNECTED_SENTINEL,
    ) -> None:
        self._clock = clock
        self._connected_sentinel = connected_sentinel
        self._snapshot: StatusSnapshot | None = None

    def update(self, payload: Mapping[str, Any]) -> StatusSnapshot:
        """Replace the snapshot with one built from *payload*.

        ``last_update`` is the server clock at processing time; a
        timestamp sent by the device is kept in ``details`` only.
        """
        device = payload.get("device")
        if device is None:
            device = payload.get("deviceID")
        snapshot = StatusSnapshot(
            connected=payload.get("status") == self._connected_sentinel,
            last_update=self._clock(),
            device=safe_str(device),
            details=copy.deepcopy(dict(payload)),
        )
        self._snapshot = snapshot
        _logger.debug("Status snapshot replaced device=%s connected=%s", snapshot.device, snapshot.connected)
        return snapshot

    def query(self) -> StatusSnapshot | None:
        """Return the current snapshot, or ``None`` if nothing was reported yet."""
        return self._snapshot

    def seconds_since_last_update(self, now: datetime | None = None) -> float | None:
        snapshot = self._snapshot
        if snapshot is None or snapshot.last_update is None:
            return None
        current = now if now is not None else self._clock()
        return (current - snapshot.last_update).total_seconds()

    def status_view(self) -> dict[str, Any]:
        """JSON-ready view of the snapshot for the status endpoint."""
        snapshot = self._snapshot
        if snapshot is None:
            return {
                "message": "No data received yet",
                "connected": False,
                "lastUpdate": None,
                "device": None,
                "details": {},
            }
        data = snapshot.model_dump(mode="json")
        return {
            "connected": data["connected"],
            "lastUpdate": data["last_update"],
            "device": data["device"],
            "details": data["details"],
            "secondsSinceLastUpdate": self.seconds_since_last_update(),
        }
