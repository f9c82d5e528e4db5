"""Internal constants shared across the package."""

DEFAULT_PORT = 3000
DEFAULT_CLIENT_MAX_SIZE = 1024**2
CONNECTED_SENTINEL = "connected"

# Placeholder rendered for fields the device did not send.
MISSING_MARKER = "N/A"

STATUS_ROUTE = "/esp32-status"
HEALTH_ROUTE = "/health"
WIFI_STATUS_ROUTE = "/wifi-status"

SERVICE_NAME = "ESP32 Data Receiver Server"

# ------------------------------------------------------------------
# Connection quality  (RSSI in dBm, strictly-greater-than boundaries)
# ------------------------------------------------------------------

QUALITY_UNKNOWN = "Unknown"
QUALITY_TIERS: tuple[tuple[float, str], ...] = (
    (-50, "Excellent"),
    (-60, "Very Good"),
    (-70, "Good"),
    (-80, "Fair"),
)
QUALITY_FLOOR = "Poor"

# ------------------------------------------------------------------
# Content types the body decoder recognises (parameters stripped)
# ------------------------------------------------------------------

JSON_CONTENT_TYPES: frozenset[str] = frozenset({"application/json", "text/json"})
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
TEXT_CONTENT_TYPE = "text/plain"
