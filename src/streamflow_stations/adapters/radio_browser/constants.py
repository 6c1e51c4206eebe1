"""Constants for the Radio Browser adapter.

Radio Browser runs several independent, functionally equivalent API servers.
API Documentation: https://api.radio-browser.info/

No authentication required.
"""

# Mirror base URLs (JSON station endpoints)
RADIO_BROWSER_MIRRORS = (
    "https://de1.api.radio-browser.info/json/stations",
    "https://nl1.api.radio-browser.info/json/stations",
    "https://at1.api.radio-browser.info/json/stations",
)

# Per-mirror request budget in seconds
MIRROR_TIMEOUT_SECONDS = 2.0

# HTTP headers
DEFAULT_HEADERS = {
    "Accept": "application/json",
}
DEFAULT_USER_AGENT = "streamflow-stations/1.0"
