"""Constants for the transport.opendata.ch adapter.

API Documentation: https://transport.opendata.ch/docs.html
No authentication required; the public instance allows roughly 1000 requests per day
per client for connections, so the return trip is served from cache between full refreshes.
"""

TRANSPORT_BASE_URL = "https://transport.opendata.ch/v1"
STATIONBOARD_PATH = "/stationboard"  # GET ?station=...&limit=...&datetime=...
CONNECTIONS_PATH = "/connections"  # GET ?from=...&to=...&via[]=...&limit=...

DEFAULT_HEADERS = {
    "Accept": "application/json",
}

# Minimum spacing between requests (seconds)
TRANSPORT_API_MIN_DELAY_SECONDS = 0.2
