"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000

DEFAULT_CHECKIN_LEAD_MINUTES = 30
DEFAULT_CHECKIN_TRAIL_MINUTES = 15
DEFAULT_QR_TOKEN_TTL_SECONDS = 300
DEFAULT_CHECKIN_RADIUS_METERS = 100
DEFAULT_MAX_POSITION_ACCURACY_METERS = 100

LATE_10_THRESHOLD_MINUTES = 10
LATE_30_THRESHOLD_MINUTES = 30

# QR check-ins reporting a position beyond radius * buffer are flagged.
QR_POSITION_FLAG_BUFFER = 1.2

QR_TOKEN_SALT = "event-check-in"
