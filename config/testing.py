import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "team_attendance_test"),
}

QR_SIGNING_SECRET = "test-qr-signing-secret"
QR_TOKEN_TTL_SECONDS = 300

CHECKIN_LEAD_MINUTES = 30
CHECKIN_TRAIL_MINUTES = 15
MAX_POSITION_ACCURACY_METERS = 100.0

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
