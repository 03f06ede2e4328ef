import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "team_attendance"),
}

# HMAC key for check-in QR tokens
QR_SIGNING_SECRET = os.getenv("QR_SIGNING_SECRET", "dev-qr-signing-secret")
QR_TOKEN_TTL_SECONDS = int(os.getenv("QR_TOKEN_TTL_SECONDS", "300"))

CHECKIN_LEAD_MINUTES = int(os.getenv("CHECKIN_LEAD_MINUTES", "30"))
CHECKIN_TRAIL_MINUTES = int(os.getenv("CHECKIN_TRAIL_MINUTES", "15"))
MAX_POSITION_ACCURACY_METERS = float(os.getenv("MAX_POSITION_ACCURACY_METERS", "100"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
