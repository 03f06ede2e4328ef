import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "team_attendance"),
}

QR_SIGNING_SECRET = os.getenv("QR_SIGNING_SECRET", "please-set-QR_SIGNING_SECRET")
QR_TOKEN_TTL_SECONDS = int(os.getenv("QR_TOKEN_TTL_SECONDS", "300"))

CHECKIN_LEAD_MINUTES = int(os.getenv("CHECKIN_LEAD_MINUTES", "30"))
CHECKIN_TRAIL_MINUTES = int(os.getenv("CHECKIN_TRAIL_MINUTES", "15"))
MAX_POSITION_ACCURACY_METERS = float(os.getenv("MAX_POSITION_ACCURACY_METERS", "100"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
