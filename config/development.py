import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# "memory" keeps everything in-process; "mysql" uses DB_CONFIG
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock_db"),
}

# Calendar days (and therefore daily totals) are cut in this zone
TIMEZONE = os.getenv("TIMEZONE", "Asia/Seoul")

# The PIN-pad SPA calls the API without a session; keep admin routes open locally
ADMIN_AUTH_REQUIRED = bool(int(os.getenv("ADMIN_AUTH_REQUIRED", "0")))

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo employees on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))
