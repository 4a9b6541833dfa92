import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
JWT_SECRET = os.getenv("JWT_SECRET", "dev-jwt-secret")
JWT_TTL_HOURS = int(os.getenv("JWT_TTL_HOURS", "24"))

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "classroom_attendance"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
}

FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FILE = os.getenv("LOG_FILE")

# Re-check that the caller owns the active session's class on every
# mark/summary/done, not only at start.
STRICT_SESSION_OWNERSHIP = bool(int(os.getenv("STRICT_SESSION_OWNERSHIP", "0")))

# If enabled, app will apply database/schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed a demo teacher, students and class on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
