import os

SECRET_KEY = "test-secret"
JWT_SECRET = "test-jwt-secret"
JWT_TTL_HOURS = 1

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "classroom_attendance_test"),
    "connect_timeout": 2,
}

FRONTEND_URL = "http://localhost:5173"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

STRICT_SESSION_OWNERSHIP = False

AUTO_INIT_DB = False
AUTO_SEED_DB = False
