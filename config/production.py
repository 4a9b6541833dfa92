import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
JWT_SECRET = os.getenv("JWT_SECRET", "please-set-JWT_SECRET")
JWT_TTL_HOURS = int(os.getenv("JWT_TTL_HOURS", "24"))

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "classroom_attendance"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
}

FRONTEND_URL = os.getenv("FRONTEND_URL", "https://attendance.example.com")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "classroom_attendance.log")

STRICT_SESSION_OWNERSHIP = bool(int(os.getenv("STRICT_SESSION_OWNERSHIP", "1")))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
