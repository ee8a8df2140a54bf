import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "plantation_hr"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Weekly rest day (0=Monday .. 6=Sunday)
WEEKLY_REST_DAY = int(os.getenv("WEEKLY_REST_DAY", "6"))
PROBATION_MONTHS = int(os.getenv("PROBATION_MONTHS", "3"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also load database/seed.sql on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
