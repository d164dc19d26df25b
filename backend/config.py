"""
Application settings.

All values are read from the environment (a local .env file is loaded first), so the
same code runs against PostgreSQL in production and SQLite in the test suite.
"""

import os
from decimal import Decimal

import pytz
from dotenv import load_dotenv

load_dotenv()

# Database connection settings
POSTGRES_USER = os.getenv("POSTGRES_USER", "postgres")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
POSTGRES_SERVER = os.getenv("POSTGRES_SERVER", "localhost")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")
POSTGRES_DB = os.getenv("POSTGRES_DB", "ledger_db")

# DATABASE_URL wins over the individual POSTGRES_* settings when present
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+psycopg2://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_SERVER}:{POSTGRES_PORT}/{POSTGRES_DB}",
)
AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "true").lower() in ("1", "true", "yes")

APP_TIMEZONE = pytz.timezone(os.getenv("APP_TIMEZONE", "Asia/Jakarta"))

# Ledger rules
BALANCE_TOLERANCE = Decimal(os.getenv("BALANCE_TOLERANCE", "0.01"))
JOURNAL_NUMBER_MAX_ATTEMPTS = int(os.getenv("JOURNAL_NUMBER_MAX_ATTEMPTS", "5"))

# Share of total expense treated as fixed cost by the break-even estimate.
# Placeholder until accounts carry a real fixed/variable classification.
FIXED_COST_RATIO = Decimal(os.getenv("FIXED_COST_RATIO", "0.6"))

# Logging / HTTP
LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ALLOWED_ORIGINS = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173"
)
