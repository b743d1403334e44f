# config.py
"""
Application configuration loaded from the environment.

Values are read once at import time; a local `.env` file is honoured
through python-dotenv.
"""
import os
from urllib.parse import quote_plus

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _get_int(name: str, default: int) -> int:
     value = os.getenv(name)
     if value is None or value.strip() == "":
          return default
     return int(value)


def _get_int_set(name: str, default: str) -> frozenset:
     raw = os.getenv(name, default)
     return frozenset(int(part) for part in raw.split(",") if part.strip())


def _build_database_url() -> str:
     url = os.getenv("DATABASE_URL")
     if url:
          return url

     server = os.getenv("DB_SERVER", "localhost")
     port = os.getenv("DB_PORT", "1433")
     user = quote_plus(os.getenv("DB_USER", ""))
     password = quote_plus(os.getenv("DB_PASS", ""))
     name = os.getenv("DB_NAME", "invoices")
     return f"mssql+pymssql://{user}:{password}@{server}:{port}/{name}"


# Database
DATABASE_URL = _build_database_url()
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# Auth (tokens are issued elsewhere; we only verify them)
JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# HTTP
CORS_ORIGINS = [origin for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin]
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Invoicing rules
DEFAULT_DUE_DAYS = _get_int("DEFAULT_DUE_DAYS", 30)
RECOGNIZED_GST_RATES = _get_int_set("RECOGNIZED_GST_RATES", "0,5,12,18,28")
INVOICE_NUMBER_PREFIX = os.getenv("INVOICE_NUMBER_PREFIX", "INV")

# Pagination
DEFAULT_PAGE_LIMIT = _get_int("DEFAULT_PAGE_LIMIT", 10)
MAX_PAGE_LIMIT = _get_int("MAX_PAGE_LIMIT", 100)
