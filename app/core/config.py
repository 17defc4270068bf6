# app/core/config.py

import os
import logging
from decimal import Decimal
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()

# =====================================================
# APPLICATION
# =====================================================
APP_ENV = os.getenv("APP_ENV")
if APP_ENV not in {"development", "staging", "production"}:
    raise ValueError("APP_ENV must be development | staging | production")

IS_PRODUCTION = APP_ENV == "production"

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")

# Discount / payment computation logs; raise to WARNING to silence per-save lines
BILLING_LOG_LEVEL = os.getenv("BILLING_LOG_LEVEL", "INFO").upper()
if BILLING_LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR"}:
    raise ValueError("BILLING_LOG_LEVEL must be DEBUG | INFO | WARNING | ERROR")

# =====================================================
# DATABASE
# =====================================================
DB_TYPE = os.getenv("DB_TYPE")
if DB_TYPE not in {"postgres", "sqlite"}:
    raise ValueError("DB_TYPE must be postgres | sqlite")

if DB_TYPE == "postgres":
    DATABASE_URL = os.getenv("DATABASE_URL")
    if not DATABASE_URL:
        raise ValueError("DATABASE_URL is required for Postgres")

elif DB_TYPE == "sqlite":
    if IS_PRODUCTION:
        raise ValueError("SQLite is NOT allowed in production")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./lounge.db")

# ---- Pool tuning (safe defaults) ----
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", 10))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", 20))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", 30))
DB_ECHO_POOL = os.getenv("DB_ECHO_POOL", "false").lower() == "true"

# ---- SSL ----
DB_SSL_VERIFY = os.getenv("DB_SSL_VERIFY", "true").lower() == "true"
if IS_PRODUCTION and not DB_SSL_VERIFY:
    logger.warning(
        "Running in production with relaxed SSL verification "
        "(Supabase asyncpg compatibility mode)"
    )

# =====================================================
# BILLING
# =====================================================
HOURLY_RATE = Decimal(os.getenv("HOURLY_RATE", "20"))
FREE_MINUTES = int(os.getenv("FREE_MINUTES", 5))
DOWN_PAYMENT = Decimal(os.getenv("DOWN_PAYMENT", "50"))

if HOURLY_RATE < 0 or FREE_MINUTES < 0 or DOWN_PAYMENT < 0:
    raise ValueError("HOURLY_RATE, FREE_MINUTES and DOWN_PAYMENT must be >= 0")

CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₱")

# =====================================================
# RECEIPTS
# =====================================================
RECEIPT_DIR = os.getenv("RECEIPT_DIR", "generated_receipts")
BUSINESS_NAME = os.getenv("BUSINESS_NAME", "Study Hub Lounge")
