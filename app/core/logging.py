import sys
from logging.config import dictConfig
from app.core.config import APP_ENV, BILLING_LOG_LEVEL

LOG_LEVEL = "DEBUG" if APP_ENV == "development" else "INFO"


def setup_logging():
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,

            # -----------------
            # FORMATTERS
            # -----------------
            "formatters": {
                "default": {
                    "format": (
                        "%(asctime)s | %(levelname)s | "
                        "%(name)s | %(message)s"
                    ),
                },
                "access": {
                    "format": (
                        "%(asctime)s | ACCESS | "
                        "%(client_addr)s | %(method)s | "
                        "%(path)s | %(status_code)s | "
                        "%(process_time_ms)sms"
                    ),
                },
            },

            # -----------------
            # HANDLERS
            # -----------------
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "default",
                },
                "access_console": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "access",
                },
            },

            # -----------------
            # LOGGERS
            # -----------------
            "loggers": {
                # Used by request_logging_middleware
                "access": {
                    "handlers": ["access_console"],
                    "level": "INFO",
                    "propagate": False,
                },
                # Engine echo is noisy; pool debugging goes through DB_ECHO_POOL
                "sqlalchemy.engine": {
                    "level": "WARNING",
                },
                "aiosqlite": {
                    "level": "WARNING",
                },
                # Screen services: created / paid / voided events
                "app.services": {
                    "level": LOG_LEVEL,
                },
                # Per-save discount and payment computations
                "app.services.billing": {
                    "level": BILLING_LOG_LEVEL,
                },
                # Customer view pub/sub churn on every SSE connect
                "app.services.support": {
                    "level": "INFO",
                },
            },

            # -----------------
            # ROOT LOGGER
            # -----------------
            "root": {
                "level": LOG_LEVEL,
                "handlers": ["console"],
            },
        }
    )
