import logging
import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "payroll-engine-secret"

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "payroll_db")

    AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # False: overtime amount = hours x exact hourly rate, rounded once.
    OVERTIME_ROUND_RATE_FIRST = bool(int(os.environ.get("OVERTIME_ROUND_RATE_FIRST", "0")))
    PAYROLL_PAGE_SIZE = int(os.environ.get("PAYROLL_PAGE_SIZE", "10"))
    RECENT_PAYROLLS_LIMIT = int(os.environ.get("RECENT_PAYROLLS_LIMIT", "10"))


def build_logging(level: str, *, log_file: str = "") -> dict:
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "level": level,
        },
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "standard",
            "filename": log_file,
            "maxBytes": 5 * 1024 * 1024,
            "backupCount": 3,
            "encoding": "utf-8",
            "level": logging.INFO,
        }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"},
        },
        "handlers": handlers,
        "root": {"handlers": list(handlers), "level": level},
    }


SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}

DEBUG = bool(int(os.environ.get("DEBUG", "1")))

AUTO_INIT_DB = Config.AUTO_INIT_DB
LOG_LEVEL = Config.LOG_LEVEL
LOGGING = build_logging(LOG_LEVEL, log_file=os.environ.get("LOG_FILE", ""))
OVERTIME_ROUND_RATE_FIRST = Config.OVERTIME_ROUND_RATE_FIRST
PAYROLL_PAGE_SIZE = Config.PAYROLL_PAGE_SIZE
RECENT_PAYROLLS_LIMIT = Config.RECENT_PAYROLLS_LIMIT
