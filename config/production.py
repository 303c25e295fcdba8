import os

from config.config import *  # noqa: F401,F403
from config.config import build_logging

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOGGING = build_logging(LOG_LEVEL, log_file=os.getenv("LOG_FILE", "payroll_engine.log"))
