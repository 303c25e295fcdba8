import os

from config.config import *  # noqa: F401,F403
from config.config import build_logging

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()
LOGGING = build_logging(LOG_LEVEL, log_file=os.getenv("LOG_FILE", ""))
