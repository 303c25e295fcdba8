from config.config import *  # noqa: F401,F403
from config.config import build_logging

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

LOG_LEVEL = "WARNING"
LOGGING = build_logging(LOG_LEVEL)
