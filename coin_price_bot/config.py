import logging
import os
import sys
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _env_number(name: str, default, cast=int):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}={raw!r}, using default {default}")
        return default


PORT = _env_number("PORT", 8080)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

TRACKED_COIN = os.getenv("TRACKED_COIN", "zcash").strip().lower()

CACHE_TTL = timedelta(seconds=_env_number("CACHE_TTL_SECONDS", 300))
NOTIFY_TICK_SECONDS = _env_number("NOTIFY_TICK_SECONDS", 30)
DEFAULT_INTERVAL = timedelta(seconds=_env_number("DEFAULT_INTERVAL_SECONDS", 120))
MIN_INTERVAL = timedelta(seconds=_env_number("MIN_INTERVAL_SECONDS", 30))
MAX_INTERVAL = timedelta(seconds=_env_number("MAX_INTERVAL_SECONDS", 86400))

# источники иногда отдают 0 вместо цены
PRICE_FLOOR = _env_number("PRICE_FLOOR", 0.1, cast=float)

REQUEST_TIMEOUT = _env_number("REQUEST_TIMEOUT", 15, cast=float)


def get_token() -> str:
    token = os.getenv("TELEGRAM_TOKEN")
    if not token:
        logger.critical("TELEGRAM_TOKEN is not set")
        sys.exit(1)
    return token
