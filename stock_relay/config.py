# stock_relay/config.py
import os
import pytz
from dotenv import load_dotenv

load_dotenv()

# Shared secret expected verbatim in the Authorization header
AUTH_KEY = os.getenv("STOCK_RELAY_AUTH_KEY", "GAMERSBERG")

# GET requests carrying ?key=<PUBLIC_ACCESS_KEY> skip the header check
PUBLIC_ACCESS_KEY = os.getenv("PUBLIC_ACCESS_KEY", "status")

CLEANUP_INTERVAL_SECONDS = int(os.getenv("CLEANUP_INTERVAL_SECONDS", "300"))
DATA_EXPIRY_SECONDS = int(os.getenv("DATA_EXPIRY_SECONDS", "600"))

# pytz raises UnknownTimeZoneError here for a bad name, before the scheduler starts
SCHEDULER_TIMEZONE = str(pytz.timezone(os.getenv("SCHEDULER_TIMEZONE", "UTC")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

STOCKS_PATH = "/api/stocks/bloxfruits"

VIEWER_BASE_URL = os.getenv("VIEWER_BASE_URL", "http://localhost:8000")
VIEWER_REFRESH_SECONDS = int(os.getenv("VIEWER_REFRESH_SECONDS", "15"))
