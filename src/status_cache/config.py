# --- Standard library imports ---
import os

# --- Third-party imports ---
from dotenv import load_dotenv


# Load .env once
load_dotenv()

class Config:
    """Centralized config for the status cache and its status-check backend"""

    # --- Backend ---
    API_BASE_URL = os.getenv("STATUS_API_BASE_URL", "http://localhost:5000")
    API_TOKEN = os.getenv("STATUS_API_TOKEN")

    # --- Network Policy (NOT user configurable) ---
    API_TIMEOUT = 8   # seconds (safe, balanced)

    # --- Retry Policy (network errors, 408 and 5xx only) ---
    try:
        API_RETRY_ATTEMPTS = int(os.getenv("API_RETRY_ATTEMPTS", 2))
    except ValueError:
        API_RETRY_ATTEMPTS = 2

    try:
        API_RETRY_DELAY_S = float(os.getenv("API_RETRY_DELAY_S", 1.0))
    except ValueError:
        API_RETRY_DELAY_S = 1.0

    # --- Cache Policy ---
    try:
        FRESHNESS_WINDOW_S = int(os.getenv("FRESHNESS_WINDOW_S", 300))
    except ValueError:
        FRESHNESS_WINDOW_S = 300

    try:
        GRACE_WINDOW_S = int(os.getenv("GRACE_WINDOW_S", 30))
    except ValueError:
        GRACE_WINDOW_S = 30

    # --- Supervisor loop ---
    try:
        REFRESH_INTERVAL_S = int(os.getenv("REFRESH_INTERVAL_S", 60))
    except ValueError:
        REFRESH_INTERVAL_S = 60

    # --- Persistence ---
    SNAPSHOT_ENABLED = os.getenv("SNAPSHOT_ENABLED", "false").lower() == "true"

    # --- Observability Policy ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_TIMING = os.getenv("LOG_TIMING", "false").lower() == "true"
