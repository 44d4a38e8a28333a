# --- Standard library imports ---
import sys
import logging
from typing import Optional, TextIO

# --- Project imports ---
from .config import Config


# --- Custom log levels ---
TIMING = 25   # Between INFO (20) and WARNING (30)
logging.addLevelName(TIMING, "TIME")

def timing(self, message, *args, **kwargs):
    """Add `timing` method to Logger for fetch round-trip logs."""
    if self.isEnabledFor(TIMING):
        self._log(TIMING, message, args, stacklevel=2, **kwargs)

logging.Logger.timing = timing

# Chatty dependencies kept at WARNING even when we run at DEBUG
QUIET_LOGGERS = ("urllib3", "asyncio")

# --- Filters ---
class TimingFilter(logging.Filter):
    """Drop TIMING records unless timing output is enabled."""
    def __init__(self, enabled: bool):
        super().__init__()
        self.enabled = enabled

    def filter(self, record: logging.LogRecord) -> bool:
        return self.enabled or record.levelno != TIMING

# --- Format configuration constants ---
LOG_LEVEL_EMOJIS = {
    logging.DEBUG: "🧱",
    logging.INFO: "🟢",
    TIMING: "⚡️",
    logging.WARNING: "⚠️ ",
    logging.ERROR: "❌",
    logging.CRITICAL: "🔥",
}

LEVEL_NAME_MAP = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
}

# --- Formatters ---
class EmojiFormatter(logging.Formatter):
    """
    Prepends a per-level emoji, shortens level names and strips the
    package prefix from logger names (status_cache.cache.admin → cache.admin).
    """
    PREFIX = "status_cache."

    def format(self, record: logging.LogRecord) -> str:
        record.levelemoji = LOG_LEVEL_EMOJIS.get(record.levelno, "")
        record.levelname = LEVEL_NAME_MAP.get(record.levelname, record.levelname)
        record.shortname = record.name.removeprefix(self.PREFIX)
        return super().format(record)

# --- Public logging setup API ---
def setup_logging(
    level=logging.INFO,
    timing: Optional[bool] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure root logging for the supervisor and tests.

    Args:
        level: root level.
        timing: show TIMING lines; defaults to Config.LOG_TIMING.
        stream: output stream; defaults to stdout.
    """
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        EmojiFormatter(
            fmt="%(asctime)s %(levelemoji)s %(shortname)s:%(funcName)s → %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    handler.addFilter(TimingFilter(enabled=Config.LOG_TIMING if timing is None else timing))
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

def get_logger(name: str) -> logging.Logger:
    """
    Return a logger under the status_cache namespace.
    """
    return logging.getLogger(f"status_cache.{name}")
