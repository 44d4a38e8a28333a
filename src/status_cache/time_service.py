# --- Standard library imports ---
import os
import time
from zoneinfo import ZoneInfo
from datetime import datetime


class TimeService:
    """
    Clock used by the status cache.

    - TZ loaded once during class initialization
    - Provides:
        * now()                    epoch seconds, persisted in snapshots
        * now_local()
        * format_local()
        * epoch_to_local_string()  for telemetry lines
    """

    def __init__(self):
        tz_name = os.getenv("TZ", "UTC")
        try:
            self.tz = ZoneInfo(tz_name)
        except Exception:
            self.tz = ZoneInfo("UTC")

    # -------------------------
    # Wall clock utilities
    # -------------------------

    def now(self) -> float:
        """Current wall-clock time in epoch seconds."""
        return time.time()

    def now_local(self):
        """
        Returns:
            datetime: local timezone datetime
            str: formatted "MM/DD/YY @ HH:MM:SS TZ"
        """
        dt = datetime.now(self.tz)
        return dt, self.format_local(dt)

    def format_local(self, dt: datetime) -> str:
        """Format a datetime into the service log format."""
        return dt.strftime("%m/%d/%y @ %H:%M:%S %Z")

    # -------------------------------
    # Epoch conversion utility
    # -------------------------------

    def epoch_to_local_string(self, ts: float | None) -> str:
        """
        Convert an epoch timestamp to 'MM/DD/YY @ HH:MM:SS TZ'.

        None renders as 'never'.
        """
        if ts is None:
            return "never"
        return self.format_local(datetime.fromtimestamp(ts, self.tz))
