# --- Standard library imports ---
import logging
from typing import Iterable


def tlog(
    logger: logging.Logger,
    emoji: str,
    subsystem: str,
    state: str,
    primary: str = "—--",
    meta: str | Iterable[str] | None = None,
    level: int = logging.INFO,
) -> None:
    """
    Emit one aligned cache telemetry line.

    Format:
        SUBSYSTEM STATE PRIMARY | meta | meta

    `meta` may be a single string or several fragments; empty fragments
    are skipped.
    """
    if not logger.isEnabledFor(level):
        return

    msg = f"{subsystem:<10} {state:<12} {primary:<20}"

    fragments = [meta] if isinstance(meta, str) else list(meta or ())
    fragments = [f for f in fragments if f]
    if fragments:
        msg += " | " + " | ".join(fragments)

    logger.log(level, f"{emoji} {msg}", stacklevel=2)
