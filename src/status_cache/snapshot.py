# --- Standard library imports ---
import json
from pathlib import Path
from typing import Optional

# --- Project imports ---
from .entry import CacheEntry
from .errors import SnapshotError
from .logger import get_logger


# --- Snapshot layout ---
SNAPSHOT_DIR = Path.home() / ".cache" / "status_cache"

logger = get_logger("snapshot")


def default_snapshot_path(name: str) -> Path:
    return SNAPSHOT_DIR / f"{name}.json"

def load_snapshot(path: Path) -> Optional[CacheEntry]:
    """
    Return the persisted cache entry, if any.

    The snapshot only carries state across restarts.
    Missing, unreadable or corrupt files are treated as "no snapshot".
    """
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        return None
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        logger.warning(f"Snapshot unreadable at {path} ({e.__class__.__name__}); starting empty")
        return None

    try:
        return CacheEntry.from_dict(data)
    except SnapshotError as e:
        logger.warning(f"Snapshot malformed at {path} ({e}); starting empty")
        return None

def store_snapshot(path: Path, entry: CacheEntry) -> None:
    """
    Persist the cache entry.

    Best-effort only: I/O failures are logged, never raised.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(entry.to_dict(), indent=2))
    except OSError as e:
        logger.warning(f"Snapshot write failed at {path} ({e.__class__.__name__})")

def clear_snapshot(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Snapshot delete failed at {path} ({e.__class__.__name__})")
