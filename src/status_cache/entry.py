# ─── Future imports ───
from __future__ import annotations

# ─── Standard library imports ───
from dataclasses import dataclass, replace
from typing import Any, Optional

# ─── Project imports ───
from .errors import SnapshotError
from .tristate import TriState


@dataclass
class CacheEntry:
    """
    Mutable state of one permission-check instance.

    Invariants:
    • last_known_good is overwritten only by a successful fetch
      and cleared only by reset()
    • grace_deadline is set only right after a failed fetch that had
      a known last_known_good, and cleared by the next success
    • grace_extended marks that the one allowed extension was used
    """
    value: TriState = TriState.UNKNOWN
    last_known_good: TriState = TriState.UNKNOWN
    fetched_at: Optional[float] = None
    grace_deadline: Optional[float] = None
    grace_extended: bool = False

    def reset(self) -> None:
        self.value = TriState.UNKNOWN
        self.last_known_good = TriState.UNKNOWN
        self.fetched_at = None
        self.grace_deadline = None
        self.grace_extended = False

    def copy(self) -> CacheEntry:
        return replace(self)

    # ─── Snapshot (de)serialization ───

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value.name,
            "last_known_good": self.last_known_good.name,
            "fetched_at": self.fetched_at,
            "grace_deadline": self.grace_deadline,
            "grace_extended": self.grace_extended,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CacheEntry:
        """
        Rebuild an entry from a snapshot payload.

        Raises:
            SnapshotError: on missing keys, unknown states, bad timestamps
                or a non-boolean grace_extended flag
        """
        if not isinstance(data, dict):
            raise SnapshotError(f"Snapshot must be an object, got {type(data).__name__}")

        try:
            value = TriState[data["value"]]
            last_known_good = TriState[data["last_known_good"]]
        except (KeyError, TypeError) as e:
            raise SnapshotError(f"Snapshot has invalid state field: {e}") from e

        return cls(
            value=value,
            last_known_good=last_known_good,
            fetched_at=_timestamp(data.get("fetched_at"), "fetched_at"),
            grace_deadline=_timestamp(data.get("grace_deadline"), "grace_deadline"),
            grace_extended=_flag(data.get("grace_extended", False), "grace_extended"),
        )


def _timestamp(raw: Any, field: str) -> Optional[float]:
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise SnapshotError(f"Snapshot field {field} is not a timestamp: {raw!r}")
    return float(raw)


def _flag(raw: Any, field: str) -> bool:
    if not isinstance(raw, bool):
        raise SnapshotError(f"Snapshot field {field} is not a boolean: {raw!r}")
    return raw
