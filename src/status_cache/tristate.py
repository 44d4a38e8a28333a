# ─── Standard library imports ───
from enum import Enum, auto


class TriState(Enum):
    """
    Permission status as reported by the cache.

    • UNKNOWN: no data yet, or data no longer trusted
    • TRUE   : confirmed positive
    • FALSE  : confirmed negative

    UNKNOWN is distinct from FALSE so that "not checked yet"
    never reads as a confirmed denial.
    """
    UNKNOWN = auto()
    TRUE = auto()
    FALSE = auto()

    def __str__(self) -> str:
        return self.name

    @property
    def is_known(self) -> bool:
        return self is not TriState.UNKNOWN

    @classmethod
    def from_bool(cls, value: bool | None) -> "TriState":
        if value is None:
            return cls.UNKNOWN
        return cls.TRUE if value else cls.FALSE

TRISTATE_EMOJI = {
    TriState.UNKNOWN: "⚪",
    TriState.TRUE:    "💚",
    TriState.FALSE:   "🔴",
}
