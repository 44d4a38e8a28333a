# ─── Future imports ───
from __future__ import annotations

# ─── Standard library imports ───
from enum import Enum, auto
from dataclasses import dataclass

# ─── Project imports ───
from .config import Config
from .entry import CacheEntry
from .tristate import TriState


class GraceOutcome(Enum):
    """
    Result of applying a failed fetch to a cache entry.

    • OPENED     : first failure since the last success; grace window starts
    • EXTENDED   : failure inside the window; deadline pushed out (once)
    • HELD       : failure inside an already extended window; deadline untouched
    • LAPSED     : failure after the window closed; value degrades to UNKNOWN
    • NO_FALLBACK: no last known good value; error surfaces to the caller
    """
    OPENED = auto()
    EXTENDED = auto()
    HELD = auto()
    LAPSED = auto()
    NO_FALLBACK = auto()

    def __str__(self) -> str:
        return self.name

    @property
    def serving_last_known_good(self) -> bool:
        return self in (GraceOutcome.OPENED, GraceOutcome.EXTENDED, GraceOutcome.HELD)


@dataclass(frozen=True)
class GracePolicy:
    """
    Policy deciding what a cache entry reports across fetch outcomes.

    Staleness is evaluated lazily on access: nothing here schedules
    timers, every method takes `now` from the caller.
    """

    # Maximum age of a successful result before it stops being served
    freshness_window_s: float = Config.FRESHNESS_WINDOW_S

    # How long last_known_good survives a failed refresh
    grace_window_s: float = Config.GRACE_WINDOW_S

    # ─── Read-side predicates ───

    def is_fresh(self, entry: CacheEntry, now: float) -> bool:
        """
        True iff a successful fetch is younger than the freshness window
        and no refresh has failed since.
        """
        if entry.fetched_at is None or entry.grace_deadline is not None:
            return False
        return (now - entry.fetched_at) < self.freshness_window_s

    def in_grace(self, entry: CacheEntry, now: float) -> bool:
        return entry.grace_deadline is not None and now <= entry.grace_deadline

    def grace_expired(self, entry: CacheEntry, now: float) -> bool:
        return entry.grace_deadline is not None and now > entry.grace_deadline

    def visible_value(self, entry: CacheEntry, now: float) -> TriState:
        """
        Value reported to consumers.

        • fresh            → value
        • inside grace     → last_known_good
        • anything else    → UNKNOWN
        """
        if self.is_fresh(entry, now):
            return entry.value
        if self.in_grace(entry, now):
            return entry.last_known_good
        return TriState.UNKNOWN

    # ─── Write-side transitions ───

    def apply_success(self, entry: CacheEntry, value: TriState, now: float) -> None:
        entry.value = value
        entry.last_known_good = value
        entry.fetched_at = now
        entry.grace_deadline = None
        entry.grace_extended = False

    def apply_failure(self, entry: CacheEntry, now: float) -> GraceOutcome:
        """
        Apply a failed fetch.

        A grace window opens on the first failure after a success and may be
        extended once by a failure inside it. It never stacks and never
        reopens after lapsing; only a success starts the cycle again.
        last_known_good is never touched here.
        """
        if not entry.last_known_good.is_known:
            entry.value = TriState.UNKNOWN
            return GraceOutcome.NO_FALLBACK

        if entry.grace_deadline is None:
            entry.grace_deadline = now + self.grace_window_s
            return GraceOutcome.OPENED

        if now > entry.grace_deadline:
            entry.value = TriState.UNKNOWN
            return GraceOutcome.LAPSED

        if not entry.grace_extended:
            entry.grace_deadline = now + self.grace_window_s
            entry.grace_extended = True
            return GraceOutcome.EXTENDED

        return GraceOutcome.HELD

    # ─── Introspection / debugging helpers ───

    def summary(self) -> dict[str, float]:
        """
        Return a structured summary of the effective policy values.
        Useful for logs and startup diagnostics.
        """
        return {
            "freshness_window_s": self.freshness_window_s,
            "grace_window_s": self.grace_window_s,
        }

# Global default instance
grace_policy = GracePolicy()
