# ─── Future imports ───
from __future__ import annotations

# ─── Standard library imports ───
import time
import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

# ─── Project imports ───
from .telemetry import tlog
from .logger import get_logger
from .entry import CacheEntry
from .time_service import TimeService
from .coordinator import RequestCoordinator
from .tristate import TriState, TRISTATE_EMOJI
from .notifications import Listener, NotificationHub, Subscription
from .grace_policy import GraceOutcome, GracePolicy, grace_policy
from .errors import CacheDisposedError, StatusCheckError
from .snapshot import clear_snapshot, load_snapshot, store_snapshot


Fetch = Callable[[], Awaitable[Any]]

GRACE_EMOJI = {
    GraceOutcome.OPENED:      "🟡",
    GraceOutcome.EXTENDED:    "🟠",
    GraceOutcome.HELD:        "🟠",
    GraceOutcome.LAPSED:      "🔴",
    GraceOutcome.NO_FALLBACK: "🔴",
}


class StatusCache:
    """
    Tri-state permission cache with request de-duplication and a
    grace period after failed refreshes.

    One instance per logical permission check (admin status, a redemption
    code, ...), constructed once per session and passed to its consumers.

    Lifecycle:
        cache = StatusCache(fetch).init()
        ...
        cache.dispose()

    All state lives on the event loop thread. The only suspension point is
    the wrapped `fetch` call; every read-modify-write of the entry around it
    is synchronous.
    """

    def __init__(
            self,
            fetch: Fetch,
            policy: Optional[GracePolicy] = None,
            clock: Optional[TimeService] = None,
            snapshot_path: Optional[Path] = None,
            name: str = "status",
        ):
        # ─── Dependencies / Configuration ───
        self.name = name
        self.fetch = fetch
        self.policy = policy or grace_policy
        self.clock = clock or TimeService()
        self.snapshot_path = snapshot_path

        # ─── Observability ───
        self.logger = get_logger(f"cache.{name}")

        # ─── Runtime State ───
        self._entry = CacheEntry()
        self._hub = NotificationHub()
        self._coordinator: RequestCoordinator[TriState] = RequestCoordinator(name)
        self.last_error: Optional[Exception] = None

        self.initialized = False
        self.disposed = False

    # ──────────────────────────────────────────────────────────────
    # Lifecycle
    # ──────────────────────────────────────────────────────────────

    def init(self) -> StatusCache:
        """
        Restore persisted state (if configured). Safe to call twice.

        A corrupt snapshot is logged and ignored; startup never fails on it.
        """
        if self.initialized and not self.disposed:
            return self

        if self.snapshot_path is not None:
            restored = load_snapshot(self.snapshot_path)
            if restored is not None:
                self._entry = restored
                tlog(
                    self.logger,
                    TRISTATE_EMOJI[restored.last_known_good],
                    "CACHE",
                    "RESTORED",
                    primary=f"value={restored.value}",
                    meta=f"last_known_good={restored.last_known_good}",
                )

        self.initialized = True
        self.disposed = False
        return self

    def dispose(self) -> None:
        """
        Detach from any in-flight call and drop all listeners.
        """
        self._coordinator.abandon()
        self._hub.clear()
        self.disposed = True

    def __enter__(self) -> StatusCache:
        return self.init()

    def __exit__(self, *exc) -> None:
        self.dispose()

    async def __aenter__(self) -> StatusCache:
        return self.init()

    async def __aexit__(self, *exc) -> None:
        self.dispose()

    # ──────────────────────────────────────────────────────────────
    # Reads (synchronous, never trigger a refresh)
    # ──────────────────────────────────────────────────────────────

    def get_cached_value(self) -> TriState:
        """
        Value as consumers should see it right now.

        Fresh → fetched value; inside grace → last known good; else UNKNOWN.
        """
        return self.policy.visible_value(self._entry, self.clock.now())

    def is_fresh(self) -> bool:
        return self.policy.is_fresh(self._entry, self.clock.now())

    def in_grace(self) -> bool:
        return self.policy.in_grace(self._entry, self.clock.now())

    def is_loading(self) -> bool:
        return self._coordinator.pending

    @property
    def last_known_good(self) -> TriState:
        return self._entry.last_known_good

    @property
    def entry(self) -> CacheEntry:
        """Copy of the current entry, for inspection only."""
        return self._entry.copy()

    # ──────────────────────────────────────────────────────────────
    # Listeners
    # ──────────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Subscription:
        if self.disposed:
            raise CacheDisposedError(f"Cache {self.name} is disposed")
        return self._hub.subscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._hub.unsubscribe(listener)

    # ──────────────────────────────────────────────────────────────
    # Writes
    # ──────────────────────────────────────────────────────────────

    def clear(self) -> None:
        """
        Reset to the initial state (e.g. on logout) and publish UNKNOWN.

        An in-flight call keeps running; its result is ignored.
        """
        self._entry.reset()
        self._coordinator.abandon()
        self.last_error = None

        if self.snapshot_path is not None:
            clear_snapshot(self.snapshot_path)

        tlog(self.logger, "🗑️", "CACHE", "CLEAR", primary=self.name)
        self._hub.publish(TriState.UNKNOWN)

    async def refresh(self) -> TriState:
        """
        Re-check the status, sharing any call already in flight.

        Returns:
            The fetched value, or last known good while in grace.

        Raises:
            StatusCheckError: fetch failed with nothing to fall back on
            CacheDisposedError: cache was disposed
        """
        if self.disposed:
            raise CacheDisposedError(f"Cache {self.name} is disposed")

        task = self._coordinator.run(self._fetch_and_apply)
        return await asyncio.shield(task)

    async def get(self, force: bool = False) -> TriState:
        """
        Cached value when fresh, otherwise a refresh.
        """
        if not force and self.is_fresh():
            return self._entry.value
        return await self.refresh()

    # ──────────────────────────────────────────────────────────────
    # Fetch cycle
    # ──────────────────────────────────────────────────────────────

    async def _fetch_and_apply(self, generation: int) -> TriState:
        start = time.monotonic()

        try:
            value = _coerce(await self.fetch())
        except Exception as e:
            return self._apply_failure(e, generation)
        finally:
            elapsed_ms = (time.monotonic() - start) * 1000
            self.logger.timing(f"Timing | {self.name + ' fetch':<34} [{elapsed_ms:8.1f} ms]")

        if not self._coordinator.is_current(generation):
            tlog(self.logger, "🟡", "REFRESH", "IGNORED", primary=f"value={value}",
                 meta="cache cleared while in flight")
            return self.get_cached_value()

        prev = self._entry.last_known_good
        self.policy.apply_success(self._entry, value, self.clock.now())
        self.last_error = None
        self._persist()

        tlog(
            self.logger,
            TRISTATE_EMOJI[value],
            "REFRESH",
            "OK",
            primary=f"value={value}",
            meta=[f"prev={prev}", f"rtt={elapsed_ms:.0f}ms"],
        )
        self._hub.publish(value)
        return value

    def _apply_failure(self, exc: Exception, generation: int) -> TriState:
        error = exc if isinstance(exc, StatusCheckError) else StatusCheckError(
            f"{self.name} status check failed: {exc.__class__.__name__}: {exc}"
        )
        if error is not exc:
            error.__cause__ = exc

        if not self._coordinator.is_current(generation):
            tlog(self.logger, "🟡", "REFRESH", "IGNORED", primary="failure",
                 meta="cache cleared while in flight")
            raise error

        now = self.clock.now()
        outcome = self.policy.apply_failure(self._entry, now)
        self.last_error = error
        self._persist()

        tlog(
            self.logger,
            GRACE_EMOJI[outcome],
            "GRACE",
            str(outcome),
            primary=f"serving={self._entry.last_known_good if outcome.serving_last_known_good else TriState.UNKNOWN}",
            meta=[
                f"deadline={self.clock.epoch_to_local_string(self._entry.grace_deadline)}",
                f"error={error}",
            ],
        )

        if outcome.serving_last_known_good:
            self._hub.publish(self._entry.last_known_good)
            return self._entry.last_known_good

        self._hub.publish(TriState.UNKNOWN)
        raise error

    def _persist(self) -> None:
        if self.snapshot_path is not None:
            store_snapshot(self.snapshot_path, self._entry)

    # ──────────────────────────────────────────────────────────────
    # Introspection
    # ──────────────────────────────────────────────────────────────

    def debug_info(self) -> dict[str, Any]:
        now = self.clock.now()
        return {
            "name": self.name,
            "entry": self._entry.to_dict(),
            "visible_value": self.policy.visible_value(self._entry, now).name,
            "fresh": self.policy.is_fresh(self._entry, now),
            "in_grace": self.policy.in_grace(self._entry, now),
            "loading": self._coordinator.pending,
            "underlying_calls": self._coordinator.calls,
            "listeners": len(self._hub),
            "last_error": str(self.last_error) if self.last_error else None,
            "policy": self.policy.summary(),
        }


def _coerce(raw: Any) -> TriState:
    """
    Map a fetch result onto a known TriState.

    An UNKNOWN (or None) answer is not a successful read.
    """
    if isinstance(raw, TriState):
        if not raw.is_known:
            raise StatusCheckError("Status check returned UNKNOWN")
        return raw
    if raw is None:
        raise StatusCheckError("Status check returned no value")
    return TriState.from_bool(bool(raw))
