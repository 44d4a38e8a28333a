# ─── Future imports ───
from __future__ import annotations

# ─── Standard library imports ───
from typing import Callable

# ─── Project imports ───
from .logger import get_logger
from .tristate import TriState


Listener = Callable[[TriState], None]

logger = get_logger("notifications")


class Subscription:
    """
    Handle returned by NotificationHub.subscribe().

    The owning consumer calls unsubscribe() on teardown. Calling it more
    than once is a no-op.
    """

    def __init__(self, hub: NotificationHub, listener: Listener):
        self._hub = hub
        self.listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._hub.unsubscribe(self.listener)
            self.active = False

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc) -> None:
        self.unsubscribe()


class NotificationHub:
    """
    Synchronous fan-out of status changes to subscribers.

    • Set semantics: a listener registered twice is called once
    • No ordering guarantee between listeners
    • A listener that raises is logged and skipped; publish() never raises
    """

    def __init__(self):
        self._listeners: set[Listener] = set()

    def __len__(self) -> int:
        return len(self._listeners)

    def __contains__(self, listener: Listener) -> bool:
        return listener in self._listeners

    def subscribe(self, listener: Listener) -> Subscription:
        self._listeners.add(listener)
        return Subscription(self, listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners.discard(listener)

    def clear(self) -> None:
        self._listeners.clear()

    def publish(self, value: TriState) -> int:
        """
        Invoke every current listener with `value`.

        Iterates over a copy so listeners may unsubscribe themselves.

        Returns:
            Number of listeners that failed.
        """
        failures = 0
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                failures += 1
                logger.exception(f"Listener {listener!r} failed on {value}")
        return failures
