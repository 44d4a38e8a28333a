# ─── Future imports ───
from __future__ import annotations

# ─── Standard library imports ───
import asyncio
import logging
from typing import Awaitable, Callable, Generic, Optional, TypeVar

# ─── Project imports ───
from .logger import get_logger
from .telemetry import tlog


T = TypeVar("T")

logger = get_logger("coordinator")


class RequestCoordinator(Generic[T]):
    """
    Collapses concurrent refreshes into a single in-flight call.

    Runs on one event loop, so no locks: run() checks and sets the pending
    marker without awaiting in between.

    Invariants:
    • At most one pending request at any instant
    • The pending marker is cleared inside the task, before any awaiting
      caller resumes
    • Abandoned requests run to completion; their completion no longer
      touches the marker
    """

    def __init__(self, name: str = "status"):
        self.name = name
        self._pending: Optional[asyncio.Task] = None

        # Bumped on every start and abandon; fetches compare against it
        self.generation: int = 0

        # Underlying fetches started (dedup hits excluded)
        self.calls: int = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def run(self, fetch: Callable[[int], Awaitable[T]]) -> asyncio.Task:
        """
        Return the pending request, starting one if none exists.

        Args:
            fetch: coroutine function receiving the generation number of
                   the request it serves.

        Returns:
            The shared task. Callers should await it through
            asyncio.shield() so a cancelled caller cannot cancel the
            call for everyone else.
        """
        if self._pending is not None:
            tlog(logger, "🔗", "COORD", "DEDUP", primary=self.name,
                 meta=f"generation={self.generation}", level=logging.DEBUG)
            return self._pending

        self.generation += 1
        self.calls += 1
        generation = self.generation

        self._pending = asyncio.ensure_future(self._settle(fetch(generation), generation))
        return self._pending

    async def _settle(self, call: Awaitable[T], generation: int) -> T:
        try:
            return await call
        finally:
            if self.is_current(generation):
                self._pending = None

    def abandon(self) -> None:
        """
        Forget the pending request without cancelling it.
        """
        if self._pending is not None:
            tlog(logger, "🟡", "COORD", "ABANDON", primary=self.name,
                 meta=f"generation={self.generation}")
        self._pending = None
        self.generation += 1
