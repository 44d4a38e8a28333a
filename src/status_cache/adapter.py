# ─── Future imports ───
from __future__ import annotations

# ─── Standard library imports ───
import asyncio
from dataclasses import dataclass
from typing import Optional

# ─── Project imports ───
from .logger import get_logger
from .tristate import TriState
from .errors import StatusCacheError
from .status_cache import StatusCache
from .notifications import Subscription


@dataclass(frozen=True)
class GateView:
    """Snapshot of what a consumer should render."""
    value: TriState
    last_known_good: TriState
    loading: bool
    verifying: bool
    should_show_privileged_content: bool


class PrivilegedContentGate:
    """
    Consumer-facing view over a StatusCache.

    Keeps the "show privileged content?" decision in one place:

    • fresh and TRUE                         → show
    • refresh in flight, last known TRUE     → show (optimistic)
    • inside grace, last known TRUE          → show, flagged as verifying
    • anything else                          → safe default, hide
    """

    def __init__(self, cache: StatusCache):
        self.cache = cache
        self.logger = get_logger(f"gate.{cache.name}")

        self.last_value: TriState = TriState.UNKNOWN
        self._subscription: Optional[Subscription] = None
        self._background: Optional[asyncio.Task] = None

    @property
    def mounted(self) -> bool:
        return self._subscription is not None

    def mount(self) -> None:
        """
        Subscribe to the cache and kick off a background refresh if needed.

        Must be called from a running event loop when a refresh is due;
        rendering never waits on it.
        """
        if self.mounted:
            return

        self._subscription = self.cache.subscribe(self._on_change)
        self.last_value = self.cache.get_cached_value()

        if not self.cache.is_fresh() and not self.cache.is_loading():
            self._background = asyncio.get_running_loop().create_task(self._background_refresh())

    def unmount(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _on_change(self, value: TriState) -> None:
        self.last_value = value

    async def _background_refresh(self) -> None:
        try:
            await self.cache.refresh()
        except StatusCacheError as e:
            self.logger.warning(f"Background refresh failed: {e}")

    # ─── Derived state ───

    @property
    def should_show_privileged_content(self) -> bool:
        last_known_true = self.cache.last_known_good is TriState.TRUE
        return (
            (self.cache.is_fresh() and self.cache.get_cached_value() is TriState.TRUE)
            or (self.cache.is_loading() and last_known_true)
            or (self.cache.in_grace() and last_known_true)
        )

    @property
    def verifying(self) -> bool:
        """
        True while privileged content is shown on an unconfirmed value.
        """
        if not self.cache.last_known_good.is_known:
            return False
        return self.cache.in_grace() or (self.cache.is_loading() and not self.cache.is_fresh())

    def view(self) -> GateView:
        return GateView(
            value=self.cache.get_cached_value(),
            last_known_good=self.cache.last_known_good,
            loading=self.cache.is_loading(),
            verifying=self.verifying,
            should_show_privileged_content=self.should_show_privileged_content,
        )
