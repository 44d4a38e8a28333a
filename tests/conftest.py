import asyncio
import pytest

from status_cache.time_service import TimeService


class FakeClock(TimeService):
    """Manually advanced clock (epoch seconds)."""

    def __init__(self, start: float = 1_750_000_000.0):
        super().__init__()
        self.current = start

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class FakeFetch:
    """
    Scripted async status check.

    Results are consumed in order; the last one repeats. Exceptions are
    raised instead of returned. Set `gate` to hold calls until released.
    """

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0
        self.gate: asyncio.Event | None = None

    async def __call__(self):
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()

        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def clock():
    return FakeClock()
