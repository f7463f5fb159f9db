import asyncio
import heapq
import itertools
import time
from typing import List, Tuple


class LoopClock:
    """Wall clock and timers backed by the running asyncio event loop."""

    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class ManualClock:
    """
    Clock whose time only moves when advance() is called.

    Every sleep() is recorded in `sleeps` and parks the caller until the
    clock is advanced past its wake-up time, so backoff schedules can be
    driven step by step without waiting on real timers.
    """

    def __init__(self, start: float = 0.0):
        self.time = start
        self.sleeps: List[float] = []
        self._waiters: List[Tuple[float, int, asyncio.Future]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self.time

    @property
    def pending(self) -> int:
        return sum(1 for _, _, fut in self._waiters if not fut.done())

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        fut = asyncio.get_running_loop().create_future()
        heapq.heappush(self._waiters, (self.time + seconds, next(self._seq), fut))
        await fut

    async def advance(self, seconds: float) -> None:
        target = self.time + seconds
        while self._waiters and self._waiters[0][0] <= target:
            when, _, fut = heapq.heappop(self._waiters)
            self.time = max(self.time, when)
            if not fut.done():
                fut.set_result(None)
            await settle()
        self.time = target
        await settle()


async def settle(rounds: int = 20) -> None:
    """Yield to the loop until already-scheduled callbacks have run."""
    for _ in range(rounds):
        await asyncio.sleep(0)
