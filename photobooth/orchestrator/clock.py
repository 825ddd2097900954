"""
Clocks driving the capture sequencer.

AsyncioClock suspends on the event loop; FakeClock never waits and records
every requested sleep, so a full countdown runs instantly in tests.
"""
import asyncio
import time


class AsyncioClock:
    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float):
        await asyncio.sleep(seconds)


class FakeClock:
    def __init__(self, start: float = 0.0):
        self._now = start
        self.sleeps: list[float] = []

    def now(self) -> float:
        return self._now

    async def sleep(self, seconds: float):
        self.sleeps.append(seconds)
        self._now += seconds
        # still yield so other tasks (cancel requests) get a turn
        await asyncio.sleep(0)
