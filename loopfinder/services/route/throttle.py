"""Sequential, paced execution of provider calls."""
import asyncio
import time
from typing import Awaitable, Callable, Optional, TypeVar

T = TypeVar("T")


class DeadlineExceeded(Exception):
    """The executor's deadline passed before a call could start"""


class PacedExecutor:
    """
    Runs provider calls one at a time with a fixed pause after each success.

    Only one call is ever in flight, even if several coroutines submit at
    once. A failed call raises straight through without the pause. When a
    deadline is set, calls submitted after it has passed raise
    DeadlineExceeded without running.
    """

    def __init__(
        self,
        delay_seconds: float = 0.2,
        deadline_seconds: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self._clock = clock
        self._deadline = clock() + deadline_seconds if deadline_seconds is not None else None
        self._lock = asyncio.Lock()
        self.calls_made = 0

    def expired(self) -> bool:
        return self._deadline is not None and self._clock() >= self._deadline

    async def submit(self, call: Callable[[], Awaitable[T]]) -> T:
        async with self._lock:
            if self.expired():
                raise DeadlineExceeded("request deadline exceeded")

            self.calls_made += 1
            result = await call()

            if self.delay_seconds > 0:
                await self._sleep(self.delay_seconds)
            return result
