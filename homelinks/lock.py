import asyncio
from collections import deque
from typing import Deque


class FifoLock:
    """Async mutex that hands ownership to waiters strictly in arrival order.

    There is no timeout: a holder that never releases stalls every later
    waiter. A waiter cancelled while queued leaves the queue without taking
    the lock.
    """

    def __init__(self) -> None:
        self._waiters: Deque[asyncio.Future] = deque()
        self._locked = False

    def locked(self) -> bool:
        return self._locked

    @property
    def waiting(self) -> int:
        return sum(1 for fut in self._waiters if not fut.done())

    async def acquire(self) -> None:
        if not self._locked and not self._waiters:
            self._locked = True
            return

        fut = asyncio.get_running_loop().create_future()
        self._waiters.append(fut)
        try:
            await fut
        except asyncio.CancelledError:
            if fut.done() and not fut.cancelled():
                # ownership was handed over just before the cancel landed
                self.release()
            elif fut in self._waiters:
                self._waiters.remove(fut)
            raise

    def release(self) -> None:
        if not self._locked:
            raise RuntimeError("FifoLock.release() called on an unlocked lock")
        while self._waiters:
            fut = self._waiters.popleft()
            if not fut.done():
                # stays locked: ownership moves straight to the next waiter
                fut.set_result(None)
                return
        self._locked = False

    async def __aenter__(self) -> "FifoLock":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.release()
