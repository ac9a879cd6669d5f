from __future__ import annotations
import asyncio
from typing import Callable, Protocol


class CycleHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_every(self, interval_s: float, callback: Callable[[], None]) -> CycleHandle: ...


class _Periodic:
    """
    Re-arms loop.call_later after each run so the callback fires every interval_s.
    """
    def __init__(self, loop: asyncio.AbstractEventLoop, interval_s: float, callback: Callable[[], None]):
        self._loop = loop
        self._interval_s = interval_s
        self._callback = callback
        self._timer: asyncio.TimerHandle | None = None
        self._cancelled = False
        self._arm()

    def _arm(self) -> None:
        self._timer = self._loop.call_later(self._interval_s, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        # next tick is armed before the callback runs
        self._arm()
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class LoopScheduler:
    """Periodic callbacks on an asyncio event loop (the running one by default)."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_every(self, interval_s: float, callback: Callable[[], None]) -> CycleHandle:
        loop = self._loop or asyncio.get_running_loop()
        return _Periodic(loop, interval_s, callback)
