"""Countdown timer plumbing.

A *scheduler* is any callable ``scheduler(interval, callback)`` that starts
calling ``callback`` every ``interval`` seconds and returns a handle with a
``stop()`` method. Textual's ``App.set_interval`` already fits that shape;
:func:`asyncio_scheduler` and :class:`ManualScheduler` cover plain asyncio
code and front-ends that advance time themselves.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional, Protocol

__all__ = [
    "TimerHandle",
    "Scheduler",
    "CountdownTimer",
    "ManualScheduler",
    "asyncio_scheduler",
]


class TimerHandle(Protocol):
    def stop(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


class CountdownTimer:
    """At most one running periodic callback, started and cancelled explicitly."""

    def __init__(
        self,
        scheduler: Scheduler,
        callback: Callable[[], None],
        *,
        interval: float = 1.0,
    ) -> None:
        self._scheduler = scheduler
        self._callback = callback
        self._interval = interval
        self._handle: Optional[TimerHandle] = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._handle is not None:
            return
        self._handle = self._scheduler(self._interval, self._callback)

    def cancel(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.stop()


class _ManualHandle:
    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        self.interval = interval
        self.callback = callback
        self.elapsed = 0.0
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True


class ManualScheduler:
    """Scheduler whose clock only moves when :meth:`advance` is called."""

    def __init__(self) -> None:
        self._handles: list[_ManualHandle] = []

    def __call__(
        self, interval: float, callback: Callable[[], None]
    ) -> _ManualHandle:
        handle = _ManualHandle(interval, callback)
        self._handles.append(handle)
        return handle

    @property
    def active_count(self) -> int:
        return sum(1 for handle in self._handles if not handle.stopped)

    def advance(self, seconds: float) -> int:
        """Fire every callback that falls due within ``seconds``.

        Returns how many callbacks fired. A callback that stops its own
        handle ends that handle's firing immediately.
        """

        fired = 0
        for handle in list(self._handles):
            if handle.stopped:
                continue
            handle.elapsed += seconds
            while not handle.stopped and handle.elapsed >= handle.interval:
                handle.elapsed -= handle.interval
                handle.callback()
                fired += 1
        self._handles = [h for h in self._handles if not h.stopped]
        return fired


class _TaskHandle:
    def __init__(self, task: "asyncio.Task[None]") -> None:
        self._task = task

    def stop(self) -> None:
        self._task.cancel()


def asyncio_scheduler(
    interval: float, callback: Callable[[], None]
) -> _TaskHandle:
    """Run ``callback`` every ``interval`` seconds on the running event loop."""

    async def _repeat() -> None:
        while True:
            await asyncio.sleep(interval)
            callback()

    return _TaskHandle(asyncio.get_running_loop().create_task(_repeat()))
